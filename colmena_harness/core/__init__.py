"""Core infrastructure: settings, logging, exceptions."""

from .config import Settings, get_settings
from .exceptions import (
    ConfigurationError,
    ContainerNotFoundError,
    EnvironmentStartupError,
    HarnessError,
    RuntimeCommandError,
    RuntimeUnavailableError,
)
from .logging import get_logger, setup_logging


__all__ = [
    "ConfigurationError",
    "ContainerNotFoundError",
    "EnvironmentStartupError",
    "HarnessError",
    "RuntimeCommandError",
    "RuntimeUnavailableError",
    "Settings",
    "get_logger",
    "get_settings",
    "setup_logging",
]
