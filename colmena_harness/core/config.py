"""Harness settings with Pydantic validation and environment loading."""

from __future__ import annotations

import shlex
from functools import lru_cache
from typing import Dict, List, Literal, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


FRONTEND_SERVICE = "ColmenaOS Frontend"
BACKEND_SERVICE = "ColmenaOS Backend"


def _default_services() -> Dict[str, str]:
    return {
        FRONTEND_SERVICE: "http://localhost:7180",
        BACKEND_SERVICE: "http://localhost:7100",
        "pgAdmin": "http://localhost:7050",
        "Nextcloud": "http://localhost:7103",
        "Mail Service UI": "http://localhost:7080",
    }


class Settings(BaseSettings):
    """Harness settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Deployment under test
    frontend_url: str = Field(
        default="http://localhost:7180", description="Frontend base URL"
    )
    backend_url: str = Field(
        default="http://localhost:7100", description="Backend API base URL"
    )

    # Service registry (JSON object in PROBE_SERVICES)
    services: Dict[str, str] = Field(
        default_factory=_default_services,
        alias="PROBE_SERVICES",
        description="Ordered mapping of service name to base URL",
    )
    core_services: List[str] = Field(
        default_factory=lambda: [FRONTEND_SERVICE, BACKEND_SERVICE],
        description="Services that must both be reachable before auth testing",
    )

    # Probe behaviour
    probe_timeout: float = Field(
        default=5.0, gt=0, le=60, description="HTTP probe timeout in seconds"
    )
    http_probe_backend: Literal["httpx", "curl"] = Field(
        default="httpx", description="HTTP probe implementation"
    )

    # Container runtime
    runtime_backend: Literal["auto", "sdk", "cli"] = Field(
        default="auto",
        description="auto: docker SDK when the daemon answers, CLI otherwise",
    )
    compose_file: str = Field(
        default="docker-compose.local.yml", description="Compose definition file"
    )
    compose_command: str = Field(
        default="docker compose", description="Compose executable and subcommand"
    )
    compose_project: Optional[str] = Field(
        default=None, description="Compose project name (SDK status filter)"
    )
    app_service: str = Field(
        default="colmena-app", description="Compose service whose logs are tailed"
    )
    log_tail: int = Field(default=10, ge=1, le=1000)

    # Database check
    database_container: str = Field(default="colmena_postgres")
    database_user: str = Field(default="colmena")
    database_name: str = Field(default="colmena")
    database_marker: str = Field(default="Database OK")

    # Credentials - env vars are SUPERADMIN_EMAIL and SUPERADMIN_PASSWORD
    superadmin_email: str = Field(
        default="admin@example.com", alias="SUPERADMIN_EMAIL"
    )
    superadmin_password: str = Field(
        default="superadmin123", alias="SUPERADMIN_PASSWORD"
    )

    # Browser suite
    require_login_form: bool = Field(
        default=False,
        alias="E2E_REQUIRE_LOGIN_FORM",
        description="Fail instead of skip when the login form is absent",
    )
    stack_port: int = Field(default=7180, ge=1, le=65535)
    stack_startup_timeout: float = Field(default=120.0, gt=0)
    ci: bool = Field(default=False, alias="CI")

    # Logging
    log_level: str = Field(
        default="WARNING", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    log_format: str = Field(default="text", description="Log format: json or text")

    @field_validator("frontend_url", "backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("ci", mode="before")
    @classmethod
    def parse_ci(cls, v):
        # CI runners export CI=true, CI=1 or an empty string
        if isinstance(v, str):
            return v.strip().lower() not in ("", "0", "false", "no")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @model_validator(mode="after")
    def check_core_services_registered(self) -> "Settings":
        missing = [name for name in self.core_services if name not in self.services]
        if missing:
            raise ValueError(f"core services not in service registry: {missing}")
        return self

    @property
    def compose_argv(self) -> List[str]:
        """Compose command split into argv, including ``-f <file>``."""
        return [*shlex.split(self.compose_command), "-f", self.compose_file]


@lru_cache
def get_settings() -> Settings:
    """Cached settings factory."""
    try:
        return Settings()
    except ValidationError as e:
        messages = [err["msg"] for err in e.errors()]
        raise ConfigurationError(
            f"Invalid harness settings: {'; '.join(messages)}",
            details={"errors": messages},
        ) from e
