"""
System Test Configuration.

Base URLs, credentials, UI selectors and URL patterns for the browser
integration suite.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from colmena_harness.core.config import Settings, get_settings


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


@dataclass
class Selectors:
    """CSS/text selectors for the UI elements the suite interacts with."""

    email_input: str = (
        'input[type="email"], input[name="email"], input[placeholder*="email" i]'
    )
    password_input: str = 'input[type="password"], input[name="password"]'
    login_button: str = (
        'button:has-text("Login"), button:has-text("Sign In"), '
        'input[type="submit"][value*="Login"], input[type="submit"]'
    )
    user_element: str = '[data-testid="user-menu"], .user-profile, .user-name'
    logout_control: str = (
        'button:has-text("Logout"), a:has-text("Logout"), [data-testid="logout"]'
    )
    data_container: str = (
        'table, .data-table, .list-items, [data-testid*="list"], [data-testid*="table"]'
    )
    data_row: str = 'tr, .list-item, [data-testid*="item"]'


@dataclass
class SystemTestConfig:
    """Configuration for the browser integration suite."""

    frontend_url: str = "http://localhost:7180"
    backend_url: str = "http://localhost:7100"
    superadmin: Credentials = field(
        default_factory=lambda: Credentials("admin@example.com", "superadmin123")
    )

    # Fail instead of skip when the login form does not render
    require_login_form: bool = False

    selectors: Selectors = field(default_factory=Selectors)

    # URL/title expectations
    title_pattern: re.Pattern[str] = re.compile(r"ColmenaOS|Colmena|Servers", re.IGNORECASE)
    post_login_url_pattern: re.Pattern[str] = re.compile(r"dashboard|home|profile")
    login_route_pattern: re.Pattern[str] = re.compile(r"login|signin")
    openapi_content_type: str = "application/vnd.oai.openapi"
    unauthorized_status: int = 401

    # API paths
    api_root_path: str = "/api/"
    schema_path: str = "/api/schema/"
    healthcheck_path: str = "/api/healthcheck"

    http_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "SystemTestConfig":
        return cls(
            frontend_url=settings.frontend_url,
            backend_url=settings.backend_url,
            superadmin=Credentials(settings.superadmin_email, settings.superadmin_password),
            require_login_form=settings.require_login_form,
        )

    @property
    def logout_destination_pattern(self) -> re.Pattern[str]:
        """Login/sign-in route, or the application root."""
        root = re.escape(self.frontend_url)
        return re.compile(rf"{self.login_route_pattern.pattern}|^{root}/?$")

    def backend(self, path: str) -> str:
        return f"{self.backend_url}{path}"

    def frontend(self, path: str) -> str:
        return f"{self.frontend_url}{path}"


_config: SystemTestConfig | None = None


def get_config() -> SystemTestConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = SystemTestConfig.from_settings(get_settings())
    return _config
