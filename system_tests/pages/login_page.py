"""Page objects for the ColmenaOS frontend."""

from __future__ import annotations

from playwright.sync_api import Locator, Page

from system_tests.config import Credentials, SystemTestConfig
from system_tests.fixtures.preconditions import PreconditionCheck


class AppPage:
    """Frontend shell: navigation, login form, user menu, logout, data views."""

    def __init__(self, page: Page, config: SystemTestConfig):
        self.page = page
        self.config = config
        selectors = config.selectors
        self.email_input: Locator = page.locator(selectors.email_input)
        self.password_input: Locator = page.locator(selectors.password_input)
        self.login_button: Locator = page.locator(selectors.login_button)
        self.user_element: Locator = page.locator(selectors.user_element)
        self.logout_control: Locator = page.locator(selectors.logout_control)
        self.data_container: Locator = page.locator(selectors.data_container)
        self.data_rows: Locator = page.locator(selectors.data_row)

    def open(self) -> "AppPage":
        self.page.goto(self.config.frontend_url)
        return self

    def settle(self) -> None:
        self.page.wait_for_load_state("networkidle")

    def login_form(self) -> PreconditionCheck:
        return PreconditionCheck(
            name="login form",
            present=self.email_input.first.is_visible(),
            detail=f"no email field at {self.page.url}",
        )

    def logout_available(self) -> PreconditionCheck:
        return PreconditionCheck(
            name="logout control",
            present=self.logout_control.first.is_visible(),
            detail=f"no logout control at {self.page.url}",
        )

    def data_view(self) -> PreconditionCheck:
        return PreconditionCheck(
            name="data view",
            present=self.data_container.first.is_visible(),
            detail=f"no table or list at {self.page.url}",
        )

    def login(self, credentials: Credentials) -> None:
        self.email_input.first.fill(credentials.email)
        self.password_input.first.fill(credentials.password)
        self.login_button.first.click()
        self.settle()

    def logout(self) -> None:
        self.logout_control.first.click()
        self.settle()
