"""Page objects for the browser integration suite."""

from system_tests.pages.login_page import AppPage

__all__ = ["AppPage"]
