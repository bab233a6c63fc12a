"""
ColmenaOS integration-test harness.

Two flows share this package:
- the service probe (``colmena-probe``): one-shot reachability report
- the browser integration suite (``colmena-e2e``): Playwright tests in system_tests/
"""

__version__ = "0.1.0"
