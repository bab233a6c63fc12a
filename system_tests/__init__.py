"""
Browser Integration Suite.

Black-box tests that drive the deployed ColmenaOS stack through real
browser engines (Playwright) and plain HTTP.

Key Features:
- Compose stack bootstrap with reuse outside CI
- Fresh browser context per case, three-engine matrix
- Explicit skip/fail for absent UI preconditions
- JSON failure reports with application service logs
"""
