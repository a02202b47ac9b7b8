"""Global test fixtures."""

import os

import logfire

# Secrets must be set before any test module builds a Config
os.environ.setdefault("OGW_AUTH__STATE_SECRET", "test-state-secret-for-unit-tests-32")
os.environ.setdefault("OGW_SITE_SESSION__SECRET", "test-site-session-secret-unit-tests")

logfire.configure(send_to_logfire=False, console=False)
