"""Global test fixtures."""

import os

# Settings are read when the plugin configures, before any fixture runs
os.environ.setdefault("RUNAS_VERIFY", "true")
os.environ.setdefault("RUNAS_LOG_PRINCIPAL", "true")

pytest_plugins = ["pytester", "runas.pytest_plugin"]
