"""Shared constants for rpc-dispatch."""

PACKAGE_NAME = "rpc-dispatch"
PACKAGE_VERSION = "0.1.0"

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)25s:%(lineno)-4d - %(levelname)-7s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Middleware defaults
DEFAULT_SLOW_CALL_MS = 1000.0  # access log warns above this
