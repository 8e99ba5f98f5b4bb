"""Settings loading and validation for rpc-dispatch."""

from rpc_dispatch.config.loader import load_settings, parse_settings
from rpc_dispatch.config.env import expand_env_vars
from rpc_dispatch.config.schema import (
    AccessLogSettings,
    DispatchSettings,
    RecoverySettings,
    TimeoutSettings,
)
from rpc_dispatch.config.wiring import configure, middlewares_from_settings

__all__ = [
    "AccessLogSettings",
    "DispatchSettings",
    "RecoverySettings",
    "TimeoutSettings",
    "configure",
    "expand_env_vars",
    "load_settings",
    "middlewares_from_settings",
    "parse_settings",
]
