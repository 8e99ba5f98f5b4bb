"""Pydantic settings models for rpc-dispatch.

Settings only configure the optional built-in middlewares and logging;
the dispatch engine itself has nothing to tune.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from rpc_dispatch.constants import DEFAULT_LOG_LEVEL, DEFAULT_SLOW_CALL_MS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TimeoutSettings(BaseModel):
    """Deadline for the whole downstream chain. ``None`` disables it."""

    seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds.",
    )


class AccessLogSettings(BaseModel):
    """Per-request access logging."""

    enabled: bool = Field(default=False)
    slow_call_ms: Optional[float] = Field(
        default=DEFAULT_SLOW_CALL_MS,
        ge=0,
        description="Log completions slower than this at WARNING.",
    )


class RecoverySettings(BaseModel):
    """Exception safety net around the chain."""

    enabled: bool = Field(default=False)
    log_tracebacks: bool = Field(default=True)


class DispatchSettings(BaseModel):
    """Top-level settings document."""

    log_level: LogLevel = Field(default=DEFAULT_LOG_LEVEL)
    timeout: TimeoutSettings = Field(default_factory=TimeoutSettings)
    access_log: AccessLogSettings = Field(default_factory=AccessLogSettings)
    recovery: RecoverySettings = Field(default_factory=RecoverySettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v
