"""``${VAR}`` / ``${VAR:-default}`` expansion for raw settings data."""

from __future__ import annotations

import os
import re
from typing import Any

# ${NAME} or ${NAME:-fallback}
_ENV_VAR_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _substitute(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    value = os.environ.get(name)
    if value is not None:
        return value
    if fallback is not None:
        return fallback
    return match.group(0)


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment references in string leaves.

    Unset variables without a fallback keep their placeholder so the
    validation error points at it.  Dicts and lists are walked; other
    values are returned unchanged.
    """
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(_substitute, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value
