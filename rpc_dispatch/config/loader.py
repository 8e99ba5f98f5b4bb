"""Settings file loading and validation.

Loads a YAML settings file, expands ``${ENV_VAR}`` placeholders, and
validates against :class:`~rpc_dispatch.config.schema.DispatchSettings`.
"""

import logging
import os
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from rpc_dispatch.config.env import expand_env_vars
from rpc_dispatch.config.schema import DispatchSettings
from rpc_dispatch.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised settings file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})


def _read_settings_file(fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML settings file from *fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.  An empty
    file yields an empty mapping.
    """
    ext = os.path.splitext(fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported settings file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading settings file: {fpath}\n  {exc}") from exc

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError("Top-level settings content must be a YAML mapping (dictionary).")
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


def parse_settings(raw_data: Dict[str, Any]) -> DispatchSettings:
    """Expand env vars in *raw_data* and validate it.

    Raises:
        ConfigurationError: All validation failures, reported at once.
    """
    raw_data = expand_env_vars(raw_data)
    try:
        return DispatchSettings.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Settings validation failed ({len(exc.errors())} error(s)):\n{error_summary}"
        ) from exc


def load_settings(fpath: str) -> DispatchSettings:
    """Load, expand and validate the settings file at *fpath*."""
    logger.debug("Loading settings file: %s", fpath)

    if not os.path.exists(fpath):
        raise ConfigurationError(f"Settings file does not exist: {fpath}")

    settings = parse_settings(_read_settings_file(fpath))
    logger.info(
        "Settings '%s' loaded (timeout=%s, access_log=%s, recovery=%s).",
        fpath,
        settings.timeout.seconds,
        settings.access_log.enabled,
        settings.recovery.enabled,
    )
    return settings
