"""OCR provider settings.

Settings are resolved once, in increasing priority:
1. Defaults below
2. The [ocr] table of a TOML file named by BILLSCAN_CONFIG
3. BILLSCAN_OCR_* environment variables
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from billscan.runtime.logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "BILLSCAN_CONFIG"

# Setting name -> environment variable
_ENV_VARS = {
    "url": "BILLSCAN_OCR_URL",
    "api_key": "BILLSCAN_OCR_API_KEY",
    "language": "BILLSCAN_OCR_LANGUAGE",
    "timeout": "BILLSCAN_OCR_TIMEOUT",
    "max_attempts": "BILLSCAN_OCR_MAX_ATTEMPTS",
    "retry_delay": "BILLSCAN_OCR_RETRY_DELAY",
    "max_image_kb": "BILLSCAN_OCR_MAX_IMAGE_KB",
}


@dataclass(frozen=True)
class OCRSettings:
    """Connection and retry settings for the OCR provider."""

    url: str = "https://api.ocr.space/parse/image"
    api_key: str = "helloworld"  # OCR.space public demo key
    language: str = "eng"
    timeout: float = 30.0  # Seconds per request
    max_attempts: int = 2
    retry_delay: float = 2.0  # Seconds between failed attempts
    max_image_kb: int = 1024  # Larger uploads are refused before sending


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw TOML/env value to the type of the named setting."""
    default = getattr(OCRSettings, name)
    try:
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid value for OCR setting {name!r}: {value!r}") from e
    return str(value)


def _load_toml_overrides(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}

    with open(path, "rb") as f:
        config = tomllib.load(f)

    known = {f.name for f in fields(OCRSettings)}
    overrides: dict[str, Any] = {}
    for key, value in config.get("ocr", {}).items():
        if key not in known:
            logger.warning("Ignoring unknown OCR setting %r in %s", key, path)
            continue
        overrides[key] = _coerce(key, value)
    return overrides


def _load_env_overrides(environ: dict[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name, env_var in _ENV_VARS.items():
        value = environ.get(env_var, "").strip()
        if value:
            overrides[name] = _coerce(name, value)
    return overrides


def load_settings(config_path: str | None = None, environ: dict[str, str] | None = None) -> OCRSettings:
    """
    Build OCRSettings from defaults, an optional TOML file and the environment.

    Args:
        config_path: TOML path override. If None, uses BILLSCAN_CONFIG when set.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Resolved settings

    Raises:
        ValueError: If a configured value cannot be converted
    """
    env = dict(os.environ) if environ is None else environ
    settings = OCRSettings()

    path_str = config_path if config_path is not None else env.get(CONFIG_ENV_VAR)
    if path_str:
        settings = replace(settings, **_load_toml_overrides(Path(path_str)))

    settings = replace(settings, **_load_env_overrides(env))
    if settings.max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {settings.max_attempts}")
    return settings


# Module-level singleton
_settings: OCRSettings | None = None


def get_settings() -> OCRSettings:
    """Get the singleton OCRSettings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
