"""Configuration service: loads .env once and exposes form settings."""
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from threading import Lock

logger = logging.getLogger(__name__)

SETTING_KEYS = {
    "API_END_POINT",
    "MOBILE_PREFIX",
    "EMERGENCY_CONTACT_MAX",
    "ATTACHMENTS_ENABLED",
    "ATTACHMENT_MAX_BYTES",
    "REQUEST_TIMEOUT",
}

DEFAULT_API_END_POINT = "http://localhost:8000/users"
DEFAULT_MOBILE_PREFIX = "09"
DEFAULT_EMERGENCY_CONTACT_MAX = 2
DEFAULT_ATTACHMENT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_REQUEST_TIMEOUT = 15.0

_ENV_LOADED = False
_ENV_LOCK = Lock()


@dataclass(frozen=True)
class FormSettings:
    """Injected configuration for the registration wizard."""

    api_end_point: str = DEFAULT_API_END_POINT
    mobile_prefix: str = DEFAULT_MOBILE_PREFIX
    emergency_contact_max: int = DEFAULT_EMERGENCY_CONTACT_MAX
    attachments_enabled: bool = False
    attachment_max_bytes: int = DEFAULT_ATTACHMENT_MAX_BYTES
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def _load_env(env_path: str = ".env") -> None:
    """Load settings from .env file if present; real environment variables win."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        path = Path(env_path)
        if path.exists():
            for raw_line in path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in SETTING_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _reset_env_cache() -> None:
    """Force the next get_settings() call to re-read .env."""
    global _ENV_LOADED
    _ENV_LOADED = False


def _int_setting(key: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {raw!r}, using {default}")
        return default
    if value < minimum:
        logger.warning(f"{key} must be >= {minimum}, got {value}, using {default}")
        return default
    return value


def _float_setting(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {key}: {raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{key} must be positive, got {value}, using {default}")
        return default
    return value


def _bool_setting(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_settings() -> FormSettings:
    """
    Read form settings from the environment.

    Returns:
        FormSettings built from API_END_POINT, MOBILE_PREFIX,
        EMERGENCY_CONTACT_MAX, ATTACHMENTS_ENABLED, ATTACHMENT_MAX_BYTES and
        REQUEST_TIMEOUT

    Behavior:
        - Loads .env once per process
        - Invalid numbers fall back to defaults with a warning
        - A mobile prefix that isn't exactly two digits falls back to "09"
    """
    _load_env()

    prefix = os.getenv("MOBILE_PREFIX", DEFAULT_MOBILE_PREFIX).strip()
    if not re.fullmatch(r"[0-9]{2}", prefix):
        logger.warning(f"Invalid MOBILE_PREFIX {prefix!r}, using {DEFAULT_MOBILE_PREFIX}")
        prefix = DEFAULT_MOBILE_PREFIX

    return FormSettings(
        api_end_point=os.getenv("API_END_POINT", DEFAULT_API_END_POINT).strip() or DEFAULT_API_END_POINT,
        mobile_prefix=prefix,
        emergency_contact_max=_int_setting("EMERGENCY_CONTACT_MAX", DEFAULT_EMERGENCY_CONTACT_MAX),
        attachments_enabled=_bool_setting("ATTACHMENTS_ENABLED"),
        attachment_max_bytes=_int_setting("ATTACHMENT_MAX_BYTES", DEFAULT_ATTACHMENT_MAX_BYTES),
        request_timeout=_float_setting("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
    )
