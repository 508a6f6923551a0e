"""
Config Store — persists the setup wizard's answers as JSON.

Stores settings in ~/Library/Application Support/Daily Tracker/config.json
on macOS, %APPDATA%/Daily Tracker on Windows and ~/.config/Daily Tracker
elsewhere. ``DAILY_TRACKER_CONFIG_DIR`` overrides the location.

Tokens are base64-encoded (not encrypted) for light obfuscation.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from daily_tracker.logger import get_logger

logger = get_logger(__name__)

_APP_NAME = "Daily Tracker"


def _get_config_dir() -> Path:
    """Return the platform-appropriate config directory."""
    override = os.environ.get("DAILY_TRACKER_CONFIG_DIR")
    if override:
        return Path(override)

    system = platform.system()
    if system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    elif system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path.home() / ".config"
    return base / _APP_NAME


def _config_path() -> Path:
    """Return the full path to config.json."""
    return _get_config_dir() / "config.json"


# Fields that contain sensitive tokens, stored base64-encoded
_SENSITIVE_FIELDS = {"github_token"}

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "github_token": "",
    "github_username": "",
    "report_dir": str(Path.home() / "daily-reports"),
    "timezone": "UTC",
    "report_hour": 18,
    "report_minute": 0,
    "git_enabled": False,
    "git_repo_path": "",
    "git_reports_subdir": "reports",
    "git_remote": "origin",
    "git_branch": "main",
    "log_level": "INFO",
}

# Mapping: config key → environment variable read by ``Settings``
_ENV_MAP: Dict[str, str] = {key: key.upper() for key in DEFAULT_CONFIG}


def _encode(value: str) -> str:
    """Base64-encode a string for light obfuscation."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _decode(value: str) -> str:
    """Decode a base64-encoded string."""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError):
        return value  # stored in clear by hand


def load_config() -> Dict[str, Any]:
    """
    Load configuration from disk.

    Returns DEFAULT_CONFIG merged with any saved values.
    Missing keys get default values; extra keys are preserved.
    """
    config = dict(DEFAULT_CONFIG)
    path = _config_path()

    if path.exists():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
            return config

        for key, value in raw.items():
            if key in _SENSITIVE_FIELDS and isinstance(value, str) and value:
                config[key] = _decode(value)
            else:
                config[key] = value

    return config


def save_config(config: Dict[str, Any]) -> Path:
    """
    Persist configuration to disk and return the file path.

    Sensitive fields are base64-encoded before writing.
    """
    config_dir = _get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    to_write: Dict[str, Any] = {}
    for key, value in config.items():
        if key in _SENSITIVE_FIELDS and isinstance(value, str) and value:
            to_write[key] = _encode(value)
        else:
            to_write[key] = value

    path = _config_path()
    path.write_text(json.dumps(to_write, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def init_env_from_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Inject saved values into ``os.environ`` so ``Settings`` picks them up.

    Variables already set in the environment win over the file, so a
    ``GITHUB_TOKEN`` exported in the shell is never overwritten.

    Args:
        config: Pre-loaded config dict. If ``None``, loads from disk.

    Returns:
        The config dict that was applied.
    """
    if config is None:
        config = load_config()

    for config_key, env_var in _ENV_MAP.items():
        value = config.get(config_key, "")
        str_value = str(value).lower() if isinstance(value, bool) else str(value)
        if str_value and env_var not in os.environ:
            os.environ[env_var] = str_value

    return config


def apply_config(config: Dict[str, Any]) -> None:
    """Overwrite the environment with *config* (used right after setup)."""
    for config_key, env_var in _ENV_MAP.items():
        value = config.get(config_key, "")
        str_value = str(value).lower() if isinstance(value, bool) else str(value)
        if str_value:
            os.environ[env_var] = str_value
        elif env_var in os.environ:
            del os.environ[env_var]


def config_exists() -> bool:
    """Check if a config file already exists."""
    return _config_path().exists()
