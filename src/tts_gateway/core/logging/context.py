"""
Request context and configuration state for logging.

The request id lives in a ContextVar so concurrent requests served by the
same event loop keep their own ids. Level and config are process-wide.

Environment Variables:
    - TTS_GATEWAY_LOG_LEVEL: Log level (1-4 or name)
    - TTS_GATEWAY_LOG_DIR: Directory for the JSONL log file
    - TTS_GATEWAY_JSONL_FILE: JSONL filename
    - TTS_GATEWAY_LOG_ROTATE_BYTES: Max file size before rotation
    - TTS_GATEWAY_LOG_ROTATE_BACKUP: Rotated files to keep
"""
from __future__ import annotations

import os
from contextvars import ContextVar
from typing import Any, Dict

import yaml

from .levels import LEVEL_NAMES, LogLevel

# "-" outside of a request
_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_configured: bool = False
_log_config: Dict[str, Any] = {}
_current_level: LogLevel = LogLevel.NORMAL


def get_request_id() -> str:
    """Request id of the current context, or "-"."""
    return _request_id.get()


def set_request_id(rid: str) -> None:
    """Bind a request id to the current context."""
    _request_id.set(rid)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def get_level_name() -> str:
    return LEVEL_NAMES.get(_current_level, "NORMAL")


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def get_log_config() -> Dict[str, Any]:
    return _log_config


def set_log_config(config: Dict[str, Any]) -> None:
    global _log_config
    _log_config = config


def _env_int(name: str, cfg: Dict[str, Any], key: str) -> None:
    raw = os.getenv(name)
    if not raw:
        return
    try:
        cfg[key] = int(raw)
    except ValueError:
        pass  # keep file/default value


def read_logging_config() -> Dict[str, Any]:
    """
    Resolve logging configuration.

    Priority (highest first):
        1. TTS_GATEWAY_LOG_* environment variables
        2. ``logging`` section of the settings file
        3. Built-in defaults

    Returns:
        Dictionary with the resolved logging options.
    """
    cfg: Dict[str, Any] = {}

    settings_path = os.getenv("TTS_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        from tts_gateway.core.config import load_settings
        settings = load_settings(settings_path)
        cfg.update(settings.raw.get("logging", {}) or {})
    except (OSError, yaml.YAMLError):
        # Missing or unreadable settings file: defaults apply
        pass

    if os.getenv("TTS_GATEWAY_LOG_LEVEL"):
        cfg["level"] = os.environ["TTS_GATEWAY_LOG_LEVEL"]
    if os.getenv("TTS_GATEWAY_LOG_DIR"):
        cfg["log_dir"] = os.environ["TTS_GATEWAY_LOG_DIR"]
    if os.getenv("TTS_GATEWAY_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["TTS_GATEWAY_JSONL_FILE"]
    _env_int("TTS_GATEWAY_LOG_ROTATE_BYTES", cfg, "rotate_max_bytes")
    _env_int("TTS_GATEWAY_LOG_ROTATE_BACKUP", cfg, "rotate_backup_count")

    return cfg
