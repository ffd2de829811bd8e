"""
Configuration Management for tts-gateway.

    - Default values (Defaults class)
    - Dataclass-based configuration sections
    - YAML file loading with environment variable overrides
    - Shared-secret resolution behind a small ConfigProvider interface

Configuration Hierarchy (highest priority first):
    1. Environment variables (AZURE_SPEECH_KEY, TOKEN, ...)
    2. YAML config file (config/settings.yaml)
    3. Defaults class values

Example settings.yaml:
    speech:
      backend: azure
      region: eastus
      timeout_s: 30

    retry:
      max_attempts: 3
      delay_ms: 0

    bindings:
      TOKEN: ""      # shared secret, empty disables auth
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

import yaml


class ConfigValidationError(Exception):
    """Raised when a configuration value is out of bounds or malformed."""
    pass


class Defaults:
    """Default configuration values."""

    # ─────────────────────────────────────────────────────────────────────────
    # Retry
    # ─────────────────────────────────────────────────────────────────────────
    RETRY_MAX_ATTEMPTS = 3          # Synthesis attempts per request
    RETRY_DELAY_MS = 0              # Pause between attempts

    # ─────────────────────────────────────────────────────────────────────────
    # Speech service
    # ─────────────────────────────────────────────────────────────────────────
    SPEECH_BACKEND = "azure"
    SPEECH_REGION = "eastus"
    SPEECH_TIMEOUT_S = 30.0
    SPEECH_USER_AGENT = "tts-gateway"

    # ─────────────────────────────────────────────────────────────────────────
    # Request defaults
    # ─────────────────────────────────────────────────────────────────────────
    VOICE_NAME = "zh-CN-XiaoxiaoNeural"
    AUDIO_FORMAT = "audio-24khz-48kbitrate-mono-mp3"

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80


@dataclass
class RetryConfig:
    """How often a failed synthesis call is retried."""
    max_attempts: int = Defaults.RETRY_MAX_ATTEMPTS
    delay_ms: int = Defaults.RETRY_DELAY_MS


@dataclass
class SpeechConfig:
    """
    Connection settings for the external speech service.

    ``endpoint`` overrides the region-derived Azure URL (useful for
    sovereign clouds or a local proxy).
    """
    backend: str = Defaults.SPEECH_BACKEND
    region: str = Defaults.SPEECH_REGION
    key: str = ""
    endpoint: Optional[str] = None
    timeout_s: float = Defaults.SPEECH_TIMEOUT_S
    user_agent: str = Defaults.SPEECH_USER_AGENT


@dataclass
class LoggingConfig:
    """Level and file output are read by core.logging itself."""
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS


@dataclass
class GatewayConfig:
    """
    Validated configuration for the synthesis pipeline.

    Usage:
        settings = load_settings("config/settings.yaml")
        config = GatewayConfig.from_settings(settings)
        print(config.retry.max_attempts)
    """
    retry: RetryConfig = field(default_factory=RetryConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GatewayConfig":
        """
        Build a GatewayConfig from raw settings.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        retry_raw = raw.get("retry", {}) or {}
        try:
            retry = RetryConfig(
                max_attempts=int(retry_raw.get("max_attempts", Defaults.RETRY_MAX_ATTEMPTS)),
                delay_ms=int(retry_raw.get("delay_ms", Defaults.RETRY_DELAY_MS)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"retry section is malformed: {e}") from e
        cls._validate_positive("retry.max_attempts", retry.max_attempts)
        cls._validate_non_negative("retry.delay_ms", retry.delay_ms)

        speech_raw = raw.get("speech", {}) or {}
        speech = SpeechConfig(
            backend=str(speech_raw.get("backend", Defaults.SPEECH_BACKEND)).lower(),
            region=str(speech_raw.get("region", Defaults.SPEECH_REGION)),
            key=str(speech_raw.get("key", "") or ""),
            endpoint=speech_raw.get("endpoint") or None,
            timeout_s=float(speech_raw.get("timeout_s", Defaults.SPEECH_TIMEOUT_S)),
            user_agent=str(speech_raw.get("user_agent", Defaults.SPEECH_USER_AGENT)),
        )
        cls._validate_positive("speech.timeout_s", speech.timeout_s)
        if not speech.endpoint and not speech.region:
            raise ConfigValidationError("speech.region or speech.endpoint must be set")

        logging_raw = raw.get("logging", {}) or {}
        logging_cfg = LoggingConfig(
            text_preview_chars=int(logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS)),
        )
        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)

        return cls(retry=retry, speech=speech, logging=logging_cfg)

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable raw settings loaded from YAML.

    Use get_gateway_config() for the validated view.
    """
    raw: Dict[str, Any]

    @property
    def bindings(self) -> Dict[str, Any]:
        """Runtime bindings (deployment-provided key/value pairs)."""
        return self.raw.get("bindings", {}) or {}

    @property
    def _request(self) -> Dict[str, Any]:
        return self.raw.get("request") or {}

    @property
    def default_voice_name(self) -> str:
        return str(self._request.get("voice_name", Defaults.VOICE_NAME))

    @property
    def default_format(self) -> str:
        return str(self._request.get("format", Defaults.AUDIO_FORMAT))

    def get_gateway_config(self) -> GatewayConfig:
        return GatewayConfig.from_settings(self)


def load_settings(path: str = "config/settings.yaml") -> Settings:
    """
    Load settings from a YAML file and apply environment overrides.

    Environment variable overrides:
        - AZURE_SPEECH_KEY: speech.key
        - AZURE_SPEECH_REGION: speech.region
        - TTS_GATEWAY_MAX_ATTEMPTS: retry.max_attempts

    Raises:
        FileNotFoundError: If the settings file doesn't exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    with p.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    return Settings(raw=apply_env_overrides(raw))


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    # "speech:" with no value loads as None
    if raw.get(name) is None:
        raw[name] = {}
    return raw[name]


def apply_env_overrides(raw: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Fold speech/retry environment variables into a raw settings dict."""
    env = os.environ if environ is None else environ

    key = env.get("AZURE_SPEECH_KEY")
    if key:
        _section(raw, "speech")["key"] = key
    region = env.get("AZURE_SPEECH_REGION")
    if region:
        _section(raw, "speech")["region"] = region
    attempts = env.get("TTS_GATEWAY_MAX_ATTEMPTS")
    if attempts:
        _section(raw, "retry")["max_attempts"] = attempts

    return raw


# =============================================================================
# Shared secret
# =============================================================================

class ConfigProvider(Protocol):
    """Source of the shared secret compared against the ``token`` parameter."""

    def get_secret(self) -> Optional[str]:
        ...


@dataclass(frozen=True)
class StaticConfigProvider:
    """ConfigProvider holding a secret resolved once at startup."""
    secret: Optional[str] = None

    def get_secret(self) -> Optional[str]:
        return self.secret


def resolve_shared_secret(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve the shared secret.

    Precedence:
        1. ``TOKEN`` environment variable, whenever it is set (an empty
           value disables auth)
        2. ``bindings.TOKEN`` from settings, when non-empty
        3. ``""`` (auth disabled)
    """
    env = os.environ if environ is None else environ
    if "TOKEN" in env:
        return env["TOKEN"]

    bound = settings.bindings.get("TOKEN")
    if bound is not None and str(bound) != "":
        return str(bound)

    return ""
