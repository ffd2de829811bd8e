"""
FastAPI Dependency Injection Providers.

Hierarchy:
    get_settings()            settings.yaml (+ env overrides), cached
    get_config_provider()     shared secret, resolved once, cached
    get_synthesis_service()   SynthesisService singleton
    get_synthesis_query()     per-request query validation

Tests swap any of these through ``app.dependency_overrides``.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from tts_gateway.api.schemas import SynthesisQuery
from tts_gateway.core.config import (
    ConfigProvider,
    Settings,
    StaticConfigProvider,
    apply_env_overrides,
    load_settings,
    resolve_shared_secret,
)
from tts_gateway.services.synthesis_service import SynthesisService
from tts_gateway.speech.base import get_speech_service


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings once.

    Path comes from TTS_GATEWAY_SETTINGS (default config/settings.yaml).
    Without a settings file only defaults and environment variables apply.
    """
    path = os.getenv("TTS_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        return load_settings(path)
    except FileNotFoundError:
        return Settings(raw=apply_env_overrides({}))


@lru_cache(maxsize=1)
def get_config_provider() -> ConfigProvider:
    """Shared secret, environment first, then settings bindings."""
    return StaticConfigProvider(resolve_shared_secret(get_settings()))


@lru_cache(maxsize=1)
def get_synthesis_service() -> SynthesisService:
    settings = get_settings()
    return SynthesisService(
        speech=get_speech_service(settings),
        config=settings.get_gateway_config(),
        config_provider=get_config_provider(),
    )


def get_synthesis_query(
    voice: str = Query(..., description="Voice token"),
    text: str = Query("", description="Text to synthesize"),
    voice_name: Optional[str] = Query(None, alias="voiceName", description="Voice name"),
    pitch: Optional[str] = Query(None, description="Pitch, e.g. -50%, -50Hz, low"),
    rate: Optional[str] = Query(None, description="Speaking rate"),
    volume: Optional[str] = Query(None, description="Volume"),
    format: Optional[str] = Query(None, description="Audio format"),
    token: Optional[str] = Query(None, description="Shared secret"),
    settings: Settings = Depends(get_settings),
) -> SynthesisQuery:
    """
    Assemble and validate the synthesis query.

    Parameters left out of the query fall back to the ``request`` section of
    the settings. An explicit empty value is kept, so ``format=`` fails the
    format check.

    Raises:
        RequestValidationError: Reported like any other query error.
    """
    try:
        return SynthesisQuery(
            voice=voice,
            text=text,
            voice_name=settings.default_voice_name if voice_name is None else voice_name,
            pitch=pitch,
            rate=rate,
            volume=volume,
            format=settings.default_format if format is None else format,
            token=token,
        )
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("query", *err["loc"])} for err in e.errors()]
        ) from e
