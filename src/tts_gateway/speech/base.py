"""
Speech Service Base Class and Factory.

A speech service takes a finished SSML document plus an output format
identifier and returns encoded audio bytes. The gateway never inspects the
audio; it only needs:

    - convert(ssml, fmt): one synthesis round-trip (async)
    - FORMAT_CONTENT_TYPE: which formats exist and what Content-Type each
      one is served with

Error contract:
    A rejected SSML document surfaces as an exception whose message
    contains INVALID_SSML_MARKER. The pipeline treats that as fatal and
    stops retrying. Every other exception is considered transient.

Adding a Backend:
    1. Subclass BaseSpeechService in speech/<name>.py
    2. Implement convert() (and close() if it holds connections)
    3. Register it in get_speech_service()
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from tts_gateway.core.config import ConfigValidationError, Settings

INVALID_SSML_MARKER = "SSML is invalid"

# Output format identifier -> Content-Type
FORMAT_CONTENT_TYPE: Dict[str, str] = {
    "raw-8khz-8bit-mono-alaw": "audio/basic",
    "raw-8khz-8bit-mono-mulaw": "audio/basic",
    "raw-8khz-16bit-mono-pcm": "audio/basic",
    "raw-16khz-16bit-mono-pcm": "audio/basic",
    "raw-22050hz-16bit-mono-pcm": "audio/basic",
    "raw-24khz-16bit-mono-pcm": "audio/basic",
    "raw-44100hz-16bit-mono-pcm": "audio/basic",
    "raw-48khz-16bit-mono-pcm": "audio/basic",
    "raw-16khz-16bit-mono-truesilk": "audio/SILK",
    "raw-24khz-16bit-mono-truesilk": "audio/SILK",
    "riff-8khz-8bit-mono-alaw": "audio/x-wav",
    "riff-8khz-8bit-mono-mulaw": "audio/x-wav",
    "riff-8khz-16bit-mono-pcm": "audio/x-wav",
    "riff-16khz-16bit-mono-pcm": "audio/x-wav",
    "riff-22050hz-16bit-mono-pcm": "audio/x-wav",
    "riff-24khz-16bit-mono-pcm": "audio/x-wav",
    "riff-44100hz-16bit-mono-pcm": "audio/x-wav",
    "riff-48khz-16bit-mono-pcm": "audio/x-wav",
    "audio-16khz-32kbitrate-mono-mp3": "audio/mpeg",
    "audio-16khz-64kbitrate-mono-mp3": "audio/mpeg",
    "audio-16khz-128kbitrate-mono-mp3": "audio/mpeg",
    "audio-24khz-48kbitrate-mono-mp3": "audio/mpeg",
    "audio-24khz-96kbitrate-mono-mp3": "audio/mpeg",
    "audio-24khz-160kbitrate-mono-mp3": "audio/mpeg",
    "audio-48khz-96kbitrate-mono-mp3": "audio/mpeg",
    "audio-48khz-192kbitrate-mono-mp3": "audio/mpeg",
    "ogg-16khz-16bit-mono-opus": "audio/ogg; codecs=opus; rate=16000",
    "ogg-24khz-16bit-mono-opus": "audio/ogg; codecs=opus; rate=24000",
    "ogg-48khz-16bit-mono-opus": "audio/ogg; codecs=opus; rate=48000",
    "raw-16khz-16bit-mono-opus": "audio/ogg; codecs=opus; rate=16000",
    "raw-24khz-16bit-mono-opus": "audio/ogg; codecs=opus; rate=24000",
    "webm-16khz-16bit-mono-opus": "audio/webm; codecs=opus",
    "webm-24khz-16bit-mono-opus": "audio/webm; codecs=opus",
    "webm-24khz-16bit-24kbps-mono-opus": "audio/webm; codecs=opus",
    "amr-wb-16000hz": "audio/amr-wb",
}


class SpeechServiceError(Exception):
    """
    A synthesis round-trip failed.

    Attributes:
        status_code: Upstream HTTP status, when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def is_ssml_rejection(exc: BaseException) -> bool:
    """True if exc reports rejected SSML, whatever its type."""
    return INVALID_SSML_MARKER in str(exc)


class BaseSpeechService(ABC):
    """Interface every speech backend implements."""

    name: str = "base"

    @abstractmethod
    async def convert(self, ssml: str, fmt: str) -> bytes:
        """
        Synthesize one SSML document.

        Args:
            ssml: Complete SSML document.
            fmt: Key of FORMAT_CONTENT_TYPE.

        Returns:
            Encoded audio bytes in the requested format.
        """

    async def close(self) -> None:
        """Release network resources. No-op by default."""


def get_speech_service(settings: Settings) -> BaseSpeechService:
    """
    Create the speech backend named by ``speech.backend``.

    Raises:
        ConfigValidationError: Unknown backend name.
    """
    config = settings.get_gateway_config().speech

    if config.backend == "azure":
        from tts_gateway.speech.azure import AzureSpeechService
        return AzureSpeechService(config)

    raise ConfigValidationError(f"unknown speech backend: {config.backend!r}")
