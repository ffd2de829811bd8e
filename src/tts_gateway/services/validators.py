"""
Input validation for the synthesis endpoint.

Validation happens before any call to the speech service so bad requests
never cost an upstream round-trip.

    - validate_voice_token: voice token must decode to a fresh timestamp
    - validate_format: output format must be a known identifier

Both raise ValidationError carrying a machine-readable code.
"""
from __future__ import annotations

from typing import Mapping, Optional

from tts_gateway.services import token_codec
from tts_gateway.speech.base import FORMAT_CONTENT_TYPE

VOICE_TOKEN_MESSAGE = "无效的语音参数"


class ValidationError(ValueError):
    """
    Input validation failed.

    Subclasses ValueError so pydantic validators can raise it directly and
    have it reported as a regular field error.

    Attributes:
        message: Human-readable description.
        code: Machine-readable code, e.g. "VOICE_TOKEN_INVALID".
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


def validate_voice_token(voice: Optional[str], now: Optional[int] = None) -> str:
    """
    Require a voice token whose timestamp is at most six hours old.

    Raises:
        ValidationError: Empty, malformed or stale token.
    """
    if not voice:
        raise ValidationError(VOICE_TOKEN_MESSAGE, "VOICE_TOKEN_REQUIRED")
    if not token_codec.is_fresh(voice, now=now):
        raise ValidationError(VOICE_TOKEN_MESSAGE, "VOICE_TOKEN_INVALID")
    return voice


def validate_format(fmt: str, formats: Mapping[str, str] = FORMAT_CONTENT_TYPE) -> str:
    """
    Look up the Content-Type of an output format.

    Returns:
        The Content-Type to serve the audio with.

    Raises:
        ValidationError: Unknown format; the message names it.
    """
    content_type = formats.get(fmt)
    if content_type is None:
        raise ValidationError(f"无效的音频格式：{fmt}", "FORMAT_INVALID")
    return content_type
