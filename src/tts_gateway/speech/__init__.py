"""
External speech synthesis services.

    - base.py: BaseSpeechService interface, output format table, errors
    - azure.py: Azure Speech REST client (httpx)
"""
from .base import (
    FORMAT_CONTENT_TYPE,
    INVALID_SSML_MARKER,
    BaseSpeechService,
    SpeechServiceError,
    get_speech_service,
    is_ssml_rejection,
)

__all__ = [
    "BaseSpeechService",
    "SpeechServiceError",
    "FORMAT_CONTENT_TYPE",
    "INVALID_SSML_MARKER",
    "get_speech_service",
    "is_ssml_rejection",
]
