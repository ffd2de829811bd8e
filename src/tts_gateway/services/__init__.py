"""
tts-gateway Services Layer.

Business logic between the HTTP layer and the speech backend.

Components:
    - token_codec.py: Voice token decode/encode and freshness check
    - ssml.py: SSML document builder
    - retry.py: Bounded async retry with Continue/Abort decisions
    - validators.py: Voice token and output format validation
    - synthesis_service.py: SynthesisService (request pipeline) and errors
"""
from .synthesis_service import (
    ErrorCode,
    GatewayError,
    InvalidFormatError,
    InvalidSsmlError,
    RetryExhaustedError,
    SynthesisService,
    SynthesizeRequest,
    SynthesizeResult,
    UnauthorizedError,
    UnknownSynthesisError,
)

__all__ = [
    "SynthesisService",
    "SynthesizeRequest",
    "SynthesizeResult",
    "GatewayError",
    "UnauthorizedError",
    "InvalidFormatError",
    "InvalidSsmlError",
    "RetryExhaustedError",
    "UnknownSynthesisError",
    "ErrorCode",
]
