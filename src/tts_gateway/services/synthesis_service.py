"""
SynthesisService - request handling pipeline.

Architecture:
    Auth check → Format check → Build SSML → Retry(convert) → Result

The HTTP layer validates the query (including the voice token) before it
gets here; this service owns everything after that.

Error Handling:
    GatewayError subclasses carry an ErrorCode and the HTTP status to use:
        - UnauthorizedError      401  shared secret mismatch
        - InvalidFormatError     400  unknown output format
        - InvalidSsmlError       400  speech service rejected the SSML (no retry)
        - RetryExhaustedError    500  all attempts failed, causes joined
        - UnknownSynthesisError  500  anything else

Example:
    >>> service = SynthesisService(speech, GatewayConfig(), StaticConfigProvider("s3cret"))
    >>> result = await service.synthesize(
    ...     SynthesizeRequest(text="你好", token="s3cret"), request_id="abc123"
    ... )
    >>> result.content_type
    'audio/mpeg'
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from tts_gateway.core.config import ConfigProvider, Defaults, GatewayConfig
from tts_gateway.core.logging import debug, fail, get_logger, info, success, warn
from tts_gateway.core.metrics import metrics
from tts_gateway.services.retry import CONTINUE, Abort, RetryDecision, RetryError, retry
from tts_gateway.services.ssml import VoiceOptions, build_ssml
from tts_gateway.services.validators import ValidationError, validate_format
from tts_gateway.speech.base import BaseSpeechService, is_ssml_rejection
from tts_gateway.utils.text import preview
from tts_gateway.utils.timeit import timeit

_LOG = get_logger("tts-gateway.service")


# =============================================================================
# Error Codes and Exceptions
# =============================================================================

class ErrorCode:
    """Error codes returned in the ``error`` field of error responses."""
    INVALID_INPUT = "INVALID_INPUT"         # Query failed schema validation
    INVALID_FORMAT = "INVALID_FORMAT"       # Unknown output format
    UNAUTHORIZED = "UNAUTHORIZED"           # Shared secret mismatch
    INVALID_SSML = "INVALID_SSML"           # SSML rejected upstream
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"     # All synthesis attempts failed
    UNKNOWN_ERROR = "UNKNOWN_ERROR"         # Unclassified synthesis failure
    INTERNAL_ERROR = "INTERNAL_ERROR"       # Bug in the gateway itself


class GatewayError(Exception):
    """
    Base exception for errors that map to an HTTP response.

    Attributes:
        message: Human-readable message, returned to the caller.
        code: Value from ErrorCode.
        status_code: HTTP status to respond with.
        details: Optional extra context for the response body.
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Error response body."""
        result: Dict[str, Any] = {
            "ok": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class UnauthorizedError(GatewayError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, ErrorCode.UNAUTHORIZED, 401)


class InvalidFormatError(GatewayError):
    def __init__(self, message: str, fmt: str):
        super().__init__(message, ErrorCode.INVALID_FORMAT, 400, {"format": fmt})


class InvalidSsmlError(GatewayError):
    """Raised without retrying when the speech service rejects the SSML."""
    def __init__(self, message: str = "SSML 无效"):
        super().__init__(message, ErrorCode.INVALID_SSML, 400)


class RetryExhaustedError(GatewayError):
    def __init__(self, message: str, causes: List[Exception]):
        super().__init__(message, ErrorCode.RETRY_EXHAUSTED, 500, {"attempts": len(causes)})
        self.causes = causes


class UnknownSynthesisError(GatewayError):
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.UNKNOWN_ERROR, 500)


# =============================================================================
# Request/Response Dataclasses
# =============================================================================

@dataclass
class SynthesizeRequest:
    """
    One synthesis request after query validation.

    Attributes:
        text: Text to speak (may be empty).
        voice_name: Neural voice, e.g. "zh-CN-XiaoxiaoNeural".
        pitch / rate / volume: Prosody values passed through to SSML.
        format: Output format identifier (key of FORMAT_CONTENT_TYPE).
        token: Caller-supplied shared secret.
    """
    text: str = ""
    voice_name: str = Defaults.VOICE_NAME
    pitch: Optional[str] = None
    rate: Optional[str] = None
    volume: Optional[str] = None
    format: str = Defaults.AUDIO_FORMAT
    token: Optional[str] = None

    @property
    def voice_options(self) -> VoiceOptions:
        return VoiceOptions(
            voice_name=self.voice_name,
            pitch=self.pitch,
            rate=self.rate,
            volume=self.volume,
        )


@dataclass
class SynthesizeResult:
    """
    Attributes:
        audio: Encoded audio bytes.
        content_type: Content-Type matching the requested format.
        attempts: Synthesis attempts used (1 when the first one succeeded).
        total_seconds: Time spent in the retry loop.
        request_id: Request ID for tracing.
    """
    audio: bytes
    content_type: str
    attempts: int
    total_seconds: float
    request_id: str


# =============================================================================
# Main Service Class
# =============================================================================

class SynthesisService:
    """
    Runs one synthesis request end to end.

    Holds no per-request state, so a single instance serves concurrent
    requests.
    """

    def __init__(
        self,
        speech: BaseSpeechService,
        config: GatewayConfig,
        config_provider: ConfigProvider,
    ):
        self.speech = speech
        self.config = config
        self.config_provider = config_provider

    @property
    def auth_enabled(self) -> bool:
        return bool(self.config_provider.get_secret())

    def check_auth(self, token: Optional[str]) -> None:
        """Raise UnauthorizedError unless auth is off or token matches."""
        secret = self.config_provider.get_secret()
        if secret and token != secret:
            raise UnauthorizedError()

    def check_format(self, fmt: str) -> str:
        """Return the Content-Type for fmt or raise InvalidFormatError."""
        try:
            return validate_format(fmt)
        except ValidationError as e:
            raise InvalidFormatError(e.message, fmt) from e

    def _on_attempt_failure(self, attempt: int, exc: Exception) -> RetryDecision:
        warn(_LOG, "synthesis_attempt_failed", attempt=attempt, error=f"{type(exc).__name__}: {exc}")
        if is_ssml_rejection(exc):
            metrics.record_attempt_failure("fatal")
            return Abort(InvalidSsmlError())
        metrics.record_attempt_failure("transient")
        return CONTINUE

    async def synthesize(self, request: SynthesizeRequest, request_id: str = "-") -> SynthesizeResult:
        """
        Authenticate, validate, build SSML and synthesize with retries.

        Raises:
            GatewayError: Every failure, already classified.
        """
        self.check_auth(request.token)
        content_type = self.check_format(request.format)

        ssml = build_ssml(request.text, request.voice_options)
        info(
            _LOG, "synthesis_started",
            chars=len(request.text),
            voice=request.voice_name,
            format=request.format,
            text=preview(request.text, self.config.logging.text_preview_chars),
        )
        debug(_LOG, "ssml", ssml=ssml)

        attempts = 0

        async def attempt() -> bytes:
            nonlocal attempts
            attempts += 1
            return await self.speech.convert(ssml, request.format)

        with timeit("synthesis") as t:
            try:
                audio = await retry(
                    attempt,
                    self.config.retry.max_attempts,
                    self._on_attempt_failure,
                    delay_s=self.config.retry.delay_ms / 1000.0,
                )
            except GatewayError:
                raise
            except RetryError as e:
                metrics.record_retry_exhausted()
                fail(_LOG, "synthesis_failed", attempts=e.attempts, seconds=t.seconds)
                raise RetryExhaustedError(f"{e.message}. Cause: {e.describe_causes()}", e.causes) from e
            except Exception as e:
                fail(_LOG, "synthesis_error", error=f"{type(e).__name__}: {e}")
                raise UnknownSynthesisError(f"UnknownError: {type(e).__name__}: {e}") from e

        success(_LOG, "synthesis_done", attempts=attempts, bytes=len(audio), seconds=t.seconds)
        return SynthesizeResult(
            audio=audio,
            content_type=content_type,
            attempts=attempts,
            total_seconds=t.seconds,
            request_id=request_id,
        )

    def get_health_info(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "backend": self.speech.name,
            "max_attempts": self.config.retry.max_attempts,
            "auth_enabled": self.auth_enabled,
        }

    async def close(self) -> None:
        await self.speech.close()
