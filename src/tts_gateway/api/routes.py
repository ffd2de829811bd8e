"""
Synthesis API Routes.

Endpoints:
    GET /         - Synthesize text; returns raw audio
    GET /health   - Health check for load balancers and probes
    GET /metrics  - Prometheus metrics

Request Flow (GET /):
    1. Query validation incl. voice token freshness   -> 400 on failure
    2. Shared-secret check                            -> 401 on mismatch
    3. Output format check                            -> 400 naming the format
    4. SSML build + synthesis with up to 3 attempts   -> 400 on rejected SSML,
                                                         500 on exhaustion
    5. Audio bytes with the format's Content-Type

Error Body:
    {
        "ok": false,
        "error": "<ERROR_CODE>",
        "message": "<human readable message>",
        "request_id": "<id>"
    }

Example:
    curl "http://localhost:8000/?voice=$VOICE&text=你好&format=audio-24khz-48kbitrate-mono-mp3" \\
        --output speech.mp3
"""
from __future__ import annotations

import uuid
from time import perf_counter

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from tts_gateway.api.dependencies import get_synthesis_query, get_synthesis_service
from tts_gateway.api.schemas import SynthesisQuery
from tts_gateway.core.logging import fail, get_logger, set_request_id
from tts_gateway.core.metrics import metrics
from tts_gateway.services.synthesis_service import (
    ErrorCode,
    GatewayError,
    SynthesisService,
)
from tts_gateway.speech.base import FORMAT_CONTENT_TYPE

router = APIRouter()

_LOG = get_logger("tts-gateway.api")


def _error_response(error: GatewayError, request_id: str) -> JSONResponse:
    content = error.to_dict()
    content["request_id"] = request_id
    return JSONResponse(
        status_code=error.status_code,
        content=content,
        headers={"X-Request-Id": request_id},
    )


@router.get(
    "/",
    response_class=Response,
    responses={
        200: {"description": "Audio bytes"},
        400: {"description": "Invalid voice token, format or SSML"},
        401: {"description": "Unauthorized"},
        500: {"description": "Synthesis failed"},
    },
)
async def synthesize(
    query: SynthesisQuery = Depends(get_synthesis_query),
    service: SynthesisService = Depends(get_synthesis_service),
):
    """
    Synthesize ``text`` with the requested voice and return the audio.

    Returns:
        Response: audio bytes with headers:
            - Content-Type: from the output format table
            - X-Request-Id: request identifier for log correlation
            - X-Attempts: synthesis attempts used
    """
    rid = str(uuid.uuid4())[:12]
    set_request_id(rid)
    started = perf_counter()
    # Unknown formats would blow up label cardinality
    fmt_label = query.format if query.format in FORMAT_CONTENT_TYPE else "invalid"

    try:
        result = await service.synthesize(query.to_request(), rid)

    except GatewayError as e:
        metrics.record_request(e.code.lower(), fmt_label, perf_counter() - started)
        return _error_response(e, rid)

    except Exception as e:
        # Bugs only: the service classifies every synthesis failure itself
        fail(_LOG, "unhandled_error", error=f"{type(e).__name__}: {e}")
        metrics.record_request(ErrorCode.INTERNAL_ERROR.lower(), fmt_label, perf_counter() - started)
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": ErrorCode.INTERNAL_ERROR,
                "message": "Internal server error",
                "request_id": rid,
            },
        )

    metrics.record_request("success", fmt_label, perf_counter() - started, len(result.audio))
    headers = {
        "X-Request-Id": rid,
        "X-Attempts": str(result.attempts),
    }
    return Response(content=result.audio, media_type=result.content_type, headers=headers)


@router.get("/health")
def health(service: SynthesisService = Depends(get_synthesis_service)):
    """Service status, speech backend, retry limit and whether auth is on."""
    return service.get_health_info()


@router.get("/metrics")
def prometheus_metrics():
    content, content_type = metrics.get_metrics_response()
    return Response(content=content, media_type=content_type)
