"""
Prometheus Metrics for tts-gateway.

Metrics Exposed:
    tts_gateway_requests_total            - Requests by status and format
    tts_gateway_request_duration_seconds  - Histogram of end-to-end latency
    tts_gateway_audio_bytes_total         - Audio bytes returned to callers
    tts_gateway_attempt_failures_total    - Failed synthesis attempts by kind
                                            ("fatal" or "transient")
    tts_gateway_retry_exhausted_total     - Requests that ran out of attempts

Usage:
    from tts_gateway.core.metrics import metrics

    metrics.record_request(status="success", fmt="audio-24khz-48kbitrate-mono-mp3",
                           duration=0.8, audio_bytes=12000)
    metrics.record_attempt_failure("transient")

    content, content_type = metrics.get_metrics_response()
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class GatewayMetrics:
    """
    Metric collection for the synthesis endpoint.

    Uses a private CollectorRegistry so several app instances (tests)
    can coexist in one process without duplicate-registration errors.
    """

    def __init__(self):
        self._registry = CollectorRegistry()

        self._requests_total = Counter(
            "tts_gateway_requests_total",
            "Total synthesis requests",
            ["status", "format"],
            registry=self._registry,
        )
        self._request_duration = Histogram(
            "tts_gateway_request_duration_seconds",
            "Synthesis request duration in seconds",
            ["status"],
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self._registry,
        )
        self._audio_bytes_total = Counter(
            "tts_gateway_audio_bytes_total",
            "Total audio bytes returned",
            registry=self._registry,
        )
        self._attempt_failures = Counter(
            "tts_gateway_attempt_failures_total",
            "Failed synthesis attempts",
            ["kind"],
            registry=self._registry,
        )
        self._retry_exhausted = Counter(
            "tts_gateway_retry_exhausted_total",
            "Requests whose synthesis attempts were all exhausted",
            registry=self._registry,
        )

    def record_request(
        self,
        status: str,
        fmt: str,
        duration: float,
        audio_bytes: int = 0,
    ) -> None:
        """
        Record a finished request.

        Args:
            status: "success" or an ErrorCode value, lower-cased.
            fmt: Requested output format identifier.
            duration: Seconds spent handling the request.
            audio_bytes: Size of the returned audio.
        """
        self._requests_total.labels(status=status, format=fmt).inc()
        self._request_duration.labels(status=status).observe(duration)
        if audio_bytes > 0:
            self._audio_bytes_total.inc(audio_bytes)

    def record_attempt_failure(self, kind: str) -> None:
        self._attempt_failures.labels(kind=kind).inc()

    def record_retry_exhausted(self) -> None:
        self._retry_exhausted.inc()

    def get_metrics_response(self) -> tuple[bytes, str]:
        """Return (content, content_type) for the /metrics endpoint."""
        return generate_latest(self._registry), CONTENT_TYPE_LATEST


# Process-wide instance
metrics = GatewayMetrics()
