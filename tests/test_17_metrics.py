"""Tests for Prometheus metrics."""
from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST

from tts_gateway.core.metrics import GatewayMetrics


def sample(m: GatewayMetrics, name, labels=None):
    return m._registry.get_sample_value(name, labels or {})


class TestGatewayMetrics:

    def test_record_request(self):
        m = GatewayMetrics()
        m.record_request("success", "audio-24khz-48kbitrate-mono-mp3", 0.4, audio_bytes=1000)
        m.record_request("success", "audio-24khz-48kbitrate-mono-mp3", 0.6, audio_bytes=500)

        labels = {"status": "success", "format": "audio-24khz-48kbitrate-mono-mp3"}
        assert sample(m, "tts_gateway_requests_total", labels) == 2.0
        assert sample(m, "tts_gateway_audio_bytes_total") == 1500.0
        assert sample(m, "tts_gateway_request_duration_seconds_count", {"status": "success"}) == 2.0

    def test_error_request_has_no_audio(self):
        m = GatewayMetrics()
        m.record_request("unauthorized", "invalid", 0.01)
        assert sample(m, "tts_gateway_requests_total", {"status": "unauthorized", "format": "invalid"}) == 1.0
        assert sample(m, "tts_gateway_audio_bytes_total") == 0.0

    def test_attempt_failures_by_kind(self):
        m = GatewayMetrics()
        m.record_attempt_failure("transient")
        m.record_attempt_failure("transient")
        m.record_attempt_failure("fatal")
        assert sample(m, "tts_gateway_attempt_failures_total", {"kind": "transient"}) == 2.0
        assert sample(m, "tts_gateway_attempt_failures_total", {"kind": "fatal"}) == 1.0

    def test_retry_exhausted(self):
        m = GatewayMetrics()
        m.record_retry_exhausted()
        assert sample(m, "tts_gateway_retry_exhausted_total") == 1.0

    def test_instances_are_isolated(self):
        a, b = GatewayMetrics(), GatewayMetrics()
        a.record_retry_exhausted()
        assert sample(b, "tts_gateway_retry_exhausted_total") == 0.0

    def test_metrics_response(self):
        m = GatewayMetrics()
        m.record_request("success", "riff-24khz-16bit-mono-pcm", 0.1)
        content, content_type = m.get_metrics_response()
        assert content_type == CONTENT_TYPE_LATEST
        assert b"tts_gateway_requests_total" in content
