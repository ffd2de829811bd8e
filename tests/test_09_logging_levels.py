"""Tests for the numeric logging level system."""
from __future__ import annotations

import io
import json
import logging
from unittest.mock import patch

import pytest

from tts_gateway.core.logging import (
    LEVEL_MAP,
    LogLevel,
    coerce_level,
    configure_logging,
    debug,
    fail,
    get_level,
    get_level_name,
    get_logger,
    info,
    set_request_id,
    verbose,
    warn,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    set_request_id("-")
    configure_logging(level=LogLevel.NORMAL, force=True)


def capture(level):
    """Reconfigure logging onto a StringIO; returns the buffer."""
    buf = io.StringIO()
    with patch("sys.stdout", buf):
        configure_logging(level=level, force=True)
    return buf


class TestLogLevelEnum:

    def test_level_enum_values(self):
        assert LogLevel.MINIMAL == 1
        assert LogLevel.NORMAL == 2
        assert LogLevel.VERBOSE == 3
        assert LogLevel.DEBUG == 4

    def test_python_level_mapping(self):
        assert LEVEL_MAP[LogLevel.MINIMAL] == logging.WARNING
        assert LEVEL_MAP[LogLevel.NORMAL] == logging.INFO
        assert LEVEL_MAP[LogLevel.VERBOSE] == logging.DEBUG


class TestLevelCoercion:

    @pytest.mark.parametrize("value,expected", [
        (1, LogLevel.MINIMAL),
        (4, LogLevel.DEBUG),
        ("minimal", LogLevel.MINIMAL),
        ("VERBOSE", LogLevel.VERBOSE),
        ("3", LogLevel.VERBOSE),
        ("warning", LogLevel.MINIMAL),
        ("info", LogLevel.NORMAL),
        (logging.ERROR, LogLevel.MINIMAL),
        (logging.INFO, LogLevel.NORMAL),
        (logging.DEBUG, LogLevel.DEBUG),
    ])
    def test_coercion(self, value, expected):
        assert coerce_level(value) == expected

    def test_unknown_falls_back_to_normal(self):
        assert coerce_level("chatty") == LogLevel.NORMAL
        assert coerce_level(None) == LogLevel.NORMAL


class TestLevelFiltering:

    def test_normal_shows_info_and_warn(self):
        buf = capture(LogLevel.NORMAL)
        log = get_logger("tts-gateway.test")
        info(log, "request_started", chars=5)
        warn(log, "synthesis_attempt_failed", attempt=1)
        verbose(log, "stage_timing")

        out = buf.getvalue()
        assert "request_started" in out
        assert "chars=5" in out
        assert "attempt=1" in out
        assert "stage_timing" not in out
        assert get_level_name() == "NORMAL"

    def test_minimal_shows_failures_only(self):
        buf = capture(LogLevel.MINIMAL)
        log = get_logger("tts-gateway.test")
        info(log, "hidden")
        fail(log, "synthesis_failed", attempts=3)

        out = buf.getvalue()
        assert "hidden" not in out
        assert "synthesis_failed" in out
        assert "FAIL" in out

    def test_debug_shows_everything(self):
        buf = capture("debug")
        log = get_logger("tts-gateway.test")
        debug(log, "ssml", ssml="<speak/>")

        assert get_level() == LogLevel.DEBUG
        assert "ssml=<speak/>" in buf.getvalue()

    def test_request_id_in_console(self):
        buf = capture(LogLevel.NORMAL)
        set_request_id("rid123")
        info(get_logger("tts-gateway.test"), "with_rid")
        assert "(rid123)" in buf.getvalue()


class TestJsonlOutput:

    def test_jsonl_file_written(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TTS_GATEWAY_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("TTS_GATEWAY_JSONL_FILE", "test.jsonl")
        capture(LogLevel.NORMAL)

        set_request_id("abc")
        warn(get_logger("tts-gateway.test"), "synthesis_attempt_failed", attempt=2, seconds=0.25)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "test.jsonl").read_text(encoding="utf-8").strip().splitlines()
        record = json.loads(lines[-1])
        assert record["tag"] == "WARN"
        assert record["level"] == 2
        assert record["message"] == "synthesis_attempt_failed"
        assert record["request_id"] == "abc"
        assert record["seconds"] == 0.25
        assert record["extra"] == {"attempt": 2}

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("TTS_GATEWAY_LOG_LEVEL", "3")
        capture(None)
        assert get_level() == LogLevel.VERBOSE
