"""Tests for input validators."""
from __future__ import annotations

import pytest

from tts_gateway.services import token_codec
from tts_gateway.services.validators import (
    VOICE_TOKEN_MESSAGE,
    ValidationError,
    validate_format,
    validate_voice_token,
)

NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


class TestVoiceToken:

    def test_fresh_token_returned(self):
        voice = token_codec.encode(NOW - HOUR_MS)
        assert validate_voice_token(voice, now=NOW) == voice

    @pytest.mark.parametrize("voice", [None, ""])
    def test_required(self, voice):
        with pytest.raises(ValidationError) as exc_info:
            validate_voice_token(voice, now=NOW)
        assert exc_info.value.code == "VOICE_TOKEN_REQUIRED"
        assert exc_info.value.message == VOICE_TOKEN_MESSAGE

    def test_stale(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_voice_token(token_codec.encode(NOW - 7 * HOUR_MS), now=NOW)
        assert exc_info.value.code == "VOICE_TOKEN_INVALID"

    def test_malformed(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_voice_token("hello world", now=NOW)
        assert exc_info.value.code == "VOICE_TOKEN_INVALID"

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_voice_token("", now=NOW)


class TestFormat:

    def test_known_format(self):
        assert validate_format("audio-24khz-48kbitrate-mono-mp3") == "audio/mpeg"
        assert validate_format("ogg-24khz-16bit-mono-opus") == "audio/ogg; codecs=opus; rate=24000"

    def test_unknown_format_named(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_format("mp3")
        assert exc_info.value.code == "FORMAT_INVALID"
        assert "mp3" in exc_info.value.message

    def test_custom_table(self):
        assert validate_format("x", formats={"x": "audio/x"}) == "audio/x"
