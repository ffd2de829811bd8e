"""
Tests for the voice token codec.

Tests cover:
- decode() - padding removal, shift, short/None input
- encode() - inverse of decode, padding rules
- is_valid_timestamp_format() - exactly 13 ASCII digits
- is_fresh() - six hour window, malformed tokens, future timestamps
"""
import pytest

from tts_gateway.services.token_codec import (
    MAX_AGE_MS,
    decode,
    encode,
    is_fresh,
    is_valid_timestamp_format,
)

NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


class TestDecode:
    """Tests for decode()."""

    @pytest.mark.parametrize("value", [None, "", "a"])
    def test_short_input_returns_empty(self, value):
        """Inputs shorter than two characters decode to ''."""
        assert decode(value) == ""

    def test_two_chars_decode_to_empty_body(self):
        """Only padding present: nothing left to shift."""
        assert decode("xy") == ""

    def test_strips_padding_and_shifts(self):
        """Letters a-j map back to digits 0-9."""
        assert decode("Xabcdefghij!") == "0123456789"

    def test_low_code_points_do_not_raise(self):
        """Characters below the shift wrap instead of raising."""
        result = decode("x !x")
        assert len(result) == 2
        assert not is_valid_timestamp_format(result)


class TestEncode:
    """Tests for encode()."""

    def test_round_trip(self):
        """decode(encode(ts)) == str(ts)."""
        for ts in (NOW, 1_000_000_000_000, 9_999_999_999_999):
            assert decode(encode(ts)) == str(ts)

    def test_explicit_padding(self):
        """Given padding wraps the shifted digits."""
        assert encode(1700000000000, pad="X!") == "X" + "bh" + "a" * 11 + "!"

    def test_random_padding_still_decodes(self):
        """Random padding differs per call but decodes the same."""
        assert decode(encode(NOW)) == decode(encode(NOW))

    def test_invalid_padding_length(self):
        """Padding must be two characters."""
        with pytest.raises(ValueError):
            encode(NOW, pad="x")


class TestTimestampFormat:
    """Tests for is_valid_timestamp_format()."""

    def test_thirteen_digits(self):
        assert is_valid_timestamp_format("1700000000000")

    @pytest.mark.parametrize("value", [
        "",
        "170000000000",       # 12 digits
        "17000000000000",     # 14 digits
        "170000000000a",
        "1700000000000\n",
        " 1700000000000",
        "１７００００００００００００",  # full-width digits
    ])
    def test_rejects_other_strings(self, value):
        assert not is_valid_timestamp_format(value)


class TestIsFresh:
    """Tests for is_fresh()."""

    def test_recent_token_is_fresh(self):
        assert is_fresh(encode(NOW - HOUR_MS), now=NOW)

    def test_exactly_six_hours_is_fresh(self):
        """The window is inclusive."""
        assert is_fresh(encode(NOW - MAX_AGE_MS), now=NOW)

    def test_seven_hours_is_stale(self):
        assert not is_fresh(encode(NOW - 7 * HOUR_MS), now=NOW)

    def test_one_ms_past_window_is_stale(self):
        assert not is_fresh(encode(NOW - MAX_AGE_MS - 1), now=NOW)

    def test_malformed_token_is_not_fresh(self):
        assert not is_fresh("not-a-token", now=NOW)
        assert not is_fresh("", now=NOW)
        assert not is_fresh(None, now=NOW)

    def test_future_token_accepted_by_default(self):
        """No lower bound on age unless asked for."""
        assert is_fresh(encode(NOW + HOUR_MS), now=NOW)

    def test_future_token_rejected_when_disallowed(self):
        assert not is_fresh(encode(NOW + HOUR_MS), now=NOW, allow_future=False)
        assert is_fresh(encode(NOW), now=NOW, allow_future=False)

    def test_default_now_uses_clock(self):
        """Without ``now`` the current time is used."""
        from tts_gateway.services.token_codec import now_ms

        assert is_fresh(encode(now_ms()))
