"""
Voice token codec.

A voice token is a millisecond timestamp whose digits are each shifted up
by 49 code points and wrapped in one padding character on either side:

    1700000000000  ->  "Xbhaaaaaaaaaaa!"   (pad chars are arbitrary)

The gateway only decodes tokens and checks their age; issuing them is the
job of whatever front-end hands out voice parameters. ``encode`` exists for
that front-end, the CLI and tests.
"""
from __future__ import annotations

import re
import secrets
import string
import time
from typing import Optional

SHIFT = 49
MAX_AGE_MS = 6 * 60 * 60 * 1000

_TIMESTAMP_RE = re.compile(r"[0-9]{13}")
_PAD_ALPHABET = string.ascii_letters + string.digits


def decode(token: Optional[str]) -> str:
    """
    Strip the padding and shift every remaining character down by 49.

    Returns "" for None or inputs shorter than two characters; callers
    treat an empty result as invalid.
    """
    if not token or len(token) < 2:
        return ""
    # Wrap instead of raising for code points below the shift
    return "".join(chr((ord(c) - SHIFT) % 0x110000) for c in token[1:-1])


def encode(timestamp_ms: int | str, pad: Optional[str] = None) -> str:
    """
    Inverse of decode.

    Args:
        timestamp_ms: Millisecond timestamp (int or digit string).
        pad: Two-character padding; random when omitted.
    """
    body = "".join(chr(ord(c) + SHIFT) for c in str(timestamp_ms))
    if pad is None:
        pad = secrets.choice(_PAD_ALPHABET) + secrets.choice(_PAD_ALPHABET)
    if len(pad) != 2:
        raise ValueError("pad must be exactly two characters")
    return pad[0] + body + pad[1]


def is_valid_timestamp_format(value: str) -> bool:
    """True iff value is exactly 13 ASCII digits."""
    return bool(_TIMESTAMP_RE.fullmatch(value or ""))


def now_ms() -> int:
    return int(time.time() * 1000)


def is_fresh(
    token: Optional[str],
    now: Optional[int] = None,
    max_age_ms: int = MAX_AGE_MS,
    allow_future: bool = True,
) -> bool:
    """
    Check that a voice token decodes to a timestamp no older than max_age_ms.

    Future-dated timestamps pass unless ``allow_future`` is False; the
    age check alone has no lower bound.
    """
    decoded = decode(token)
    if not is_valid_timestamp_format(decoded):
        return False

    age = (now_ms() if now is None else now) - int(decoded, 10)
    if age < 0 and not allow_future:
        return False
    return age <= max_age_ms
