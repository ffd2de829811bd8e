"""Test doubles shared by service and API tests."""
from __future__ import annotations

from typing import List, Tuple

from tts_gateway.speech.base import BaseSpeechService


class FakeSpeech(BaseSpeechService):
    """
    Speech backend replaying scripted outcomes.

    Each outcome is either bytes (returned) or an exception (raised). The
    last outcome repeats once the script runs out.
    """

    name = "fake"

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [b"audio"]
        self.calls: List[Tuple[str, str]] = []
        self.closed = False

    async def convert(self, ssml: str, fmt: str) -> bytes:
        self.calls.append((ssml, fmt))
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True
