"""
Bounded retry for async operations.

Attempts run strictly one after another. After every failed attempt the
``on_attempt_failure`` hook decides what happens next by returning a
decision instead of raising:

    CONTINUE (or None)  - try again if attempts remain
    Abort(error)        - stop now and raise ``error``

When every attempt fails, RetryError is raised carrying each attempt's
exception in attempt order.

Example:
    >>> def hook(attempt, exc):
    ...     if "SSML is invalid" in str(exc):
    ...         return Abort(InvalidSsmlError())
    ...     return CONTINUE
    >>> audio = await retry(lambda: speech.convert(ssml, fmt), 3, hook)
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Continue:
    """Keep retrying."""


@dataclass(frozen=True)
class Abort:
    """Stop retrying and raise ``error``."""
    error: BaseException


CONTINUE = Continue()

RetryDecision = Union[Continue, Abort]
AttemptFailureHook = Callable[[int, Exception], Optional[RetryDecision]]


class RetryError(Exception):
    """
    Raised when all attempts failed.

    Attributes:
        attempts: Number of attempts made.
        causes: Exceptions raised by each attempt, in attempt order.
    """

    def __init__(self, message: str, causes: List[Exception]):
        self.message = message
        self.causes = list(causes)
        self.attempts = len(self.causes)
        super().__init__(message)

    def describe_causes(self) -> str:
        """Causes rendered as "Type: message", comma separated."""
        return ", ".join(f"{type(e).__name__}: {e}" for e in self.causes)


async def retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    on_attempt_failure: Optional[AttemptFailureHook] = None,
    delay_s: float = 0.0,
) -> T:
    """
    Run ``operation`` until it succeeds or ``max_attempts`` is reached.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        max_attempts: Upper bound on attempts (>= 1).
        on_attempt_failure: Called as ``hook(attempt, exc)`` after each
            failure, attempts numbered from 1.
        delay_s: Sleep between attempts. Not applied after the last one.

    Returns:
        The first successful result.

    Raises:
        ValueError: If max_attempts < 1.
        RetryError: If every attempt failed.
        BaseException: Whatever an Abort decision carries.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    causes: List[Exception] = []
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            causes.append(exc)
            decision = on_attempt_failure(attempt, exc) if on_attempt_failure else None
            if isinstance(decision, Abort):
                raise decision.error from exc

        if delay_s > 0 and attempt < max_attempts:
            await asyncio.sleep(delay_s)

    raise RetryError(f"Max retries exceeded after {max_attempts} attempts", causes)
