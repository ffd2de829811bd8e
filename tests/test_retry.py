"""
Tests for the bounded async retry executor.

Tests cover:
- Success on first attempt / after failures
- Exhaustion: attempt count, causes in order, message
- Abort decisions stop further attempts
- Hook arguments and None-as-continue
- Sequential execution and delays
- Argument validation
"""
import asyncio

import pytest

from tts_gateway.services.retry import CONTINUE, Abort, Continue, RetryError, retry


class Flaky:
    """Operation failing a fixed number of times before succeeding."""

    def __init__(self, failures: int, result="ok"):
        self.failures = failures
        self.result = result
        self.calls = 0
        self.active = 0
        self.max_active = 0

    async def __call__(self):
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if self.calls <= self.failures:
                raise RuntimeError(f"failure {self.calls}")
            return self.result
        finally:
            self.active -= 1


class TestSuccess:

    def test_first_attempt_success(self):
        op = Flaky(failures=0)
        assert asyncio.run(retry(op, 3)) == "ok"
        assert op.calls == 1

    def test_fail_once_then_succeed(self):
        """Resolves with the success value after exactly two attempts."""
        op = Flaky(failures=1, result=b"audio")
        assert asyncio.run(retry(op, 3)) == b"audio"
        assert op.calls == 2

    def test_success_on_last_attempt(self):
        op = Flaky(failures=2)
        assert asyncio.run(retry(op, 3)) == "ok"
        assert op.calls == 3


class TestExhaustion:

    def test_always_failing_runs_max_attempts(self):
        op = Flaky(failures=100)
        with pytest.raises(RetryError) as exc_info:
            asyncio.run(retry(op, 3))

        assert op.calls == 3
        err = exc_info.value
        assert len(err.causes) == 3
        assert [str(c) for c in err.causes] == ["failure 1", "failure 2", "failure 3"]
        assert err.attempts == 3

    def test_message_mentions_attempt_count(self):
        with pytest.raises(RetryError) as exc_info:
            asyncio.run(retry(Flaky(failures=100), 5))
        assert "5" in exc_info.value.message
        assert len(exc_info.value.causes) == 5

    def test_describe_causes(self):
        with pytest.raises(RetryError) as exc_info:
            asyncio.run(retry(Flaky(failures=100), 2))
        assert exc_info.value.describe_causes() == "RuntimeError: failure 1, RuntimeError: failure 2"

    def test_single_attempt(self):
        op = Flaky(failures=100)
        with pytest.raises(RetryError) as exc_info:
            asyncio.run(retry(op, 1))
        assert op.calls == 1
        assert len(exc_info.value.causes) == 1


class TestHook:

    def test_hook_receives_attempt_and_error(self):
        seen = []

        def hook(attempt, exc):
            seen.append((attempt, str(exc)))
            return CONTINUE

        with pytest.raises(RetryError):
            asyncio.run(retry(Flaky(failures=100), 3, hook))
        assert seen == [(1, "failure 1"), (2, "failure 2"), (3, "failure 3")]

    def test_hook_returning_none_continues(self):
        op = Flaky(failures=2)
        assert asyncio.run(retry(op, 3, lambda attempt, exc: None)) == "ok"
        assert op.calls == 3

    def test_abort_on_first_attempt_stops_retrying(self):
        """Abort on attempt 1 of 3: attempts 2 and 3 never run."""
        op = Flaky(failures=100)

        class Fatal(Exception):
            pass

        with pytest.raises(Fatal) as exc_info:
            asyncio.run(retry(op, 3, lambda attempt, exc: Abort(Fatal("stop"))))

        assert op.calls == 1
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_abort_after_some_attempts(self):
        op = Flaky(failures=100)

        def hook(attempt, exc):
            return Abort(ValueError("fatal")) if attempt == 2 else CONTINUE

        with pytest.raises(ValueError, match="fatal"):
            asyncio.run(retry(op, 5, hook))
        assert op.calls == 2

    def test_decision_types(self):
        assert isinstance(CONTINUE, Continue)
        assert Abort(ValueError("x")).error.args == ("x",)


class TestExecution:

    def test_attempts_never_overlap(self):
        op = Flaky(failures=2)
        asyncio.run(retry(op, 3))
        assert op.max_active == 1

    def test_delay_between_attempts(self, monkeypatch):
        sleeps = []
        real_sleep = asyncio.sleep

        async def fake_sleep(seconds):
            sleeps.append(seconds)
            await real_sleep(0)

        monkeypatch.setattr("tts_gateway.services.retry.asyncio.sleep", fake_sleep)

        with pytest.raises(RetryError):
            asyncio.run(retry(Flaky(failures=100), 3, delay_s=0.25))

        # No sleep after the final attempt
        assert [s for s in sleeps if s == 0.25] == [0.25, 0.25]

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            asyncio.run(retry(Flaky(failures=0), 0))
