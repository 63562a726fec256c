"""Tests for the poll scheduler."""

import asyncio

from resq_client.infrastructure.resilience import BackoffPolicy
from resq_client.infrastructure.scheduling import PollOutcome, PollScheduler

from ....conftest import wait_until


def fast_backoff() -> BackoffPolicy:
    return BackoffPolicy(base_delay=0.01, max_delay=0.04, jitter=False)


class ScriptedTick:
    """Tick that replays outcomes, repeating the last one."""

    def __init__(self, *outcomes: PollOutcome, duration: float = 0.0):
        self.outcomes = list(outcomes) or [PollOutcome.CONTINUE]
        self.duration = duration
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self) -> PollOutcome:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.duration:
                await asyncio.sleep(self.duration)
            index = min(self.calls - 1, len(self.outcomes) - 1)
            return self.outcomes[index]
        finally:
            self.in_flight -= 1


class TestPollScheduler:
    """Test scheduler lifecycle."""

    async def test_ticks_until_stopped(self) -> None:
        tick = ScriptedTick()
        scheduler = PollScheduler(tick, fast_backoff())

        scheduler.start()
        await wait_until(lambda: tick.calls >= 3)
        scheduler.stop()
        calls = tick.calls
        await asyncio.sleep(0.05)

        assert not scheduler.is_running
        assert tick.calls == calls

    async def test_done_stops_for_good(self) -> None:
        """Test a DONE outcome ends the loop without an outside stop."""
        tick = ScriptedTick(PollOutcome.CONTINUE, PollOutcome.DONE)
        scheduler = PollScheduler(tick, fast_backoff())

        scheduler.start()
        await wait_until(lambda: not scheduler.is_running)
        await asyncio.sleep(0.05)

        assert tick.calls == 2

    async def test_ticks_never_overlap(self) -> None:
        """Test a slow tick delays the next one instead of running beside it."""
        tick = ScriptedTick(duration=0.03)
        scheduler = PollScheduler(tick, fast_backoff())

        scheduler.start()
        await wait_until(lambda: tick.calls >= 3)
        scheduler.stop()

        assert tick.max_in_flight == 1

    async def test_failures_counted_and_reset(self) -> None:
        """Test the failure count grows on FAILED and drops to zero after a success."""
        outcomes = [PollOutcome.FAILED, PollOutcome.FAILED, PollOutcome.CONTINUE, PollOutcome.FAILED, PollOutcome.DONE]
        observed: list[int] = []
        scheduler: PollScheduler

        async def tick() -> PollOutcome:
            observed.append(scheduler.consecutive_failures)
            return outcomes[len(observed) - 1]

        scheduler = PollScheduler(tick, fast_backoff())
        scheduler.start()
        await wait_until(lambda: not scheduler.is_running)

        assert observed == [0, 1, 2, 0, 1]

    async def test_raising_tick_counts_as_failure(self) -> None:
        """Test an exception from the tick keeps the loop alive."""
        calls = 0

        async def tick() -> PollOutcome:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("boom")
            return PollOutcome.DONE

        scheduler = PollScheduler(tick, fast_backoff())
        scheduler.start()
        await wait_until(lambda: not scheduler.is_running)

        assert calls == 2

    async def test_stop_from_inside_tick(self) -> None:
        """Test a tick may stop its own scheduler and finish normally."""
        scheduler: PollScheduler
        finished = False

        async def tick() -> PollOutcome:
            nonlocal finished
            scheduler.stop()
            await asyncio.sleep(0)
            finished = True
            return PollOutcome.CONTINUE

        scheduler = PollScheduler(tick, fast_backoff())
        scheduler.start()
        await wait_until(lambda: finished)
        await asyncio.sleep(0.03)

        assert not scheduler.is_running

    async def test_start_is_idempotent(self) -> None:
        tick = ScriptedTick(duration=0.02)
        scheduler = PollScheduler(tick, fast_backoff())

        scheduler.start()
        scheduler.start()
        await wait_until(lambda: tick.calls >= 2)
        scheduler.stop()

        assert tick.max_in_flight == 1

    async def test_restart_after_stop(self) -> None:
        tick = ScriptedTick()
        scheduler = PollScheduler(tick, fast_backoff())

        scheduler.start()
        scheduler.stop()
        scheduler.start()
        await wait_until(lambda: tick.calls >= 1)

        assert scheduler.is_running
        scheduler.stop()

    def test_stop_without_start(self) -> None:
        PollScheduler(ScriptedTick(), fast_backoff()).stop()
