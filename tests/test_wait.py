"""Tests for waiting on the next fire, from threads and from coroutines."""

import asyncio
import threading
import time

import pytest

from chainsignal.dispatch import ExecutorDispatcher, ImmediateDispatcher
from chainsignal.signal import Emission, Signal

TIMEOUT = 5.0


def _wait_for_listeners(signal, count) -> None:
    """Poll until the signal has ``count`` listeners connected."""
    deadline = time.monotonic() + TIMEOUT
    while len(signal) < count:
        assert time.monotonic() < deadline, "waiters never connected"
        time.sleep(0.001)


def _start_waiter(signal, results):
    thread = threading.Thread(
        target=lambda: results.append(signal.wait(timeout=TIMEOUT))
    )
    thread.start()
    return thread


class TestThreadWait:
    """Verify blocking waits from other threads."""

    def test_wait_resumes_with_fire_arguments(self, signal) -> None:
        """A waiting thread should receive the next fire's arguments."""
        results = []
        thread = _start_waiter(signal, results)
        _wait_for_listeners(signal, 1)

        signal.fire("x", key=1)
        thread.join(TIMEOUT)

        assert not thread.is_alive()
        assert results == [Emission(("x",), {"key": 1})]
        assert results[0].args == ("x",)
        assert len(signal) == 0

    def test_wait_only_sees_next_fire(self, signal) -> None:
        """A waiter should be resumed by one fire only."""
        results = []
        thread = _start_waiter(signal, results)
        _wait_for_listeners(signal, 1)

        signal.fire(1)
        signal.fire(2)
        thread.join(TIMEOUT)
        assert [e.args for e in results] == [(1,)]

    def test_waiters_are_independent(self, signal) -> None:
        """Every waiter should be resumed by the same fire."""
        results = []
        threads = [_start_waiter(signal, results) for _ in range(3)]
        _wait_for_listeners(signal, 3)

        signal.fire(42)
        for thread in threads:
            thread.join(TIMEOUT)

        assert [e.args for e in results] == [(42,)] * 3

    def test_wait_times_out_while_pending(self, signal) -> None:
        """With no fire, a wait should still be pending at its timeout."""
        with pytest.raises(TimeoutError):
            signal.wait(timeout=0.05)

        # The abandoned wait must not linger
        assert len(signal) == 0
        signal.fire(1)

    def test_wait_not_queued_behind_listeners(self) -> None:
        """A waiter should resume even if listeners are still running."""
        dispatcher = ExecutorDispatcher(threads=1)
        signal = Signal(dispatcher=dispatcher)
        release = threading.Event()
        signal.connect(lambda x: release.wait(TIMEOUT))

        results = []
        thread = _start_waiter(signal, results)
        _wait_for_listeners(signal, 2)

        signal.fire("go")
        thread.join(TIMEOUT)
        try:
            assert results == [Emission(("go",), {})]
        finally:
            release.set()
            dispatcher.shutdown()


class TestAsyncWait:
    """Verify waits from asyncio tasks."""

    def test_wait_async_resumes(self) -> None:
        """An awaiting task should receive the next fire's arguments."""

        async def _main():
            signal = Signal(dispatcher=ImmediateDispatcher())
            task = asyncio.ensure_future(signal.wait_async())
            await asyncio.sleep(0)
            assert len(signal) == 1

            signal.fire(3, unit="s")
            return await asyncio.wait_for(task, TIMEOUT)

        assert asyncio.run(_main()) == Emission((3,), {"unit": "s"})

    def test_wait_async_from_another_thread(self) -> None:
        """A fire from another thread should resume the task."""

        async def _main():
            signal = Signal(dispatcher=ImmediateDispatcher())
            task = asyncio.ensure_future(signal.wait_async())
            await asyncio.sleep(0)

            thread = threading.Thread(target=signal.fire, args=("bg",))
            thread.start()
            result = await asyncio.wait_for(task, TIMEOUT)
            thread.join(TIMEOUT)
            return result

        assert asyncio.run(_main()).args == ("bg",)

    def test_wait_async_pending_without_fire(self) -> None:
        """With no fire the task should time out and withdraw its wait."""

        async def _main():
            signal = Signal(dispatcher=ImmediateDispatcher())
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(signal.wait_async(), 0.05)
            assert len(signal) == 0
            signal.fire(1)

        asyncio.run(_main())

    def test_fire_after_cancel_is_ignored(self) -> None:
        """Resuming a cancelled waiter should be silently skipped."""

        async def _main():
            signal = Signal(dispatcher=ImmediateDispatcher())
            task = asyncio.ensure_future(signal.wait_async())
            await asyncio.sleep(0)

            task.cancel()
            # The task has not run its cleanup yet, so this fire finds it
            signal.fire(1)
            with pytest.raises(asyncio.CancelledError):
                await task
            await asyncio.sleep(0)
            assert len(signal) == 0

        asyncio.run(_main())
