"""Tests for StateSaveGuard."""

import asyncio
import threading

from antigravity_agent.state_guard import GuardState, StateSaveGuard

from conftest import FakeClock


def active_guard(clock=None, interval=1.0):
    guard = StateSaveGuard(debounce_interval=interval, clock=clock or FakeClock())
    guard.activate()
    return guard


def test_starts_restoring():
    guard = StateSaveGuard(clock=FakeClock())
    assert guard.state is GuardState.RESTORING
    assert guard.restoring


def test_never_saves_while_restoring():
    guard = StateSaveGuard(clock=FakeClock())
    for now in (0.0, 1.5, 60.0, 1e6):
        assert not guard.attempt_save(now)


def test_debounce_window():
    guard = active_guard()
    assert guard.attempt_save(10.0)
    assert not guard.attempt_save(10.2)
    assert guard.attempt_save(11.1)


def test_rejected_attempt_does_not_move_the_window():
    guard = active_guard()
    assert guard.attempt_save(10.0)
    assert not guard.attempt_save(10.9)
    assert guard.attempt_save(11.0)


def test_first_save_is_debounced_from_construction():
    clock = FakeClock(100.0)
    guard = active_guard(clock)
    assert not guard.attempt_save()
    clock.now = 101.0
    assert guard.attempt_save()


def test_activate_happens_once():
    guard = StateSaveGuard(clock=FakeClock())
    assert guard.activate()
    assert not guard.activate()
    assert guard.state is GuardState.ACTIVE


def test_settle_activates_after_delay():
    guard = StateSaveGuard(clock=FakeClock())

    async def scenario():
        task = asyncio.create_task(guard.settle(0.05))
        await asyncio.sleep(0)
        still_restoring = guard.restoring
        await task
        return still_restoring

    assert asyncio.run(scenario())
    assert guard.state is GuardState.ACTIVE


def test_concurrent_callers_only_one_passes():
    guard = active_guard()
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        allowed = guard.attempt_save(50.0)
        with lock:
            results.append(allowed)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == 7
