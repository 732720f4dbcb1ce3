"""
Tests for the debounced trigger
"""
import asyncio

import pytest

from portal.services.debounce import Debouncer

DELAY = 0.02


class Recorder:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


@pytest.mark.asyncio
async def test_burst_collapses_into_one_call():
    """Only the last trigger of a burst fires"""
    rec = Recorder()
    deb = Debouncer(rec, delay=DELAY)
    deb.trigger()
    deb.trigger()
    last = deb.trigger()
    await last
    await asyncio.sleep(DELAY * 2)
    assert rec.calls == 1


@pytest.mark.asyncio
async def test_separate_bursts_fire_separately():
    """Triggers spaced beyond the delay each fire"""
    rec = Recorder()
    deb = Debouncer(rec, delay=DELAY)
    await deb.trigger()
    await deb.trigger()
    assert rec.calls == 2


@pytest.mark.asyncio
async def test_guard_false_arms_nothing():
    """A closed guard schedules no call"""
    rec = Recorder()
    deb = Debouncer(rec, delay=DELAY, guard=lambda: False)
    assert deb.trigger() is None
    await asyncio.sleep(DELAY * 2)
    assert rec.calls == 0
    assert not deb.is_waiting


@pytest.mark.asyncio
async def test_guard_checked_again_when_timer_fires():
    """Guard turning false while waiting suppresses the call"""
    rec = Recorder()
    allowed = {"value": True}
    deb = Debouncer(rec, delay=DELAY, guard=lambda: allowed["value"])
    task = deb.trigger()
    allowed["value"] = False
    await task
    assert rec.calls == 0


@pytest.mark.asyncio
async def test_close_disarms_and_refuses():
    """Teardown cancels the waiting timer and blocks new ones"""
    rec = Recorder()
    deb = Debouncer(rec, delay=DELAY)
    deb.trigger()
    assert deb.is_waiting
    deb.close()
    assert not deb.is_waiting
    assert deb.trigger() is None
    await asyncio.sleep(DELAY * 2)
    assert rec.calls == 0


@pytest.mark.asyncio
async def test_trigger_during_running_call_does_not_cancel_it():
    """A running callback completes; the new trigger fires after it"""
    started = asyncio.Event()
    release = asyncio.Event()
    finished = []

    async def slow():
        started.set()
        await release.wait()
        finished.append(True)

    deb = Debouncer(slow, delay=DELAY)
    first = deb.trigger()
    await started.wait()
    second = deb.trigger()
    release.set()
    await first
    await second
    assert finished == [True, True]


@pytest.mark.asyncio
async def test_callback_errors_are_logged_not_raised(caplog):
    """A failing callback leaves a log record"""

    async def boom():
        raise RuntimeError("boom")

    deb = Debouncer(boom, delay=DELAY)
    await deb.trigger()
    assert "Debounced callback failed" in caplog.text
