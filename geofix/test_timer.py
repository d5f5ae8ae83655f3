import asyncio

from geofix.timer import Timer


def test_arm_replaces_pending_expiry(loop):
    fired = []
    timer = Timer("deadline", lambda: fired.append(loop.now), loop)

    timer.arm(10.0)
    loop.advance(4.0)
    timer.arm(10.0)
    loop.advance(20.0)

    assert fired == [14.0]
    assert not timer.armed


def test_disarm(loop):
    fired = []
    timer = Timer("loop", lambda: fired.append(True), loop)

    timer.arm(1.0)
    assert timer.armed
    assert timer.interval == 1.0

    timer.disarm()
    timer.disarm()
    loop.advance(5.0)

    assert fired == []
    assert timer.interval is None


def test_runs_on_running_loop():
    async def run():
        fired = asyncio.Event()
        timer = Timer("deadline", fired.set)
        timer.arm(0.01)
        await asyncio.wait_for(fired.wait(), 1.0)
        return timer.armed

    assert asyncio.run(run()) is False
