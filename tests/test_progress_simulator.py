import asyncio

import pytest

from apexsure.portal.progress import DEFAULT_STEP_LABELS, ProgressSimulator


@pytest.mark.asyncio
async def test_run_ends_with_last_step_active_and_earlier_completed():
    simulator = ProgressSimulator(delays=(0, 0, 0, 0))

    finished = await simulator.run()

    assert finished is True
    steps = simulator.steps
    assert [s.label for s in steps] == list(DEFAULT_STEP_LABELS)
    assert [s.completed for s in steps] == [True, True, True, False]
    assert [s.active for s in steps] == [False, False, False, True]


@pytest.mark.asyncio
async def test_exactly_one_step_active_while_running():
    simulator = ProgressSimulator(delays=(0.01, 0.01, 0.01, 0.01))
    task = asyncio.create_task(simulator.run())

    seen = []
    while not task.done():
        await asyncio.sleep(0.005)
        active = [s for s in simulator.steps if s.active]
        if active:
            seen.append(len(active))
    await task

    assert seen
    assert all(count == 1 for count in seen)


@pytest.mark.asyncio
async def test_cancel_turns_remaining_advances_into_no_ops():
    simulator = ProgressSimulator(delays=(0, 0.05, 0.05, 0.05))
    task = asyncio.create_task(simulator.run())
    await asyncio.sleep(0.01)

    simulator.reset()
    finished = await task

    assert finished is False
    assert all(not s.active and not s.completed for s in simulator.steps)


@pytest.mark.asyncio
async def test_run_accepts_custom_labels():
    simulator = ProgressSimulator(delays=(0, 0, 0, 0))
    await simulator.run(["a", "b", "c", "d"])
    simulator.complete_all()
    assert [s.label for s in simulator.steps] == ["a", "b", "c", "d"]
    assert all(s.completed and not s.active for s in simulator.steps)


def test_exactly_four_steps_required():
    with pytest.raises(ValueError):
        ProgressSimulator(labels=["only", "three", "labels"])
    with pytest.raises(ValueError):
        ProgressSimulator(delays=(1, 2))


def test_default_schedule_grows():
    delays = ProgressSimulator().delays
    assert list(delays) == sorted(delays)
    assert len(set(delays)) == 4
