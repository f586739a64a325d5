"""
Tests for the saga runner: ordering, compensation and error propagation.
"""

import pytest

from app.services.saga import Saga


class StepFailed(Exception):
    pass


def recorder(log: list, name: str, result=None):
    async def action():
        log.append(name)
        return result

    return action


@pytest.mark.asyncio
async def test_steps_run_in_order_and_results_are_kept():
    log = []
    saga = Saga("test").add_step("a", recorder(log, "a", 1)).add_step("b", recorder(log, "b", 2))

    results = await saga.run()

    assert log == ["a", "b"]
    assert results == {"a": 1, "b": 2}


@pytest.mark.asyncio
async def test_failure_compensates_completed_steps_newest_first():
    log = []

    async def compensate_a(result):
        log.append(f"undo a:{result}")

    async def compensate_b(result):
        log.append(f"undo b:{result}")

    async def fail():
        raise StepFailed("boom")

    saga = (
        Saga("test")
        .add_step("a", recorder(log, "a", "header-1"), compensate_a)
        .add_step("b", recorder(log, "b", "rows"), compensate_b)
        .add_step("c", fail)
    )

    with pytest.raises(StepFailed):
        await saga.run()

    assert log == ["a", "b", "undo b:rows", "undo a:header-1"]


@pytest.mark.asyncio
async def test_failed_step_is_not_compensated():
    log = []

    async def fail():
        raise StepFailed("boom")

    async def compensate(result):
        log.append("undo")

    saga = Saga("test").add_step("a", fail, compensate)

    with pytest.raises(StepFailed):
        await saga.run()
    assert log == []


@pytest.mark.asyncio
async def test_compensation_failure_keeps_original_error():
    log = []

    async def broken_compensation(result):
        raise RuntimeError("compensation broke")

    async def compensate_a(result):
        log.append("undo a")

    async def fail():
        raise StepFailed("original")

    saga = (
        Saga("test")
        .add_step("a", recorder(log, "a"), compensate_a)
        .add_step("b", recorder(log, "b"), broken_compensation)
        .add_step("c", fail)
    )

    with pytest.raises(StepFailed, match="original"):
        await saga.run()
    assert log == ["a", "b", "undo a"]
