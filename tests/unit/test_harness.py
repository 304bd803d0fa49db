import pytest

from stepharness import InMemoryHistoryLog, StepHarness, StepOutcome, StepRegistry


async def _ok(bag):
    return StepOutcome.ok("done")


@pytest.mark.asyncio
async def test_harness_keeps_empty_history_log():
    log = InMemoryHistoryLog()
    harness = StepHarness(history=log)
    harness.register("a", "A", _ok)

    await harness.execute("a", {})

    assert harness.history is log
    assert len(log) == 1


@pytest.mark.asyncio
async def test_harness_keeps_empty_registry():
    registry = StepRegistry()
    harness = StepHarness(registry=registry)
    registry.register("a", "A", _ok)

    outcome = await harness.execute("a", {})

    assert harness.registry is registry
    assert outcome.message == "done"


@pytest.mark.asyncio
async def test_harness_defaults_are_independent():
    first, second = StepHarness(), StepHarness()
    first.register("a", "A", _ok)

    await first.execute("a", {})

    assert "a" not in second.registry
    assert await second.execution_history() == []
    assert len(await first.execution_history()) == 1
    await first.clear_history()
    assert await first.execution_history() == []
