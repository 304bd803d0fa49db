import pytest

import stepharness.history as history_module
from stepharness import InMemoryHistoryLog, SequenceRunner, StepExecutor, StepRegistry


@pytest.fixture(autouse=True)
def reset_history_instance():
    history_module._history_instance = None
    yield
    history_module._history_instance = None


@pytest.fixture
def registry() -> StepRegistry:
    return StepRegistry()


@pytest.fixture
def history() -> InMemoryHistoryLog:
    return InMemoryHistoryLog()


@pytest.fixture
def executor(registry, history) -> StepExecutor:
    return StepExecutor(registry, history)


@pytest.fixture
def runner(executor) -> SequenceRunner:
    return SequenceRunner(executor)
