from pathlib import Path

import pytest

from stepharness import StepHarness, StepRegistry
from stepharness.cli_utils.loader import load_registry
from stepharness.errors import RegistryLoadError

FIXTURE = Path(__file__).parent.parent / "fixtures" / "forex_steps.py"


def test_load_registry_from_file():
    registry = load_registry(f"{FIXTURE}:registry")

    assert isinstance(registry, StepRegistry)
    assert "login" in registry
    assert registry.get("place_order").name == "Place market order"


def test_load_registry_from_module(tmp_path, monkeypatch):
    (tmp_path / "suite_steps.py").write_text(
        "from stepharness import StepHarness\n"
        "harness = StepHarness()\n"
        "harness.register('ping', 'Ping', lambda bag: None)\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))

    registry = load_registry("suite_steps:harness")

    assert "ping" in registry


def test_harness_target_returns_its_registry(tmp_path):
    path = tmp_path / "with_harness.py"
    path.write_text("from stepharness import StepHarness\nharness = StepHarness()\n")

    registry = load_registry(f"{path}:harness")

    assert isinstance(registry, StepRegistry)
    assert not isinstance(registry, StepHarness)


@pytest.mark.parametrize(
    "target",
    [
        "no_colon_here",
        ":registry",
        f"{FIXTURE}:",
        f"{FIXTURE}:missing",
        f"{FIXTURE}:not_a_registry",
        "/does/not/exist.py:registry",
        "stepharness_missing_module:registry",
    ],
)
def test_bad_targets_raise(target):
    with pytest.raises(RegistryLoadError):
        load_registry(target)
