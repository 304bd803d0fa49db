"""Tests for configuration loading."""

from stepharness.config import load_config
from stepharness.harness import StepHarness
from stepharness.history import SQLiteHistoryLog


def test_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("STEPHARNESS_HISTORY_URL", raising=False)
    monkeypatch.setenv("STEPHARNESS_CONFIG", str(tmp_path / "missing.yaml"))

    config = load_config()
    assert config.history.url is None
    assert config.executor.step_timeout is None
    assert config.generator.locale == "en_US"
    assert config.logging.level == "INFO"


def test_load_config_from_env(tmp_path, monkeypatch):
    monkeypatch.delenv("STEPHARNESS_HISTORY_URL", raising=False)
    config_path = tmp_path / "stepharness.yaml"
    config_path.write_text(
        """
history:
  url: sqlite:///tmp/history.db
executor:
  step_timeout: 2.5
generator:
  locale: de_DE
  seed: 7
logging:
  level: DEBUG
"""
    )
    monkeypatch.setenv("STEPHARNESS_CONFIG", str(config_path))

    config = load_config()
    assert config.history.url == "sqlite:///tmp/history.db"
    assert config.executor.step_timeout == 2.5
    assert config.generator.locale == "de_DE"
    assert config.generator.seed == 7
    assert config.logging.level == "DEBUG"


def test_history_url_env_overrides_file(tmp_path, monkeypatch):
    config_path = tmp_path / "stepharness.yaml"
    config_path.write_text("history:\n  url: sqlite://from-file.db\n")
    monkeypatch.setenv("STEPHARNESS_HISTORY_URL", "sqlite://from-env.db")

    config = load_config(str(config_path))
    assert config.history.url == "sqlite://from-env.db"


def test_harness_from_config(tmp_path, monkeypatch):
    monkeypatch.delenv("STEPHARNESS_HISTORY_URL", raising=False)
    config_path = tmp_path / "stepharness.yaml"
    config_path.write_text(
        f"history:\n  url: sqlite://{tmp_path / 'h.db'}\nexecutor:\n  step_timeout: 1\n"
    )

    harness = StepHarness.from_config(load_config(str(config_path)))
    assert isinstance(harness.history, SQLiteHistoryLog)
    assert harness.executor._step_timeout == 1
    harness.history.close()
