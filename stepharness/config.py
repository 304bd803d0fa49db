from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .constants import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE, HISTORY_URL_ENV_VAR


class HistoryConfig(BaseModel):
    """Where execution history is kept."""

    url: Optional[str] = None


class ExecutorConfig(BaseModel):
    """Step executor settings."""

    step_timeout: Optional[float] = Field(default=None, gt=0)


class GeneratorConfig(BaseModel):
    """Parameter generator settings."""

    locale: str = "en_US"
    seed: Optional[int] = None


class LoggingConfig(BaseModel):
    level: str = "INFO"


class HarnessConfig(BaseModel):
    """Top-level configuration model."""

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> HarnessConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to STEPHARNESS_CONFIG env
            variable or 'stepharness.yaml' in the current directory.
    """

    config_path = path or os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = HarnessConfig(**data)
    else:
        config = HarnessConfig()

    env_history_url = os.getenv(HISTORY_URL_ENV_VAR)
    if env_history_url:
        config.history.url = env_history_url
    return config
