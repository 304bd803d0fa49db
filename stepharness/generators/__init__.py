"""Pluggable parameter value sources."""

from __future__ import annotations

from typing import Optional

from ..config import GeneratorConfig
from .base import ParameterConfig, ParameterGenerator
from .forex import ForexParameterGenerator


def get_generator(
    config: Optional[GeneratorConfig] = None, forex: bool = False
) -> ParameterGenerator:
    """Build a generator from configuration."""
    config = config or GeneratorConfig()
    cls = ForexParameterGenerator if forex else ParameterGenerator
    return cls(locale=config.locale, seed=config.seed)


__all__ = [
    "ParameterConfig",
    "ParameterGenerator",
    "ForexParameterGenerator",
    "get_generator",
]
