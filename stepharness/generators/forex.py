"""Generators for forex trading scenarios."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from .base import ParameterGenerator

VOLATILITY_SCENARIOS: Dict[str, Dict[str, Any]] = {
    "low": {"min": Decimal("0.0001"), "max": Decimal("0.005"), "description": "Low volatility market"},
    "medium": {"min": Decimal("0.005"), "max": Decimal("0.015"), "description": "Medium volatility market"},
    "high": {"min": Decimal("0.015"), "max": Decimal("0.050"), "description": "High volatility market"},
    "extreme": {"min": Decimal("0.050"), "max": Decimal("0.200"), "description": "Extreme volatility market"},
}


class ForexParameterGenerator(ParameterGenerator):
    """Parameter generator with market-condition types on top of the defaults."""

    def __init__(self, locale: str = "en_US", seed: Optional[int] = None) -> None:
        super().__init__(locale=locale, seed=seed)
        self._register_market_generators()

    def _pick(self, *choices: str):
        return lambda _: self.faker.random_element(choices)

    def _register_market_generators(self) -> None:
        self.register_generator(
            "market_condition", self._pick("Bullish", "Bearish", "Sideways", "Volatile")
        )
        self.register_generator(
            "trading_session", self._pick("London", "NewYork", "Tokyo", "Sydney")
        )
        self.register_generator(
            "risk_level", self._pick("Conservative", "Moderate", "Aggressive")
        )
        self.register_generator("news_impact", self._pick("High", "Medium", "Low", "None"))
        self.register_generator(
            "economic_indicator",
            self._pick("GDP", "CPI", "NFP", "Interest Rate", "PMI", "Unemployment Rate"),
        )
        self.register_generator(
            "price_pattern",
            self._pick("Trend", "Range", "Breakout", "Reversal", "Consolidation"),
        )
        self.register_generator("volatility_scenario", self._volatility_scenario)

    @staticmethod
    def _volatility_scenario(cfg: Dict[str, Any]) -> Dict[str, Any]:
        level = str(cfg.get("level", "medium")).lower()
        return dict(VOLATILITY_SCENARIOS.get(level, VOLATILITY_SCENARIOS["medium"]))
