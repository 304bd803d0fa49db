"""Faker-based parameter value generators."""

from __future__ import annotations

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from faker import Faker
from pydantic import BaseModel, Field

from ..bag import ParameterBag

logger = logging.getLogger(__name__)

GeneratorFn = Callable[[Dict[str, Any]], Any]

CURRENCY_PAIRS = ("EUR/USD", "GBP/USD", "USD/JPY", "AUD/USD", "USD/CHF", "USD/CAD", "NZD/USD")

BASE_PRICES: Dict[str, Decimal] = {
    "EUR/USD": Decimal("1.1000"),
    "GBP/USD": Decimal("1.3000"),
    "USD/JPY": Decimal("110.00"),
    "AUD/USD": Decimal("0.7500"),
    "USD/CHF": Decimal("0.9200"),
    "USD/CAD": Decimal("1.2500"),
    "NZD/USD": Decimal("0.7000"),
}

LEVERAGES = (1, 5, 10, 20, 30, 50, 100, 200, 400, 500)


class ParameterConfig(BaseModel):
    """How to produce one named parameter."""

    type: str
    configuration: Dict[str, Any] = Field(default_factory=dict)
    description: str = ""
    is_required: bool = True


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class ParameterGenerator:
    """Produce parameter values by type name.

    Generators take the per-parameter ``configuration`` mapping and return a
    value suitable for a parameter bag. Type names are case-insensitive.
    """

    def __init__(self, locale: str = "en_US", seed: Optional[int] = None) -> None:
        self._faker = Faker(locale)
        if seed is not None:
            self._faker.seed_instance(seed)
        self._generators: Dict[str, GeneratorFn] = {}
        self._register_defaults()

    @property
    def faker(self) -> Faker:
        return self._faker

    def _random_decimal(self, low: Any, high: Any, places: int) -> Decimal:
        low_d, high_d = _decimal(low), _decimal(high)
        fraction = _decimal(self._faker.random.random())
        return _quantize(low_d + (high_d - low_d) * fraction, places)

    def _register_defaults(self) -> None:
        fk = self._faker

        self.register_generator("string", lambda _: fk.word())
        self.register_generator("email", lambda _: fk.email())
        self.register_generator("name", lambda _: fk.name())
        self.register_generator("phone", lambda _: fk.phone_number())
        self.register_generator("address", lambda _: fk.address())
        self.register_generator("company", lambda _: fk.company())

        self.register_generator(
            "int",
            lambda cfg: fk.random_int(min=int(cfg.get("min", 1)), max=int(cfg.get("max", 100))),
        )
        self.register_generator(
            "decimal",
            lambda cfg: self._random_decimal(
                cfg.get("min", "1.0"), cfg.get("max", "100.0"), int(cfg.get("decimals", 2))
            ),
        )
        self.register_generator(
            "date",
            lambda cfg: fk.date_time_between(start_date=f"-{int(cfg.get('past', 365))}d"),
        )
        self.register_generator(
            "future_date",
            lambda cfg: fk.date_time_between(
                start_date="now", end_date=f"+{int(cfg.get('days', 365))}d"
            ),
        )

        self._register_forex_generators()

    def _register_forex_generators(self) -> None:
        fk = self._faker

        def forex_price(cfg: Dict[str, Any]) -> Decimal:
            pair = str(cfg.get("pair", "EUR/USD"))
            base = BASE_PRICES.get(pair, Decimal("1.0000"))
            variance = _decimal(cfg.get("variance", "0.001"))
            return _quantize(base + self._random_decimal(-variance, variance, 8), 5)

        self.register_generator("currency_pair", lambda _: fk.random_element(CURRENCY_PAIRS))
        self.register_generator("forex_price", forex_price)
        self.register_generator(
            "trade_amount",
            lambda cfg: self._random_decimal(cfg.get("min", "0.01"), cfg.get("max", "10.0"), 2),
        )
        self.register_generator("leverage", lambda _: fk.random_element(LEVERAGES))
        self.register_generator(
            "account_balance",
            lambda cfg: self._random_decimal(
                cfg.get("min", "1000.0"), cfg.get("max", "100000.0"), 2
            ),
        )
        self.register_generator(
            "order_type",
            lambda _: fk.random_element(("Market", "Limit", "Stop", "StopLimit")),
        )

    def register_generator(self, type_name: str, generator: GeneratorFn) -> None:
        """Register or replace the generator for ``type_name``."""
        self._generators[type_name.lower()] = generator
        logger.debug(f"Registered parameter generator: {type_name}")

    def generate_parameter(
        self, type_name: str, config: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Produce one value of ``type_name``.

        Unknown types yield a ``GENERATED_<TYPE>_<id>`` placeholder and a
        generator that raises yields ``ERROR_GENERATING_<TYPE>``; both cases
        are logged rather than raised so one bad parameter does not stop a
        whole data-driven run.
        """
        generator = self._generators.get(type_name.lower())
        if generator is None:
            logger.warning(f"No generator found for type: {type_name}")
            return f"GENERATED_{type_name.upper()}_{uuid.uuid4().hex[:8]}"

        try:
            value = generator(dict(config or {}))
        except Exception:
            logger.exception(f"Failed to generate parameter of type: {type_name}")
            return f"ERROR_GENERATING_{type_name.upper()}"

        logger.debug(f"Generated parameter - Type: {type_name}, Value: {value}")
        return value

    def generate_parameters(
        self, parameter_configs: Mapping[str, Union[ParameterConfig, Mapping[str, Any]]]
    ) -> ParameterBag:
        """Produce a parameter bag from named parameter configurations."""
        parameters: ParameterBag = {}
        for name, config in parameter_configs.items():
            if not isinstance(config, ParameterConfig):
                config = ParameterConfig.model_validate(config)
            parameters[name] = self.generate_parameter(config.type, config.configuration)
        return parameters

    def generate_parameter_sets(
        self,
        parameter_configs: Mapping[str, Union[ParameterConfig, Mapping[str, Any]]],
        count: int = 1,
    ) -> List[ParameterBag]:
        """Produce ``count`` independent bags for data-driven runs."""
        return [self.generate_parameters(parameter_configs) for _ in range(count)]

    def available_generators(self) -> List[str]:
        return list(self._generators)
