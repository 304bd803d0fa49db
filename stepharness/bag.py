"""Parameter bag helpers.

A parameter bag is a plain ``dict`` shared by every step of one sequence run.
Values are limited to a small set of types so that history records and
outcomes can be written to JSON and read back without losing information:

* ``str``, ``int``, ``float``, ``bool`` and ``None`` are stored as-is
* ``Decimal``, ``datetime`` and ``date`` are wrapped in a tagged object
* mappings and lists are encoded recursively

Tagged objects look like ``{"__type__": "decimal", "value": "1.10"}``. A
mapping that itself contains the ``__type__`` key is wrapped as a
``"mapping"`` so it is not mistaken for a tagged value on the way back.
"""

from __future__ import annotations

import copy
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping

from .constants import TYPE_TAG
from .errors import UnsupportedValueError

ParameterBag = Dict[str, Any]


def encode_value(value: Any, strict: bool = True) -> Any:
    """Return a JSON-compatible representation of ``value``.

    Args:
        value: Bag value to encode.
        strict: When ``False`` unsupported values are stored as their
            ``repr`` instead of raising.

    Raises:
        UnsupportedValueError: If ``value`` is not a supported bag type and
            ``strict`` is set.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Decimal):
        return {TYPE_TAG: "decimal", "value": str(value)}
    if isinstance(value, datetime):
        return {TYPE_TAG: "datetime", "value": value.isoformat()}
    if isinstance(value, date):
        return {TYPE_TAG: "date", "value": value.isoformat()}
    if isinstance(value, Mapping):
        encoded = {str(k): encode_value(v, strict) for k, v in value.items()}
        if TYPE_TAG in encoded:
            return {TYPE_TAG: "mapping", "value": encoded}
        return encoded
    if isinstance(value, (list, tuple)):
        return [encode_value(v, strict) for v in value]
    if strict:
        raise UnsupportedValueError(
            f"Unsupported parameter value of type '{type(value).__name__}'"
        )
    return {TYPE_TAG: "repr", "value": repr(value)}


def decode_value(value: Any) -> Any:
    """Reverse :func:`encode_value`."""
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    if not isinstance(value, dict):
        return value

    tag = value.get(TYPE_TAG)
    if tag is None or set(value) != {TYPE_TAG, "value"}:
        return {k: decode_value(v) for k, v in value.items()}

    payload = value["value"]
    if tag == "decimal":
        return Decimal(payload)
    if tag == "datetime":
        return datetime.fromisoformat(payload)
    if tag == "date":
        return date.fromisoformat(payload)
    if tag == "mapping":
        return {k: decode_value(v) for k, v in payload.items()}
    if tag == "repr":
        return payload
    raise ValueError(f"Unknown value tag: {tag}")


def encode_bag(bag: Mapping[str, Any], strict: bool = True) -> Dict[str, Any]:
    """Encode every value of ``bag``."""
    return {str(k): encode_value(v, strict) for k, v in bag.items()}


def decode_bag(data: Mapping[str, Any]) -> ParameterBag:
    """Decode a mapping produced by :func:`encode_bag`."""
    return {k: decode_value(v) for k, v in data.items()}


def snapshot_bag(bag: Mapping[str, Any]) -> ParameterBag:
    """Return a deep copy of ``bag`` detached from later mutations."""
    return copy.deepcopy(dict(bag))


def merge_into(bag: ParameterBag, data: Mapping[str, Any] | None) -> ParameterBag:
    """Merge a copy of ``data`` into ``bag`` in place; later keys win."""
    if data:
        bag.update(copy.deepcopy(dict(data)))
    return bag
