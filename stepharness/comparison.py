"""Comparison helpers used by step actions to validate results.

Every helper returns a :class:`ComparisonResult` instead of raising, so a
step can turn a mismatch into a failed :class:`StepOutcome` with the
differences attached.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from pydantic import BaseModel, Field

from .constants import DEFAULT_NUMERIC_TOLERANCE

logger = logging.getLogger(__name__)

Number = Union[Decimal, float, int, str]


class ComparisonResult(BaseModel):
    is_match: bool = False
    message: str = ""
    differences: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ComparisonOptions(BaseModel):
    ignore_case: bool = False
    ignore_whitespace: bool = False
    ignore_properties: List[str] = Field(default_factory=list)
    numeric_tolerance: Decimal = DEFAULT_NUMERIC_TOLERANCE


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps the literal digits of floats (0.1 -> "0.1")
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None


def compare_numeric(
    expected: Number, actual: Number, tolerance: Number = DEFAULT_NUMERIC_TOLERANCE
) -> ComparisonResult:
    """Compare two numbers, matching when they differ by at most ``tolerance``.

    Strings and Decimals keep their scale, so ``compare_numeric("1.0000",
    "1.0010")`` reports a difference of ``0.0010``. Floats go through
    ``str()`` and lose trailing zeros: ``1.0010`` becomes ``1.001``.
    """
    exp = _to_decimal(expected)
    act = _to_decimal(actual)
    tol = _to_decimal(tolerance)
    difference = abs(exp - act)

    result = ComparisonResult(
        is_match=difference <= tol,
        metadata={"difference": difference, "tolerance": tol},
    )
    if result.is_match:
        result.message = f"Numbers are within tolerance (difference: {difference})"
    else:
        result.message = f"Numbers differ by {difference}, tolerance: {tol}"
        result.differences.append(
            f"Expected: {exp}, Actual: {act}, Difference: {difference}"
        )

    logger.debug(
        f"Numeric comparison - Expected: {exp}, Actual: {act}, "
        f"Tolerance: {tol}, Match: {result.is_match}"
    )
    return result


def _normalize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def _json_type(value: Any) -> str:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, (float, Decimal)):
        return "Float"
    if isinstance(value, str):
        return "String"
    if isinstance(value, Mapping):
        return "Object"
    if isinstance(value, (list, tuple)):
        return "Array"
    return type(value).__name__


def _prepare_text(value: str, options: ComparisonOptions) -> str:
    if options.ignore_case:
        value = value.lower()
    if options.ignore_whitespace:
        value = value.strip()
    return value


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _diff(
    expected: Any, actual: Any, path: str, options: ComparisonOptions
) -> List[str]:
    """Return path-qualified differences between two JSON-like structures."""
    expected = _normalize(expected)
    actual = _normalize(actual)
    differences: List[str] = []
    label = path or "$"

    expected_type = _json_type(expected)
    actual_type = _json_type(actual)
    if expected_type != actual_type:
        differences.append(
            f"{label}: Type mismatch - Expected: {expected_type}, Actual: {actual_type}"
        )
        return differences

    if isinstance(expected, Mapping):
        ignored = set(options.ignore_properties)
        for key, value in expected.items():
            if key in ignored:
                continue
            current = _join(path, str(key))
            if key not in actual:
                differences.append(f"{current}: Property missing in actual")
            else:
                differences.extend(_diff(value, actual[key], current, options))
        for key in actual:
            if key not in expected and key not in ignored:
                differences.append(f"{_join(path, str(key))}: Extra property in actual")
        return differences

    if isinstance(expected, (list, tuple)):
        if len(expected) != len(actual):
            differences.append(
                f"{label}: Array length mismatch - Expected: {len(expected)}, Actual: {len(actual)}"
            )
        for i in range(max(len(expected), len(actual))):
            current = f"{path}[{i}]"
            if i >= len(expected):
                differences.append(f"{current}: Extra item in actual array")
            elif i >= len(actual):
                differences.append(f"{current}: Missing item in actual array")
            else:
                differences.extend(_diff(expected[i], actual[i], current, options))
        return differences

    if isinstance(expected, str):
        if _prepare_text(expected, options) != _prepare_text(actual, options):
            differences.append(
                f"{label}: Value mismatch - Expected: '{expected}', Actual: '{actual}'"
            )
    elif expected != actual:
        differences.append(
            f"{label}: Value mismatch - Expected: '{expected}', Actual: '{actual}'"
        )
    return differences


def compare_objects(
    expected: Any, actual: Any, options: ComparisonOptions | None = None
) -> ComparisonResult:
    """Check two objects (mappings, models, sequences or scalars) for equivalence."""
    options = options or ComparisonOptions()
    differences = _diff(expected, actual, "", options)
    result = ComparisonResult(is_match=not differences, differences=differences)
    if result.is_match:
        result.message = "Objects are equivalent"
        logger.debug("Object comparison successful")
    else:
        result.message = f"Found {len(differences)} differences"
        logger.warning(f"Object comparison failed: {differences[0]}")
    return result


def compare_json(
    expected_json: str, actual_json: str, options: ComparisonOptions | None = None
) -> ComparisonResult:
    """Compare two JSON documents and list their differences by path."""
    options = options or ComparisonOptions()
    try:
        expected = json.loads(expected_json)
        actual = json.loads(actual_json)
    except json.JSONDecodeError as e:
        logger.error(f"JSON comparison failed due to parsing error: {e}")
        message = f"JSON parsing error: {e}"
        return ComparisonResult(is_match=False, message=message, differences=[message])

    differences = _diff(expected, actual, "", options)
    is_match = not differences
    logger.debug(
        f"JSON comparison completed - IsMatch: {is_match}, Differences: {len(differences)}"
    )
    return ComparisonResult(
        is_match=is_match,
        message="JSON objects are equivalent"
        if is_match
        else f"Found {len(differences)} differences",
        differences=differences,
    )


def _diff_elements(
    expected: ET.Element, actual: ET.Element, path: str, options: ComparisonOptions
) -> List[str]:
    current = f"{path}/{expected.tag}" if path else expected.tag
    if expected.tag != actual.tag:
        return [
            f"{current}: Element name mismatch - Expected: {expected.tag}, Actual: {actual.tag}"
        ]

    differences: List[str] = []
    ignored = set(options.ignore_properties)
    for name, value in expected.attrib.items():
        if name in ignored:
            continue
        if name not in actual.attrib:
            differences.append(f"{current}@{name}: Attribute missing")
            continue
        other = actual.attrib[name]
        if options.ignore_case:
            if value.lower() != other.lower():
                differences.append(
                    f"{current}@{name}: Attribute value mismatch - Expected: '{value}', Actual: '{other}'"
                )
        elif value != other:
            differences.append(
                f"{current}@{name}: Attribute value mismatch - Expected: '{value}', Actual: '{other}'"
            )

    expected_children = list(expected)
    actual_children = list(actual)
    if not expected_children and not actual_children:
        expected_text = _prepare_text(expected.text or "", options)
        actual_text = _prepare_text(actual.text or "", options)
        if expected_text != actual_text:
            differences.append(
                f"{current}: Text content mismatch - Expected: '{expected.text or ''}', "
                f"Actual: '{actual.text or ''}'"
            )

    if len(expected_children) != len(actual_children):
        differences.append(
            f"{current}: Child element count mismatch - Expected: {len(expected_children)}, "
            f"Actual: {len(actual_children)}"
        )
    for i in range(max(len(expected_children), len(actual_children))):
        if i >= len(expected_children):
            differences.append(f"{current}[{i}]: Extra child element in actual")
        elif i >= len(actual_children):
            differences.append(f"{current}[{i}]: Missing child element in actual")
        else:
            differences.extend(
                _diff_elements(expected_children[i], actual_children[i], current, options)
            )
    return differences


def compare_xml(
    expected_xml: str, actual_xml: str, options: ComparisonOptions | None = None
) -> ComparisonResult:
    """Compare two XML documents element by element."""
    options = options or ComparisonOptions()
    try:
        expected = ET.fromstring(expected_xml)
        actual = ET.fromstring(actual_xml)
    except ET.ParseError as e:
        logger.error(f"XML comparison failed due to parsing error: {e}")
        message = f"XML parsing error: {e}"
        return ComparisonResult(is_match=False, message=message, differences=[message])

    differences = _diff_elements(expected, actual, "", options)
    is_match = not differences
    return ComparisonResult(
        is_match=is_match,
        message="XML documents are equivalent"
        if is_match
        else f"Found {len(differences)} differences",
        differences=differences,
    )


def compare_collections(
    expected: Iterable[Any],
    actual: Iterable[Any],
    options: ComparisonOptions | None = None,
) -> ComparisonResult:
    """Compare two collections item by item."""
    options = options or ComparisonOptions()
    expected_list: Sequence[Any] = list(expected)
    actual_list: Sequence[Any] = list(actual)
    differences: List[str] = []

    if len(expected_list) != len(actual_list):
        differences.append(
            f"Count mismatch - Expected: {len(expected_list)}, Actual: {len(actual_list)}"
        )

    for i in range(max(len(expected_list), len(actual_list))):
        if i >= len(expected_list):
            differences.append(f"Extra item at index {i}: {actual_list[i]}")
        elif i >= len(actual_list):
            differences.append(f"Missing item at index {i}: {expected_list[i]}")
        else:
            item = compare_objects(expected_list[i], actual_list[i], options)
            if not item.is_match:
                differences.append(f"Item at index {i}: {item.message}")
                differences.extend(f"  {d}" for d in item.differences)

    is_match = not differences
    return ComparisonResult(
        is_match=is_match,
        message="Collections are equivalent"
        if is_match
        else f"Found {len(differences)} differences",
        differences=differences,
    )
