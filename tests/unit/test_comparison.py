"""Tests for comparison helpers."""

from decimal import Decimal

import pytest
from pydantic import BaseModel

from stepharness.comparison import (
    ComparisonOptions,
    compare_collections,
    compare_json,
    compare_numeric,
    compare_objects,
    compare_xml,
)


def test_numeric_within_tolerance():
    result = compare_numeric(1.00050, 1.00052, tolerance=0.00005)

    assert result.is_match
    assert result.metadata["difference"] == Decimal("0.00002")
    assert result.differences == []
    assert "within tolerance" in result.message


def test_numeric_outside_tolerance():
    result = compare_numeric(1.0000, 1.0010, tolerance=0.0001)

    assert not result.is_match
    assert result.metadata["difference"] == Decimal("0.0010")
    assert result.metadata["tolerance"] == Decimal("0.0001")
    assert result.differences == ["Expected: 1.0, Actual: 1.001, Difference: 0.001"]


def test_numeric_boundary_is_inclusive():
    assert compare_numeric("1.10", "1.15", tolerance="0.05").is_match


def test_numeric_uses_default_tolerance():
    assert compare_numeric(Decimal("2.0000"), Decimal("2.0009")).is_match
    assert not compare_numeric(Decimal("2.000"), Decimal("2.002")).is_match


def test_numeric_rejects_non_numbers():
    with pytest.raises(ValueError):
        compare_numeric("abc", 1)


def test_objects_equivalent():
    result = compare_objects({"pair": "EUR/USD", "legs": [1, 2]}, {"legs": [1, 2], "pair": "EUR/USD"})
    assert result.is_match
    assert result.message == "Objects are equivalent"


def test_objects_report_paths():
    expected = {"order": {"side": "Buy", "qty": 1, "tags": ["a"]}}
    actual = {"order": {"side": "Sell", "qty": "1", "tags": ["a", "b"], "extra": True}}

    result = compare_objects(expected, actual)

    assert not result.is_match
    assert "order.side: Value mismatch - Expected: 'Buy', Actual: 'Sell'" in result.differences
    assert "order.qty: Type mismatch - Expected: Integer, Actual: String" in result.differences
    assert "order.tags[1]: Extra item in actual array" in result.differences
    assert "order.extra: Extra property in actual" in result.differences
    assert result.message == f"Found {len(result.differences)} differences"


def test_objects_accept_models():
    class Quote(BaseModel):
        pair: str
        bid: float

    assert compare_objects(Quote(pair="EUR/USD", bid=1.1), {"pair": "EUR/USD", "bid": 1.1}).is_match


def test_objects_options():
    options = ComparisonOptions(ignore_case=True, ignore_whitespace=True, ignore_properties=["ts"])

    result = compare_objects({"status": "FILLED ", "ts": 1}, {"status": "filled", "ts": 2}, options)

    assert result.is_match


def test_json_differences():
    result = compare_json('{"a": 1, "b": [1, 2]}', '{"b": [1], "c": null}')

    assert not result.is_match
    assert "a: Property missing in actual" in result.differences
    assert "b: Array length mismatch - Expected: 2, Actual: 1" in result.differences
    assert "b[1]: Missing item in actual array" in result.differences
    assert "c: Extra property in actual" in result.differences


def test_json_equivalent():
    result = compare_json('{"a": [1, {"b": "x"}]}', '{ "a": [1, {"b": "x"}] }')
    assert result.is_match
    assert result.message == "JSON objects are equivalent"


def test_json_parse_error():
    result = compare_json("{not json", "{}")
    assert not result.is_match
    assert result.message.startswith("JSON parsing error:")


def test_xml_comparison():
    expected = '<order id="1"><pair>EUR/USD</pair><qty>10</qty></order>'
    same = '<order id="1"><pair>EUR/USD</pair><qty>10</qty></order>'
    different = '<order id="2"><pair>GBP/USD</pair></order>'

    assert compare_xml(expected, same).is_match

    result = compare_xml(expected, different)
    assert not result.is_match
    assert "order@id: Attribute value mismatch - Expected: '1', Actual: '2'" in result.differences
    assert (
        "order/pair: Text content mismatch - Expected: 'EUR/USD', Actual: 'GBP/USD'"
        in result.differences
    )
    assert "order[1]: Missing child element in actual" in result.differences


def test_xml_parse_error():
    result = compare_xml("<a>", "<a/>")
    assert not result.is_match
    assert result.message.startswith("XML parsing error:")


def test_collections():
    assert compare_collections([1, 2], (1, 2)).is_match

    result = compare_collections([{"id": 1}, {"id": 2}], [{"id": 1}, {"id": 3}, {"id": 4}])
    assert not result.is_match
    assert result.differences[0] == "Count mismatch - Expected: 2, Actual: 3"
    assert "Item at index 1: Found 1 differences" in result.differences
    assert "Extra item at index 2: {'id': 4}" in result.differences


def test_numeric_strings_keep_their_scale():
    result = compare_numeric("1.0000", "1.0010", tolerance="0.0001")

    assert str(result.metadata["difference"]) == "0.0010"
    assert result.differences == ["Expected: 1.0000, Actual: 1.0010, Difference: 0.0010"]
