from __future__ import annotations

import pytest

from jtf.targeting.matcher import compare_index, target_includes_cell
from jtf.targeting.models import WILDCARD, Exact, Range, Target, TargetUnion
from jtf.targeting.parser import parse_parameter, parse_targeting_array, validate_targeting_array
from jtf.utils.errors import SchemaError


def test_parse_parameter_variants() -> None:
    assert parse_parameter(None) == WILDCARD
    assert parse_parameter(False) == WILDCARD
    assert parse_parameter("  ") == WILDCARD
    assert parse_parameter([]) == WILDCARD
    assert parse_parameter(0) == Exact(0)
    assert parse_parameter(4.0) == Exact(4)
    assert parse_parameter(" 07 ") == Exact(7)
    assert parse_parameter("5:10") == Range(lo=5, hi=10)
    assert parse_parameter(":10") == Range(lo=0, hi=10)
    assert parse_parameter("5:") == Range(lo=5, hi=None)
    assert parse_parameter([2, "5:8"]) == TargetUnion(members=(Exact(2), Range(lo=5, hi=8)))


@pytest.mark.parametrize("raw", [1.5, -1, True, "a", "1:2:3", "-1", {"x": 1}, "1.5"])
def test_parse_parameter_rejects_invalid_values(raw: object) -> None:
    with pytest.raises(SchemaError):
        parse_parameter(raw)


def test_parse_targeting_array_fills_missing_axes() -> None:
    assert parse_targeting_array([]) == Target()
    assert parse_targeting_array([3]) == Target(x=Exact(3), y=WILDCARD)
    assert parse_targeting_array([None, "1:"]) == Target(x=WILDCARD, y=Range(lo=1))


def test_targeting_array_shape_errors_carry_path() -> None:
    with pytest.raises(SchemaError, match="too many parameters") as excinfo:
        validate_targeting_array([1, 2, 3], path="style.0.target")
    assert excinfo.value.path == "style.0.target"

    with pytest.raises(SchemaError, match="Invalid targeting array"):
        validate_targeting_array("0:1")

    with pytest.raises(SchemaError) as nested:
        validate_targeting_array([0, [1, "x"]], path="target")
    assert nested.value.path == "target.1.1"


def test_range_is_half_open() -> None:
    assert compare_index("5:10", 5) is True
    assert compare_index("5:10", 9) is True
    assert compare_index("5:10", 10) is False
    assert compare_index("5:10", 4) is False
    assert compare_index(":10", 0) is True
    assert compare_index("5:", 1_000_000) is True


def test_wildcards_match_anything() -> None:
    assert compare_index(None, 123) is True
    assert compare_index([], 0) is True
    assert compare_index(":", 42) is True


def test_exact_and_numeric_strings() -> None:
    assert compare_index(3, 3) is True
    assert compare_index(0, 1) is False
    assert compare_index("3", 3) is True
    assert compare_index("3", 4) is False


def test_union_matches_any_member() -> None:
    assert compare_index([2, "5:8"], 6) is True
    assert compare_index([2, "5:8"], 2) is True
    assert compare_index([2, "5:8"], 3) is False
    assert compare_index([[1, [4]], "10:"], 4) is True


def test_compare_index_accepts_parsed_specs() -> None:
    assert compare_index(Range(lo=1, hi=3), 2) is True
    assert compare_index(TargetUnion(members=(Exact(1),)), 2) is False


def test_target_includes_cell_requires_both_axes() -> None:
    target = ["0:10", 0]

    assert target_includes_cell(target, 3, 0) is True
    assert target_includes_cell(target, 3, 1) is False
    assert target_includes_cell(target, 10, 0) is False
    assert target_includes_cell([], 99, 99) is True
    assert target_includes_cell(["2"], "2", "500") is True


def test_target_includes_cell_rejects_bad_coordinates() -> None:
    with pytest.raises(ValueError, match="x-coordinate"):
        target_includes_cell([], -1, 0)
    with pytest.raises(ValueError, match="y-coordinate"):
        target_includes_cell([], 0, "one")
