"""Decide whether targeting expressions include a cell."""

from __future__ import annotations

from jtf.targeting.models import Exact, Range, Target, TargetSpec, TargetUnion, Wildcard
from jtf.targeting.parser import parse_parameter, parse_targeting_array
from jtf.utils.indexes import parse_index

_SPEC_TYPES = (Wildcard, Exact, Range, TargetUnion)


def compare_index(target: object, index: int) -> bool:
    """Return whether one axis target includes index.

    target may be a parsed TargetSpec or the raw JSON parameter.
    """

    spec = target if isinstance(target, _SPEC_TYPES) else parse_parameter(target)
    return _matches(spec, index)


def target_includes_cell(target: object, x: int | str, y: int | str) -> bool:
    """Return whether a targeting array includes cell (x, y).

    target may be a parsed Target or the raw JSON targeting array.
    """

    parsed = target if isinstance(target, Target) else parse_targeting_array(target)
    column = parse_index(x, "x-coordinate")
    row = parse_index(y, "y-coordinate")
    return _matches(parsed.x, column) and _matches(parsed.y, row)


def _matches(spec: TargetSpec, index: int) -> bool:
    if isinstance(spec, Wildcard):
        return True
    if isinstance(spec, Exact):
        return spec.index == index
    if isinstance(spec, Range):
        return spec.lo <= index and (spec.hi is None or index < spec.hi)
    return any(_matches(member, index) for member in spec.members)
