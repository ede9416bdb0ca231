"""Parse raw targeting arrays into typed expressions.

Grammar of one axis parameter:
- null, false, or a blank string: wildcard
- a non-negative integer (or integral float): exact index
- a string of digits: exact index
- a string "lo:hi" with optional ends: half-open range, empty lo is 0 and empty
  hi is unbounded
- an array of parameters: union; the empty array is a wildcard

A targeting array holds at most two parameters, [x, y]; missing axes are
wildcards.
"""

from __future__ import annotations

import re

from jtf.targeting.models import WILDCARD, Exact, Range, Target, TargetSpec, TargetUnion
from jtf.utils.errors import SchemaError

_PARAMETER_RE = re.compile(r"[0-9:]+")
_FORMAT_HINT = '"[x, y]"'


def parse_targeting_array(raw: object, *, path: str = "target") -> Target:
    """Parse and validate a raw targeting array."""

    if not isinstance(raw, list):
        raise SchemaError(
            f"Invalid targeting array provided. Proper format: {_FORMAT_HINT}.",
            path=path,
            expected="array",
            actual=raw,
        )
    if len(raw) > 2:
        raise SchemaError(
            f"Targeting array provided too many parameters. Proper format: {_FORMAT_HINT}.",
            path=path,
            expected="array of length <= 2",
            actual=raw,
        )

    axes = [parse_parameter(item, path=f"{path}.{position}") for position, item in enumerate(raw)]
    while len(axes) < 2:
        axes.append(WILDCARD)
    return Target(x=axes[0], y=axes[1])


def validate_targeting_array(raw: object, *, path: str = "target") -> None:
    """Raise SchemaError when raw is not a valid targeting array."""

    parse_targeting_array(raw, path=path)


def parse_parameter(raw: object, *, path: str = "target") -> TargetSpec:
    """Parse one axis parameter of a targeting array."""

    if raw is None or raw is False:
        return WILDCARD

    if raw is True:
        raise SchemaError(
            'Invalid parameter "true" provided. Targeting parameters cannot be true.',
            path=path,
            expected="integer, range string, array or null",
            actual=raw,
        )

    if isinstance(raw, list):
        if not raw:
            return WILDCARD
        members = tuple(
            parse_parameter(item, path=f"{path}.{position}") for position, item in enumerate(raw)
        )
        return TargetUnion(members=members)

    if isinstance(raw, (int, float)):
        return Exact(_parse_number(raw, path))

    if isinstance(raw, str):
        return _parse_string(raw, path)

    raise SchemaError(
        f'Invalid parameter of type "{type(raw).__name__}" provided to targeting array.',
        path=path,
        expected="integer, range string, array or null",
        actual=raw,
    )


def _parse_number(raw: int | float, path: str) -> int:
    if isinstance(raw, float) and not raw.is_integer():
        raise SchemaError(
            f'Invalid parameter "{raw}" provided. Number parameters in targeting arrays must be integers.',
            path=path,
            expected="integer",
            actual=raw,
        )
    value = int(raw)
    if value < 0:
        raise SchemaError(
            f'Invalid parameter "{raw}" provided. Number parameters in targeting arrays must not be negative.',
            path=path,
            expected="non-negative integer",
            actual=raw,
        )
    return value


def _parse_string(raw: str, path: str) -> TargetSpec:
    text = raw.strip()
    if not text:
        return WILDCARD

    if not _PARAMETER_RE.fullmatch(text):
        raise SchemaError(
            f'Invalid parameter "{text}" provided. String parameters must contain either an '
            "integer, or a colon-delimited target.",
            path=path,
            expected='"n" or "lo:hi"',
            actual=raw,
        )

    if ":" not in text:
        return Exact(int(text))

    parts = text.split(":")
    if len(parts) != 2:
        raise SchemaError(
            f'Invalid parameter "{text}" provided. Colon-delimited targets take exactly two parts.',
            path=path,
            expected='"lo:hi"',
            actual=raw,
        )

    lo_text, hi_text = parts
    return Range(lo=int(lo_text) if lo_text else 0, hi=int(hi_text) if hi_text else None)
