"""Parsed targeting expressions used by style rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Wildcard:
    """Matches every index."""


@dataclass(frozen=True)
class Exact:
    """Matches a single index."""

    index: int


@dataclass(frozen=True)
class Range:
    """Half-open interval [lo, hi); hi=None means unbounded."""

    lo: int = 0
    hi: int | None = None


@dataclass(frozen=True)
class TargetUnion:
    """Matches when any member matches."""

    members: tuple[TargetSpec, ...] = ()


TargetSpec = Union[Wildcard, Exact, Range, TargetUnion]

WILDCARD = Wildcard()


@dataclass(frozen=True)
class Target:
    """A parsed two-axis targeting array."""

    x: TargetSpec = field(default=WILDCARD)
    y: TargetSpec = field(default=WILDCARD)
