"""Resolve the classes and inline styles that apply to one cell."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from jtf.targeting.matcher import target_includes_cell
from jtf.targeting.parser import parse_targeting_array


@dataclass(frozen=True)
class CellStyles:
    """Space-joined class names and style declarations for a cell."""

    classes: str = ""
    style: str = ""

    def as_dict(self) -> dict[str, str]:
        return {"class": self.classes, "style": self.style}


def resolve_cell_styles(rules: Iterable[Mapping[str, Any]], x: int, y: int) -> CellStyles:
    """Collect matching rules in order.

    Rules are evaluated in the order given; callers pass document rules before
    table rules. Class names are trimmed; style declarations are trimmed and
    terminated with ";". Rules whose data is blank after trimming add nothing.
    """

    classes: list[str] = []
    declarations: list[str] = []

    for rule in rules:
        target = parse_targeting_array(rule["target"])
        if not target_includes_cell(target, x, y):
            continue
        data = rule["data"].strip()
        if not data:
            continue
        if rule["type"] == "class":
            classes.append(data)
        elif rule["type"] == "style":
            declarations.append(data if data.endswith(";") else f"{data};")

    return CellStyles(classes=" ".join(classes), style=" ".join(declarations))
