"""Catalogue of spreadsheet functions recognised in cell formulas.

Entries describe names and parameters only; formulas are never evaluated.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

ParameterType = Literal["string", "number", "boolean", "range", "any"]

_FUNCTION_NAME_RE = re.compile(r"[A-Z]+")


@dataclass(frozen=True)
class FunctionParameter:
    """One positional parameter of a catalogued function."""

    name: str
    type: ParameterType
    description: str
    optional: bool = False


@dataclass(frozen=True)
class FunctionSpec:
    """Name, category and signature of a catalogued function."""

    name: str
    parameters: tuple[FunctionParameter, ...]
    category: str = "uncategorized"
    description: str = "No description given."
    variadic: bool = False

    def __post_init__(self) -> None:
        if not _FUNCTION_NAME_RE.fullmatch(self.name):
            raise ValueError(
                f'Function name "{self.name}" is not valid. Names must be all caps and only '
                "characters A-Z."
            )


_FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType(
    {
        spec.name: spec
        for spec in (
            FunctionSpec(
                name="TEXT",
                parameters=(
                    FunctionParameter("value", "number", "Numeric value you want to convert to text."),
                    FunctionParameter("format_text", "string", "The desired format."),
                ),
                category="text",
                description="Convert a number to text.",
            ),
            FunctionSpec(
                name="SUM",
                parameters=(FunctionParameter("values", "range", "Cells or numbers to add."),),
                category="math",
                description="Add numbers together.",
                variadic=True,
            ),
            FunctionSpec(
                name="AVERAGE",
                parameters=(FunctionParameter("values", "range", "Cells or numbers to average."),),
                category="statistical",
                description="Arithmetic mean of the arguments.",
                variadic=True,
            ),
            FunctionSpec(
                name="MIN",
                parameters=(FunctionParameter("values", "range", "Cells or numbers to compare."),),
                category="statistical",
                description="Smallest of the arguments.",
                variadic=True,
            ),
            FunctionSpec(
                name="MAX",
                parameters=(FunctionParameter("values", "range", "Cells or numbers to compare."),),
                category="statistical",
                description="Largest of the arguments.",
                variadic=True,
            ),
            FunctionSpec(
                name="IF",
                parameters=(
                    FunctionParameter("condition", "boolean", "Value to test."),
                    FunctionParameter("then_value", "any", "Result when condition is true."),
                    FunctionParameter(
                        "else_value", "any", "Result when condition is false.", optional=True
                    ),
                ),
                category="logical",
                description="Choose between two values.",
            ),
        )
    }
)


def get_function(name: str) -> FunctionSpec | None:
    """Return the catalogued function named name, if any."""

    return _FUNCTIONS.get(name)


def list_functions() -> list[str]:
    """Return catalogued function names in stable order."""

    return sorted(_FUNCTIONS)
