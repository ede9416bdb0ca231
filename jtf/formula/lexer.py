"""Lexical checks for formula cells (strings beginning with "=").

Only the shape of a formula is inspected:
- characters outside the whitelist are rejected (quoted strings excepted)
- parentheses and brackets must balance and nest properly
- function names (an identifier directly followed by "(") must be A-Z only,
  and optionally present in the function catalogue
- a binary operator cannot start an expression or follow another operator
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from jtf.formula.functions import get_function
from jtf.utils.errors import SchemaError

_ALLOWED_CHAR_RE = re.compile(r"[A-Za-z0-9_\s+\-*/^&%<>=,.:;$!()\[\]]")
_FUNCTION_CALL_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*\(")
_FUNCTION_NAME_RE = re.compile(r"[A-Z]+")
_BINARY_OPERATORS = frozenset("*/^&")
_OPERATORS = frozenset("+-*/^&<>=")
_PAIRS = {")": "(", "]": "["}


@dataclass(frozen=True)
class FormulaIssue:
    """A lexical problem found in a formula."""

    kind: str
    message: str
    position: int


@dataclass
class FormulaScan:
    """Formula scanning output."""

    formula: str
    functions: list[str] = field(default_factory=list)
    issues: list[FormulaIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


def is_formula(value: object) -> bool:
    return isinstance(value, str) and value.startswith("=")


def scan_formula(formula: str, *, registered_only: bool = False) -> FormulaScan:
    """Scan a formula string and collect every lexical issue found."""

    result = FormulaScan(formula=formula)
    if not is_formula(formula):
        result.issues.append(
            FormulaIssue(kind="not_formula", message='Formulas must begin with "=".', position=0)
        )
        return result

    body, quote_issue = _mask_strings(formula)
    if quote_issue is not None:
        result.issues.append(quote_issue)

    result.issues.extend(_find_invalid_characters(body))
    result.issues.extend(_find_unbalanced_brackets(body))
    result.issues.extend(_find_misplaced_operators(body))

    for match in _FUNCTION_CALL_RE.finditer(body):
        name = match.group(1)
        position = match.start(1)
        if not _FUNCTION_NAME_RE.fullmatch(name):
            result.issues.append(
                FormulaIssue(
                    kind="invalid_function_name",
                    message=f'Function name "{name}" must be all caps and only characters A-Z.',
                    position=position,
                )
            )
            continue
        if registered_only and get_function(name) is None:
            result.issues.append(
                FormulaIssue(
                    kind="unknown_function",
                    message=f'Unknown function "{name}".',
                    position=position,
                )
            )
            continue
        if name not in result.functions:
            result.functions.append(name)

    result.issues.sort(key=lambda issue: issue.position)
    return result


def validate_formula(
    formula: str, *, registered_only: bool = False, path: str | None = None
) -> None:
    """Raise SchemaError for the first lexical issue in formula."""

    scan = scan_formula(formula, registered_only=registered_only)
    if scan.issues:
        issue = scan.issues[0]
        raise SchemaError(
            f"Invalid formula {formula!r}: {issue.message}",
            path=path,
            expected="well-formed formula",
            actual=formula,
        )


def _mask_strings(formula: str) -> tuple[str, FormulaIssue | None]:
    # Replace quoted literals with underscores so offsets stay aligned.
    chars = list(formula[1:])
    in_string = False
    start = 0
    for index, char in enumerate(chars):
        if char == '"':
            if not in_string:
                start = index
            in_string = not in_string
            chars[index] = "_"
        elif in_string:
            chars[index] = "_"

    issue = None
    if in_string:
        issue = FormulaIssue(
            kind="unterminated_string",
            message="String literal is not terminated.",
            position=start + 1,
        )
    return " " + "".join(chars), issue


def _find_invalid_characters(body: str) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    for index, char in enumerate(body):
        if not _ALLOWED_CHAR_RE.fullmatch(char):
            issues.append(
                FormulaIssue(
                    kind="invalid_character",
                    message=f"Character {char!r} is not allowed in formulas.",
                    position=index,
                )
            )
    return issues


def _find_unbalanced_brackets(body: str) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    open_positions: list[tuple[str, int]] = []

    for index, char in enumerate(body):
        if char in "([":
            open_positions.append((char, index))
            continue
        if char in _PAIRS:
            if open_positions and open_positions[-1][0] == _PAIRS[char]:
                open_positions.pop()
            else:
                issues.append(
                    FormulaIssue(
                        kind="stray_close",
                        message=f"Unmatched closing {char!r}.",
                        position=index,
                    )
                )

    for char, start in open_positions:
        issues.append(
            FormulaIssue(kind="unclosed_bracket", message=f"Unclosed {char!r}.", position=start)
        )
    return issues


def _find_misplaced_operators(body: str) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    previous = "("
    for index, char in enumerate(body):
        if char.isspace():
            continue
        if char in _BINARY_OPERATORS and (previous in _OPERATORS or previous in "([,"):
            issues.append(
                FormulaIssue(
                    kind="misplaced_operator",
                    message=f"Operator {char!r} is missing a left operand.",
                    position=index,
                )
            )
        previous = char
    return issues
