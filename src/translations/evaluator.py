"""Static evaluation of translation key expressions.

Given the ``ast`` node passed as the key argument of a translation lookup,
:func:`evaluate` decides whether the key is knowable at scan time:

 - ``"menu.title"``                -> resolved ``menu.title``
 - ``f"menu.title"`` (no holes)    -> resolved ``menu.title``
 - ``"menu." + "title"``           -> resolved ``menu.title``
 - ``f"user.{uid}.name"``          -> unresolved
 - ``KEY``, ``obj.key``, ``a if b else c``, ``make_key()`` -> unresolved

Parentheses never reach this module: ``ast`` drops them and hands over the
inner expression. The evaluator is pure and total; it never raises for an
unknown node type.

For unresolved keys :func:`extract_prefix` recovers the literal head of the
raw source text (``f"user.{uid}.name"`` -> ``user.``), which the audit uses to
avoid flagging catalog keys reachable only through computed lookups.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

__all__ = [
    "ExprKind",
    "Resolved",
    "Unresolved",
    "Resolution",
    "classify",
    "evaluate",
    "extract_prefix",
    "KEY_SEPARATOR",
]

KEY_SEPARATOR = "."

_STRING_PREFIX = re.compile(r"^[rRbBuUfF]{1,2}(?=['\"])")
_QUOTES = ('"""', "'''", '"', "'")


class ExprKind(str, Enum):
    LITERAL = "literal"
    INTERPOLATED = "interpolated"
    CONCAT = "concat"
    OTHER = "other"


@dataclass(frozen=True)
class Resolved:
    value: str


@dataclass(frozen=True)
class Unresolved:
    reason: str = "dynamic key"


Resolution = Union[Resolved, Unresolved]


def classify(node: ast.AST) -> ExprKind:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return ExprKind.LITERAL
    if isinstance(node, ast.JoinedStr):
        return ExprKind.INTERPOLATED
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.Add):
        return ExprKind.CONCAT
    return ExprKind.OTHER


def evaluate(node: ast.AST) -> Resolution:
    """Resolve ``node`` to a literal key or report why it cannot be."""
    kind = classify(node)
    if kind is ExprKind.LITERAL:
        return Resolved(node.value)  # type: ignore[attr-defined]
    if kind is ExprKind.INTERPOLATED:
        parts = []
        for part in node.values:  # type: ignore[attr-defined]
            if not (isinstance(part, ast.Constant) and isinstance(part.value, str)):
                return Unresolved()
            parts.append(part.value)
        return Resolved("".join(parts))
    if kind is ExprKind.CONCAT:
        left = evaluate(node.left)  # type: ignore[attr-defined]
        if not isinstance(left, Resolved):
            return left
        right = evaluate(node.right)  # type: ignore[attr-defined]
        if not isinstance(right, Resolved):
            return right
        return Resolved(left.value + right.value)
    return Unresolved()


def extract_prefix(expression: Optional[str]) -> str:
    """Return the literal key prefix of a raw key expression, or ``""``.

    Only prefixes containing the key separator are meaningful; anything else
    (``name``, ``f"{section}"``) yields an empty string.
    """
    if not expression or not expression.strip():
        return ""
    expr = expression.strip()
    expr = _STRING_PREFIX.sub("", expr, count=1)
    for quote in _QUOTES:
        if expr.startswith(quote):
            expr = expr[len(quote) :]
            break
    brace = expr.find("{")
    if brace >= 0:
        expr = expr[:brace]
    expr = expr.rstrip("\"'")
    return expr if KEY_SEPARATOR in expr else ""
