"""
Expression and binding engine.

A deliberately small, sandboxed language for templates:

* dot-path lookups into the data context (``customer.address.city``)
* ``{{expression}}`` substitution where an expression is a dot-path or a
  single call to a formatting helper (``{{formatDate(data.due)}}``)
* ``visibleIf`` conditions of the form ``path === 'literal'``

Nothing here executes code. Every operation is total: lookups that fail and
expressions that cannot be parsed evaluate to an empty string, and conditions
that cannot be parsed count as satisfied.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from ..exceptions import ExpressionError

logger = logging.getLogger(__name__)

EXPRESSION_PATTERN = re.compile(r"\{\{(.+?)\}\}")

CALL_PATTERN = re.compile(r"""
    ^\s*
    (?P<helper>[A-Za-z_]\w*)      # helper name
    \s*\(\s*
    (?P<arg>[^()]*?)              # single argument, no nesting
    \s*\)\s*$
""", re.VERBOSE)

PATH_PATTERN = re.compile(r"^\s*[\w$-]+(?:\s*\.\s*[\w$-]+)*\s*$")

CONDITION_OPERATOR = "==="

_MISSING = object()


def stringify(value: Any) -> str:
    """Display form of a bound value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(item) for item in value)
    return str(value)


def resolve_value(path: Optional[str], context: Any) -> Any:
    """Walk ``path`` through nested mappings and return the raw value.

    Returns an empty string when any segment is absent or an intermediate value
    is not a mapping.
    """
    if not path:
        return ""
    current = context
    for segment in path.split("."):
        key = segment.strip()
        if not isinstance(current, Mapping):
            return ""
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return ""
    return current


def resolve_path(path: Optional[str], context: Any) -> str:
    """Resolve ``path`` and return its display string (``""`` when absent)."""
    return stringify(resolve_value(path, context))


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = stringify(value).strip()
    if not text:
        raise ExpressionError("Empty date value")
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ExpressionError("Not an ISO-8601 date", text) from e


def format_date(value: Any) -> str:
    """``DD/MM/YYYY``."""
    return _parse_datetime(value).strftime("%d/%m/%Y")


def format_datetime(value: Any) -> str:
    """``DD/MM/YYYY HH:MM``."""
    return _parse_datetime(value).strftime("%d/%m/%Y %H:%M")


def format_time(value: Any) -> str:
    """``HH:MM``."""
    return _parse_datetime(value).strftime("%H:%M")


HELPERS: Dict[str, Callable[[Any], str]] = {
    "formatDate": format_date,
    "formatDateTime": format_datetime,
    "formatTime": format_time,
}


def apply_helper(name: str, value: Any) -> str:
    """Run a formatting helper, degrading to ``""`` on unknown names or bad input."""
    helper = HELPERS.get(name)
    if helper is None:
        logger.warning(f"Unknown expression helper: {name}")
        return ""
    try:
        return helper(value)
    except ExpressionError as e:
        logger.debug(f"{name} could not format {value!r}: {e}")
        return ""


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def evaluate_expression(expression: str, context: Any) -> str:
    """Evaluate the inside of a ``{{ }}`` marker."""
    expression = (expression or "").strip()
    call = CALL_PATTERN.match(expression)
    if call:
        arg = call.group("arg")
        if not PATH_PATTERN.match(arg):
            logger.debug(f"Unsupported helper argument in {expression!r}")
            return ""
        return apply_helper(call.group("helper"), resolve_value(arg, context))
    if PATH_PATTERN.match(expression):
        return resolve_path(expression, context)
    logger.debug(f"Unsupported expression {expression!r}")
    return ""


def replace_expressions(text: Optional[str], context: Any,
                        transform: Optional[Callable[[str], str]] = None) -> str:
    """Replace every ``{{expression}}`` in ``text`` with its evaluated value.

    ``transform`` is applied to each substituted value (e.g. HTML escaping).
    """
    if not text:
        return ""

    def substitute(match: re.Match) -> str:
        value = evaluate_expression(match.group(1), context)
        return transform(value) if transform else value

    return EXPRESSION_PATTERN.sub(substitute, text)


def has_expressions(text: Optional[str]) -> bool:
    return bool(text) and EXPRESSION_PATTERN.search(text) is not None


def evaluate_condition(expression: Optional[str], context: Any) -> bool:
    """Evaluate a ``visibleIf`` condition.

    Only ``path === 'literal'`` is understood; the comparison is on the string
    form of the resolved value. Empty, unsupported or malformed conditions are
    treated as satisfied so the block stays visible, as is any non-string value.
    """
    if not isinstance(expression, str) or not expression.strip():
        return True
    parts = expression.split(CONDITION_OPERATOR)
    if len(parts) != 2:
        logger.debug(f"Unsupported visibility condition {expression!r}; keeping block visible")
        return True
    left, right = (part.strip() for part in parts)
    if not PATH_PATTERN.match(left):
        logger.debug(f"Malformed visibility condition {expression!r}; keeping block visible")
        return True
    literal = right.strip("'\"")
    return resolve_path(left, context) == literal


__all__ = [
    "EXPRESSION_PATTERN",
    "HELPERS",
    "stringify",
    "resolve_value",
    "resolve_path",
    "format_date",
    "format_datetime",
    "format_time",
    "apply_helper",
    "evaluate_expression",
    "replace_expressions",
    "has_expressions",
    "evaluate_condition",
]
