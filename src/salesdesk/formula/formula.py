from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Union

from salesdesk.config import FORMULA_DECIMALS

from .parser import Number, evaluate_expression

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"[a-zA-Z_]+")

FieldValueType = Union[int, float, str, bool, None]


@dataclass(frozen=True, slots=True)
class FieldValue:
    field_name: str
    value: FieldValueType = None


FieldsLike = Union[Iterable[Union[FieldValue, Mapping[str, Any]]], Mapping[str, FieldValueType]]


def _is_falsy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def field_values(fields: FieldsLike) -> dict[str, Any]:
    """``field_name -> value``, with missing or falsy values mapped to 0."""
    if isinstance(fields, Mapping):
        pairs = fields.items()
    else:
        pairs = (
            (f.field_name, f.value) if isinstance(f, FieldValue)
            else (f["field_name"], f.get("value"))
            for f in fields
        )
    return {str(name): 0 if _is_falsy(value) else value for name, value in pairs}


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def substitute_fields(formula: str, values: Mapping[str, Any]) -> str:
    """Replace every identifier naming a known field with its value; leave the rest."""
    def repl(m: re.Match) -> str:
        name = m.group(0)
        return _as_text(values[name]) if name in values else name

    return _IDENT_RE.sub(repl, formula)


def round_half_up(value: float, places: int = FORMULA_DECIMALS) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_result(value: Number) -> Number:
    """Round fractional values to FORMULA_DECIMALS places; integral values pass through."""
    if value % 1 != 0:
        return round_half_up(value)
    return value


def evaluate_formula(formula: str, fields: FieldsLike) -> Number:
    """
    Evaluate a custom metric formula such as ``"income - expense"``.

    Never raises: a formula that cannot be substituted, parsed or evaluated
    is logged and yields 0.
    """
    if not isinstance(formula, str) or not formula.strip():
        return 0
    try:
        expression = substitute_fields(formula, field_values(fields))
        return round_result(evaluate_expression(expression))
    except Exception:
        logger.warning("Error evaluating formula %r", formula, exc_info=True)
        return 0
