"""
salesdesk.formula
~~~~~~~~~~~~~~~~~

Runtime evaluation of custom dashboard metrics.  A formula names fields;
each field name is replaced by its current value and the result is
evaluated by a restricted arithmetic parser (numbers, ``+ - * /``, unary
signs, parentheses).  Nothing is ever handed to a general-purpose evaluator.

Basic usage::

    from salesdesk.formula import evaluate_formula

    fields = [
        {"field_name": "income", "value": 500},
        {"field_name": "expense", "value": 125.5},
    ]
    evaluate_formula("income - expense", fields)    # → 374.5

A formula that fails for any reason is logged and evaluates to 0, so a bad
custom metric cannot break a report.

Public API
----------
FieldValue      A named field value.
FormulaError    Raised by the low-level parser; never by evaluate_formula.
TrackerRow      A business-tracker row (per-date values, optional formula).
WeeklyResults   Row totals and formula goals for one week.
"""

from __future__ import annotations

from salesdesk.formula._exceptions import FormulaError
from salesdesk.formula.formula import (
    FieldValue,
    evaluate_formula,
    field_values,
    round_result,
    substitute_fields,
)
from salesdesk.formula.parser import evaluate_expression, tokenize
from salesdesk.formula.tracker import (
    TrackerRow,
    WeeklyResults,
    field_value,
    parse_number,
    remaining_days_to_prospect,
    sum_from_key,
    weekly_totals,
)

__all__ = [
    "FieldValue",
    "FormulaError",
    "TrackerRow",
    "WeeklyResults",
    "evaluate_expression",
    "evaluate_formula",
    "field_value",
    "field_values",
    "parse_number",
    "remaining_days_to_prospect",
    "round_result",
    "substitute_fields",
    "sum_from_key",
    "tokenize",
    "weekly_totals",
]
