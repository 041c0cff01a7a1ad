from __future__ import annotations


class FormulaError(ValueError):
    """Raised for formulas that cannot be tokenized, parsed or evaluated."""
