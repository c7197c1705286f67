"""Numeric folds (SUM, PRODUCT) and number coercion for fold arguments."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Any, Callable

from cellgrid.calc._parser import parse_number
from cellgrid.calc._terms import Number, Product, Sum


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def as_number(value: Any, default: Number) -> Number:
    """Coerce a resolved cell value for use inside a fold.

    Numbers pass through; text is parsed as a decimal literal.  Anything
    else (absent cells, empty or non-numeric text) yields *default*.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        num = parse_number(value.strip())
        if num is not None:
            return num
    return default


# ---------------------------------------------------------------------------
# Folds
# ---------------------------------------------------------------------------

# Integers beyond this magnitude lose exactness as floats
_MAX_EXACT_INT = 2 ** 53


def _widen(n: Number) -> Number:
    """Turn integers too large for exact float arithmetic into floats."""
    if isinstance(n, int) and abs(n) > _MAX_EXACT_INT:
        try:
            return float(n)
        except OverflowError:
            return math.copysign(math.inf, n)
    return n


@dataclass(frozen=True)
class NumericFold:
    """An associative combine with its identity element."""

    name: str
    identity: Number
    combine: Callable[[Number, Number], Number]

    def fold(self, values: list[Number]) -> Number:
        res = self.identity
        for v in values:
            res = _widen(self.combine(res, v))
        return res


SUM = NumericFold("SUM", 0, operator.add)
PRODUCT = NumericFold("PRODUCT", 1, operator.mul)

_FOLDS_BY_TERM: dict[type, NumericFold] = {
    Sum: SUM,
    Product: PRODUCT,
}


def fold_for(term: Sum | Product) -> NumericFold:
    return _FOLDS_BY_TERM[type(term)]
