"""GridEvaluator: computes a cell's displayed value from the current grid.

Values are pulled, never cached across reads: every call to
:meth:`GridEvaluator.value` resolves the cell's reference chain from the
grid's current raw text.  Within one call each reachable cell is evaluated
once, in dependency order, so diamond-shaped graphs stay linear and long
chains do not recurse.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from cellgrid.calc._functions import as_number, fold_for
from cellgrid.calc._graph import evaluation_order
from cellgrid.calc._terms import (
    Const,
    ConstArg,
    DisplayValue,
    FormulaTerm,
    Invalid,
    Product,
    Ref,
    Sum,
)

if TYPE_CHECKING:
    from cellgrid._address import Address
    from cellgrid._grid import Grid

logger = logging.getLogger(__name__)

INVALID_MARKER = "INVALID"
EMPTY = ""


def _or_empty(value: DisplayValue | None) -> DisplayValue:
    """Falsy values (absent, "", 0, NaN) display as empty text."""
    if not value or (isinstance(value, float) and math.isnan(value)):
        return EMPTY
    return value


class GridEvaluator:
    """Evaluates cells of one grid.

    Usage::

        evaluator = GridEvaluator(grid)
        evaluator.value(Address(0, 1))
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    def value(self, address: Address) -> DisplayValue:
        """Displayed value of the cell at *address*; ``""`` for an empty slot."""
        grid = self._grid
        if grid.lookup(address) is None:
            return EMPTY

        values: dict[Address, DisplayValue] = {}
        for addr in evaluation_order(grid, address):
            cell = grid.lookup(addr)
            if cell is None:
                continue
            values[addr] = self._evaluate_term(addr, cell.raw, cell.parsed, values)
        return values[address]

    # ------------------------------------------------------------------
    # Term evaluation
    # ------------------------------------------------------------------

    def _evaluate_term(
        self,
        address: Address,
        raw: str,
        term: FormulaTerm,
        resolved: dict[Address, DisplayValue],
    ) -> DisplayValue:
        """Evaluate *term* given already-resolved values of its dependencies.

        Empty slots are absent from *resolved*.
        """
        if isinstance(term, Const):
            return raw
        if isinstance(term, Invalid):
            logger.debug("Invalid formula %r at %s", raw, address)
            return INVALID_MARKER
        if isinstance(term, Ref):
            return _or_empty(resolved.get(term.address))
        if isinstance(term, (Sum, Product)):
            fold = fold_for(term)
            nums = []
            for arg in term.args:
                if isinstance(arg, ConstArg):
                    nums.append(arg.num)
                else:
                    nums.append(as_number(resolved.get(arg.address), fold.identity))
            return fold.fold(nums)
        raise TypeError(f"Unknown formula term: {term!r}")
