"""Cell: a slot's raw text plus its derived formula term."""

from __future__ import annotations

from cellgrid._address import Address
from cellgrid.calc._parser import FormulaParser, _default_parser, dependencies
from cellgrid.calc._terms import FormulaTerm


class Cell:
    """Raw user text for one grid slot.

    ``parsed`` and ``dependencies`` are recomputed from ``raw`` on every
    read.  The displayed value depends on other cells and is computed by
    :class:`~cellgrid.calc.GridEvaluator` with the grid as context.
    """

    __slots__ = ("raw", "_parser")

    def __init__(self, raw: str = "", parser: FormulaParser = _default_parser) -> None:
        self.raw = raw
        self._parser = parser

    @property
    def parsed(self) -> FormulaTerm:
        return self._parser.parse(self.raw)

    @property
    def dependencies(self) -> tuple[Address, ...]:
        return dependencies(self.parsed)

    def __repr__(self) -> str:
        return f"<Cell raw={self.raw!r}>"
