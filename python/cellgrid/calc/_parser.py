"""Formula parser: raw cell text -> typed formula term.

Parsing is total: anything that starts with ``=`` but does not match a
recognized shape becomes :data:`INVALID`, never an exception.
"""

from __future__ import annotations

import re

from cellgrid._address import Address, label_to_address
from cellgrid._config import DEFAULT_CONFIG, GridConfig
from cellgrid.calc._terms import (
    CONST,
    INVALID,
    ConstArg,
    FormulaTerm,
    Number,
    NumericArg,
    Product,
    Ref,
    RefArg,
    Sum,
)

FORMULA_MARKER = "="

# Decimal literal: 12, -3.5, .5, 4., 1e3, +2E-2
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^[+-]?\d+$")

# Longer integer literals are read as floats
_MAX_INT_DIGITS = 15

_FOLDS = {"sum": Sum, "product": Product}


def parse_number(text: str) -> Number | None:
    """Parse a decimal literal, keeping ``int`` for plain integers."""
    if not _NUMBER_RE.match(text):
        return None
    if _INT_RE.match(text):
        digits = text.lstrip("+-").lstrip("0") or "0"
        if len(digits) <= _MAX_INT_DIGITS:
            n = int(digits)
            return -n if text.startswith("-") else n
    return float(text)


# ---------------------------------------------------------------------------
# Dependency extraction
# ---------------------------------------------------------------------------


def dependencies(term: FormulaTerm) -> tuple[Address, ...]:
    """Addresses read by *term*'s ``ref`` positions, in argument order."""
    if isinstance(term, Ref):
        return (term.address,)
    if isinstance(term, (Sum, Product)):
        return tuple(arg.address for arg in term.args if isinstance(arg, RefArg))
    return ()


# ---------------------------------------------------------------------------
# FormulaParser
# ---------------------------------------------------------------------------


class FormulaParser:
    """Parses raw cell text against one grid's column alphabet and row count."""

    __slots__ = ("config",)

    def __init__(self, config: GridConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def parse_ref(self, text: str) -> Address | None:
        return label_to_address(text, self.config)

    def parse_numeric_args(self, arg_strings: list[str]) -> tuple[NumericArg, ...] | None:
        """Each argument must be a reference or a number; None on any miss."""
        args: list[NumericArg] = []
        for arg in arg_strings:
            arg = arg.strip()
            address = self.parse_ref(arg)
            if address is not None:
                args.append(RefArg(address))
                continue
            num = parse_number(arg)
            if num is not None:
                args.append(ConstArg(num))
                continue
            return None
        if not args:
            return None
        return tuple(args)

    def parse(self, raw: str) -> FormulaTerm:
        """Parse raw cell text.

        Shapes recognized after the ``=`` marker::

            =B3
            =SUM(arg, ...)
            =PRODUCT(arg, ...)

        where each ``arg`` is a reference or a numeric literal.  Function
        names are case-insensitive.
        """
        val = raw.strip()
        if not val.startswith(FORMULA_MARKER):
            return CONST

        open_paren = val.find("(")
        if open_paren == -1:
            address = self.parse_ref(val[1:].strip())
            if address is None:
                return INVALID
            return Ref(address)

        func = val[1:open_paren].lower()
        if not val.endswith(")"):
            return INVALID
        fold = _FOLDS.get(func)
        if fold is None:
            return INVALID

        args = self.parse_numeric_args(val[open_paren + 1 : -1].split(","))
        if args is None:
            return INVALID
        return fold(args)


_default_parser = FormulaParser()


def parse_cell_contents(raw: str) -> FormulaTerm:
    """Parse *raw* against the default 26-column, 1000-row grid."""
    return _default_parser.parse(raw)


def parse_ref(text: str) -> Address | None:
    return _default_parser.parse_ref(text)
