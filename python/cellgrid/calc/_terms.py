"""Formula term types produced by parsing a cell's raw text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cellgrid._address import Address

Number = Union[int, float]
DisplayValue = Union[str, int, float]


# ---------------------------------------------------------------------------
# Numeric fold arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConstArg:
    """A literal number inside SUM(...) / PRODUCT(...)."""

    num: Number


@dataclass(frozen=True)
class RefArg:
    """A cell reference inside SUM(...) / PRODUCT(...)."""

    address: Address


NumericArg = Union[ConstArg, RefArg]


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Const:
    """Raw text that is not a formula; displayed as typed."""

    type = "const"


@dataclass(frozen=True)
class Invalid:
    """Text starting with ``=`` that matches no recognized formula shape."""

    type = "invalid"


@dataclass(frozen=True)
class Ref:
    """``=B3``: displays another cell's value."""

    address: Address
    type = "ref"


@dataclass(frozen=True)
class Sum:
    args: tuple[NumericArg, ...]
    type = "sum"


@dataclass(frozen=True)
class Product:
    args: tuple[NumericArg, ...]
    type = "product"


FormulaTerm = Union[Const, Invalid, Ref, Sum, Product]

CONST = Const()
INVALID = Invalid()
