"""Exceptions raised at the grid's mutation boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cellgrid._address import Address


class CellGridError(Exception):
    """Base class for cellgrid errors."""


class CycleRejected(CellGridError, ValueError):
    """An edit was discarded because it would close a dependency cycle.

    The grid is left exactly as it was before the edit was proposed.
    """

    def __init__(self, address: Address, raw: str, label: str | None = None) -> None:
        self.address = address
        self.raw = raw
        where = label if label is not None else f"({address.x}, {address.y})"
        super().__init__(f"Dependency cycle detected at {where}, change discarded")
