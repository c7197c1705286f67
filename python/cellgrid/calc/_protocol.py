"""CellEngine protocol and edit result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cellgrid._address import Address, AddressLike
    from cellgrid.calc._terms import DisplayValue


@dataclass(frozen=True)
class EditResult:
    """A committed edit."""

    address: Address
    old_raw: str  # "" if the slot was empty
    new_raw: str
    affected: tuple[Address, ...] = ()  # transitive dependents, evaluation order

    @property
    def changed(self) -> bool:
        return self.old_raw != self.new_raw


@runtime_checkable
class CellEngine(Protocol):
    """What a rendering layer needs from the grid."""

    def read_value(self, address: AddressLike) -> DisplayValue:
        """Current displayed value of a cell."""
        ...

    def propose_edit(self, address: AddressLike, raw: str) -> EditResult:
        """Commit *raw* to a cell.

        Raises CycleRejected, leaving the grid unchanged, if the edit would
        make some cell depend on itself.
        """
        ...
