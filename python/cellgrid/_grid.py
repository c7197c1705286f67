"""Grid: owns every cell and gates every edit through the cycle check."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping

from cellgrid._address import Address, AddressLike, to_address
from cellgrid._cell import Cell
from cellgrid._config import DEFAULT_CONFIG, GridConfig
from cellgrid._errors import CycleRejected
from cellgrid.calc._evaluator import GridEvaluator
from cellgrid.calc._graph import DependencyGraph, has_dependency_cycle
from cellgrid.calc._parser import FormulaParser
from cellgrid.calc._protocol import EditResult
from cellgrid.calc._terms import DisplayValue

logger = logging.getLogger(__name__)


class Grid:
    """A fixed-size, in-memory grid of cells.

    Slots are indexed ``[row][column]`` and start empty; a :class:`Cell` is
    created the first time a slot is written.  :meth:`propose_edit` is the
    only way to change a cell's raw text.

    Usage::

        grid = Grid()
        grid["A1"] = "2"
        grid["B1"] = "=SUM(A1,3)"
        grid["B1"]  # 5
    """

    __slots__ = ("_config", "_parser", "_slots", "_graph", "_evaluator", "_write_lock")

    def __init__(self, config: GridConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        self._parser = FormulaParser(self._config)
        self._slots: list[list[Cell | None]] = [
            [None] * self._config.n_columns for _ in range(self._config.rows)
        ]
        self._graph = DependencyGraph()
        self._evaluator = GridEvaluator(self)
        self._write_lock = threading.Lock()

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def parser(self) -> FormulaParser:
        return self._parser

    @property
    def shape(self) -> tuple[int, int]:
        """``(rows, columns)``."""
        return self._config.rows, self._config.n_columns

    # ------------------------------------------------------------------
    # Slot access
    # ------------------------------------------------------------------

    def _check_bounds(self, address: Address) -> None:
        if not self._config.in_bounds(address.x, address.y):
            raise IndexError(f"Address out of bounds: {address}")

    def address(self, key: AddressLike) -> Address:
        """Resolve an Address or A1 label to an in-bounds Address."""
        address = to_address(key, self._config)
        self._check_bounds(address)
        return address

    def lookup(self, address: Address) -> Cell | None:
        self._check_bounds(address)
        return self._slots[address.y][address.x]

    def committed_dependencies(self, address: Address) -> tuple[Address, ...]:
        """Addresses the committed formula at *address* reads from."""
        return self._graph.dependencies.get(address, ())

    def _insert(self, address: Address, cell: Cell) -> None:
        # Callers hold the write lock and have run the cycle check
        self._slots[address.y][address.x] = cell
        self._graph.set_cell(address, cell.dependencies)

    def cell(self, key: AddressLike) -> Cell:
        """Get or create the cell at *key*."""
        address = self.address(key)
        with self._write_lock:
            cell = self.lookup(address)
            if cell is None:
                cell = Cell("", self._parser)
                self._insert(address, cell)
        return cell

    def raw(self, key: AddressLike) -> str:
        """Raw text of the cell at *key*; ``""`` for an empty slot."""
        cell = self.lookup(self.address(key))
        return cell.raw if cell is not None else ""

    def iter_cells(self) -> Iterator[tuple[Address, Cell]]:
        """Occupied slots in row-major order."""
        for y, row in enumerate(self._slots):
            for x, cell in enumerate(row):
                if cell is not None:
                    yield Address(x, y), cell

    @property
    def n_cells(self) -> int:
        return sum(1 for _ in self.iter_cells())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_value(self, key: AddressLike) -> DisplayValue:
        """Displayed value of the cell at *key*, recomputed from current raw text."""
        return self._evaluator.value(self.address(key))

    def __getitem__(self, key: AddressLike) -> DisplayValue:
        return self.read_value(key)

    def dependents(self, key: AddressLike) -> list[Address]:
        """Cells that read *key*, directly or transitively, in evaluation order."""
        address = self.address(key)
        with self._write_lock:
            return self._graph.affected_cells({address})

    # ------------------------------------------------------------------
    # Mutation gate
    # ------------------------------------------------------------------

    def would_cycle(self, key: AddressLike, raw: str) -> bool:
        address = self.address(key)
        with self._write_lock:
            return has_dependency_cycle(self, address, raw)

    def set_raw(self, key: AddressLike, raw: str) -> EditResult:
        """Commit *raw* at *key* unless it would create a dependency cycle.

        Raises CycleRejected with the grid unchanged.  The check and the
        commit run under one lock, so concurrent writers cannot each pass
        a check against the same pre-edit state.
        """
        address = self.address(key)
        with self._write_lock:
            if has_dependency_cycle(self, address, raw):
                logger.info("Rejected edit at %s: dependency cycle (%r)",
                            address.label(self._config), raw)
                raise CycleRejected(address, raw, address.label(self._config))
            cell = self.lookup(address)
            if cell is None:
                old_raw = ""
                self._insert(address, Cell(raw, self._parser))
            else:
                old_raw = cell.raw
                cell.raw = raw
                self._graph.set_cell(address, cell.dependencies)
            affected = tuple(self._graph.affected_cells({address}))
        logger.debug("Committed %s = %r", address.label(self._config), raw)
        return EditResult(
            address=address,
            old_raw=old_raw,
            new_raw=raw,
            affected=affected,
        )

    propose_edit = set_raw

    def __setitem__(self, key: AddressLike, raw: str) -> None:
        self.set_raw(key, raw)

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"<Grid {cols}x{rows} cells={self.n_cells}>"


def load_grid(contents: Mapping[AddressLike, str], config: GridConfig | None = None) -> Grid:
    """Build a grid from ``{label: raw}``, committing entries in order.

    Raises CycleRejected on the first entry that would close a cycle.
    """
    grid = Grid(config)
    for key, raw in contents.items():
        grid.set_raw(key, raw)
    return grid
