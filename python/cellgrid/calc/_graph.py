"""Dependency graph over grid cells: cycle checks and evaluation ordering."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from cellgrid.calc._parser import dependencies

if TYPE_CHECKING:
    from cellgrid._address import Address
    from cellgrid._grid import Grid


def has_dependency_cycle(grid: Grid, address: Address, raw: str) -> bool:
    """Would committing *raw* at *address* make the cell depend on itself?

    Walks the candidate's dependencies, then each reached cell's committed
    dependencies, looking for *address*.  Each cell is expanded at most once.
    """
    stack: list[Address] = list(reversed(dependencies(grid.parser.parse(raw))))
    visited: set[Address] = set()

    while stack:
        dep = stack.pop()
        if dep == address:
            return True
        if dep in visited:
            continue
        visited.add(dep)
        stack.extend(reversed(grid.committed_dependencies(dep)))

    return False


def evaluation_order(grid: Grid, root: Address) -> list[Address]:
    """Cells reachable from *root*, dependencies before dependents.

    *root* is last.  Iterative post-order, so chain length is not bounded
    by the interpreter's recursion limit.  Raises ValueError if a circular
    reference is found.
    """
    order: list[Address] = []
    done: set[Address] = set()
    in_progress: set[Address] = set()
    stack: list[tuple[Address, bool]] = [(root, False)]

    while stack:
        addr, expanded = stack.pop()
        if expanded:
            in_progress.discard(addr)
            done.add(addr)
            order.append(addr)
            continue
        if addr in done:
            continue
        if addr in in_progress:
            raise ValueError(f"Circular reference detected involving: {addr}")
        in_progress.add(addr)
        stack.append((addr, True))
        cell = grid.lookup(addr)
        if cell is None:
            continue
        for dep in reversed(cell.dependencies):
            if dep not in done:
                stack.append((dep, False))

    return order


class DependencyGraph:
    """Forward and reverse formula edges between cells.

    The grid keeps one in step with every committed edit.  It backs the
    cycle check and the list of cells to redraw after an edit.
    """

    __slots__ = ("dependencies", "dependents")

    def __init__(self) -> None:
        # cell -> cells it reads from
        self.dependencies: dict[Address, tuple[Address, ...]] = {}
        # cell -> cells that read from it (reverse edges)
        self.dependents: dict[Address, set[Address]] = {}

    def set_cell(self, address: Address, deps: tuple[Address, ...]) -> None:
        """Replace *address*'s outgoing edges with *deps*."""
        self.remove_cell(address)
        if not deps:
            return
        self.dependencies[address] = deps
        for dep in deps:
            self.dependents.setdefault(dep, set()).add(address)

    def remove_cell(self, address: Address) -> None:
        for dep in self.dependencies.pop(address, ()):
            readers = self.dependents.get(dep)
            if readers is None:
                continue
            readers.discard(address)
            if not readers:
                del self.dependents[dep]

    def affected_cells(self, changed_cells: set[Address]) -> list[Address]:
        """Transitive dependents of *changed_cells*, in evaluation order.

        Uses BFS on the dependents graph, then orders only the cells found.
        """
        affected: set[Address] = set()
        queue: deque[Address] = deque(changed_cells)
        visited: set[Address] = set(changed_cells)

        while queue:
            cell = queue.popleft()
            for dep in self.dependents.get(cell, ()):
                if dep not in visited:
                    visited.add(dep)
                    queue.append(dep)
                    affected.add(dep)

        return self._kahn(affected)

    def _kahn(self, nodes: set[Address]) -> list[Address]:
        if not nodes:
            return []

        in_degree: dict[Address, int] = {}
        for cell in nodes:
            # Only count edges inside the node set
            in_degree[cell] = len(set(self.dependencies.get(cell, ())) & nodes)

        queue: deque[Address] = deque(sorted(c for c in nodes if in_degree[c] == 0))
        order: list[Address] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self.dependents.get(cell, ())):
                if dep in nodes:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(nodes):
            missing = nodes - set(order)
            raise ValueError(f"Circular reference detected involving: {missing}")

        return order
