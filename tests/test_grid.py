"""Tests for the Grid container, its mutation gate and the CellEngine protocol."""

from __future__ import annotations

import threading

import pytest

from cellgrid import (
    Address,
    CellGridError,
    CycleRejected,
    Grid,
    GridConfig,
    load_grid,
)
from cellgrid.calc import CellEngine, EditResult, Ref

A1 = Address(0, 1)
B1 = Address(1, 1)
C1 = Address(2, 1)
D1 = Address(3, 1)


class TestAddress:
    def test_equality(self) -> None:
        assert Address(1, 2) == Address(1, 2)
        assert Address(1, 2) != Address(2, 1)
        assert len({Address(1, 2), Address(1, 2)}) == 1

    def test_from_label(self) -> None:
        assert Address.from_label("A1") == A1
        assert Address.from_label(" z0 ") == Address(25, 0)

    def test_from_label_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid cell reference"):
            Address.from_label("1A")

    def test_label(self) -> None:
        assert Address(2, 10).label() == "C10"

    def test_custom_config_label(self) -> None:
        config = GridConfig(columns=("Foo", "Bar"), rows=3)
        assert Address.from_label("bar2", config) == Address(1, 2)
        assert Address(0, 1).label(config) == "Foo1"


class TestGridConfig:
    def test_defaults(self) -> None:
        config = GridConfig()
        assert config.n_columns == 26
        assert config.rows == 1000
        assert config.column_index("b") == 1

    def test_list_columns_normalized(self) -> None:
        config = GridConfig(columns=["X", "Y"], rows=2)  # type: ignore[arg-type]
        assert config.columns == ("X", "Y")
        assert hash(config) == hash(GridConfig(columns=("X", "Y"), rows=2))

    def test_no_columns(self) -> None:
        with pytest.raises(ValueError, match="at least one column"):
            GridConfig(columns=())

    def test_duplicate_columns(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            GridConfig(columns=("A", "a"))

    def test_non_alpha_column(self) -> None:
        with pytest.raises(ValueError, match="Invalid column label"):
            GridConfig(columns=("A1",))

    def test_no_rows(self) -> None:
        with pytest.raises(ValueError, match="at least one row"):
            GridConfig(rows=0)

    def test_non_ascii_column_label_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid column label"):
            GridConfig(columns=("Ä",))


class TestSlots:
    def test_shape(self) -> None:
        assert Grid().shape == (1000, 26)
        assert Grid(GridConfig(columns=("A", "B"), rows=5)).shape == (5, 2)

    def test_empty_lookup(self) -> None:
        assert Grid().lookup(A1) is None

    def test_cell_get_or_create(self) -> None:
        grid = Grid()
        cell = grid.cell("A1")
        assert cell.raw == ""
        assert grid.cell(A1) is cell

    def test_raw(self) -> None:
        grid = Grid()
        assert grid.raw("A1") == ""
        grid["A1"] = "=B1"
        assert grid.raw("A1") == "=B1"
        assert grid.cell("A1").parsed == Ref(B1)

    def test_iter_cells_row_major(self) -> None:
        grid = Grid()
        grid["B2"] = "x"
        grid["A2"] = "y"
        grid["C1"] = "z"
        assert [a for a, _ in grid.iter_cells()] == [C1, Address(0, 2), Address(1, 2)]

    def test_out_of_bounds_address(self) -> None:
        grid = Grid(GridConfig(rows=5))
        with pytest.raises(IndexError):
            grid.lookup(Address(0, 5))
        with pytest.raises(IndexError):
            grid.set_raw(Address(26, 0), "x")
        with pytest.raises(IndexError):
            grid.read_value(Address(-1, 0))

    def test_out_of_bounds_label(self) -> None:
        grid = Grid(GridConfig(rows=5))
        with pytest.raises(ValueError):
            grid["A5"] = "x"

    def test_no_unchecked_insert(self) -> None:
        grid = Grid()
        assert not hasattr(grid, "insert")
        with pytest.raises(CycleRejected):
            grid.set_raw(A1, "=A1")
        assert grid["A1"] == ""

    def test_cell_creation_tracks_nothing(self) -> None:
        grid = Grid()
        grid.cell("B1")
        assert grid.committed_dependencies(B1) == ()
        assert grid.dependents(A1) == []


class TestMutationGate:
    def test_commit(self) -> None:
        grid = Grid()
        result = grid.set_raw("A1", "hello")
        assert isinstance(result, EditResult)
        assert result.address == A1
        assert result.old_raw == ""
        assert result.new_raw == "hello"
        assert result.changed
        assert grid["A1"] == "hello"

    def test_overwrite_reports_old_raw(self) -> None:
        grid = Grid()
        grid["A1"] = "one"
        result = grid.set_raw("A1", "two")
        assert result.old_raw == "one"
        assert grid.cell("A1").raw == "two"

    def test_unchanged_edit(self) -> None:
        grid = Grid()
        grid["A1"] = "same"
        assert not grid.set_raw("A1", "same").changed

    def test_two_cell_cycle_rejected(self) -> None:
        grid = Grid()
        grid["A1"] = "=B1"
        grid["B1"] = "before"
        with pytest.raises(CycleRejected) as excinfo:
            grid.set_raw("B1", "=A1")
        assert excinfo.value.address == B1
        assert excinfo.value.raw == "=A1"
        assert "B1" in str(excinfo.value)
        assert grid.raw("B1") == "before"

    def test_rejected_on_empty_slot_leaves_it_empty(self) -> None:
        grid = Grid()
        grid["A1"] = "=B1"
        with pytest.raises(CycleRejected):
            grid["B1"] = "=A1"
        assert grid.lookup(B1) is None

    def test_self_reference_rejected(self) -> None:
        grid = Grid()
        with pytest.raises(CycleRejected):
            grid["A1"] = "=A1"
        assert grid.lookup(A1) is None

    def test_transitive_cycle_rejected(self) -> None:
        grid = Grid()
        grid["A1"] = "=SUM(B1,1)"
        grid["B1"] = "=PRODUCT(2,C1)"
        with pytest.raises(CycleRejected):
            grid["C1"] = "=A1"
        assert grid.raw("C1") == ""

    def test_cycle_rejected_is_value_error(self) -> None:
        grid = Grid()
        with pytest.raises(ValueError):
            grid["A1"] = "=SUM(A1)"
        with pytest.raises(CellGridError):
            grid["A1"] = "=A1"

    def test_diamond_commits(self) -> None:
        grid = Grid()
        grid["A1"] = "=SUM(B1,C1)"
        grid["B1"] = "=D1"
        grid["C1"] = "=D1"
        grid["D1"] = "8"
        assert grid["A1"] == 16

    def test_breaking_an_edge_allows_reverse(self) -> None:
        grid = Grid()
        grid["A1"] = "=B1"
        grid["A1"] = "plain"
        grid["B1"] = "=A1"
        assert grid["B1"] == "plain"

    def test_would_cycle(self) -> None:
        grid = Grid()
        grid["A1"] = "=B1"
        assert grid.would_cycle("B1", "=A1")
        assert not grid.would_cycle("B1", "=C1")
        assert grid.raw("B1") == ""


class TestDependents:
    def test_edit_reports_affected_cells(self) -> None:
        grid = Grid()
        grid["A1"] = "=SUM(B1,C1)"
        grid["B1"] = "=D1"
        grid["C1"] = "=D1"
        result = grid.set_raw("D1", "3")
        assert set(result.affected) == {A1, B1, C1}
        assert result.affected[-1] == A1

    def test_dependents_follow_edits(self) -> None:
        grid = Grid()
        grid["B1"] = "=A1"
        assert grid.dependents("A1") == [B1]
        grid["B1"] = "=C1"
        assert grid.dependents("A1") == []
        assert grid.dependents("C1") == [B1]

    def test_no_dependents(self) -> None:
        assert Grid().set_raw("A1", "x").affected == ()


class TestCellEngine:
    def test_grid_is_cell_engine(self) -> None:
        assert isinstance(Grid(), CellEngine)

    def test_read_value_and_propose_edit(self) -> None:
        engine: CellEngine = Grid()
        engine.propose_edit(A1, "=PRODUCT(B1,3)")
        engine.propose_edit("B1", "4")
        assert engine.read_value(A1) == 12
        assert engine.read_value("A1") == 12


class TestLoadGrid:
    def test_load(self) -> None:
        grid = load_grid({"D1": "21", "B1": "=D1", "C1": "=D1", "A1": "=SUM(B1,C1)"})
        assert grid["A1"] == 42

    def test_load_with_config(self) -> None:
        grid = load_grid({"A0": "x"}, GridConfig(rows=1))
        assert grid.shape == (1, 26)
        assert grid["A0"] == "x"

    def test_load_rejects_cycle(self) -> None:
        with pytest.raises(CycleRejected):
            load_grid({"A1": "=B1", "B1": "=A1"})


class TestConcurrentWriters:
    def test_racing_edits_never_commit_a_cycle(self) -> None:
        for _ in range(20):
            grid = Grid()
            barrier = threading.Barrier(2)
            rejected: list[CycleRejected] = []

            def write(label: str, raw: str) -> None:
                barrier.wait()
                try:
                    grid[label] = raw
                except CycleRejected as exc:
                    rejected.append(exc)

            threads = [
                threading.Thread(target=write, args=("A1", "=B1")),
                threading.Thread(target=write, args=("B1", "=A1")),
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            assert len(rejected) == 1

    def test_dependents_while_writers_rewrite(self) -> None:
        grid = Grid()
        grid["B1"] = "=A1"
        stop = threading.Event()

        def rewrite() -> None:
            n = 0
            while not stop.is_set():
                grid["B1"] = f"=SUM(A1,C{n % 200 + 2})"
                grid[f"D{n % 200 + 2}"] = "=B1"
                n += 1

        writer = threading.Thread(target=rewrite)
        writer.start()
        try:
            for _ in range(500):
                affected = grid.dependents("A1")
                assert affected[0] == B1
        finally:
            stop.set()
            writer.join()
