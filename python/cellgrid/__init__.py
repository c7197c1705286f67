"""cellgrid — an in-memory spreadsheet cell engine.

Usage::

    from cellgrid import Grid, CycleRejected

    grid = Grid()
    grid["D1"] = "21"
    grid["B1"] = "=D1"
    grid["A1"] = "=SUM(B1,D1)"
    print(grid["A1"])  # 42

    try:
        grid["D1"] = "=A1"
    except CycleRejected as exc:
        print(exc)  # edit discarded, grid unchanged
"""

from cellgrid._address import Address, AddressLike
from cellgrid._cell import Cell
from cellgrid._config import DEFAULT_CONFIG, GridConfig
from cellgrid._errors import CellGridError, CycleRejected
from cellgrid._grid import Grid, load_grid

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Address",
    "AddressLike",
    "Cell",
    "CellGridError",
    "CycleRejected",
    "DEFAULT_CONFIG",
    "Grid",
    "GridConfig",
    "load_grid",
]
