"""Grid dimensions supplied at construction."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_COLUMNS: tuple[str, ...] = tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
DEFAULT_ROWS = 1000


@dataclass(frozen=True)
class GridConfig:
    """Column alphabet and row count for a grid.

    Column labels double as the column part of a cell reference, so they
    must be unique, non-empty and purely ASCII letters.  Labels are matched
    case-insensitively.
    """

    columns: tuple[str, ...] = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    _column_index: dict[str, int] = field(
        init=False, repr=False, compare=False, hash=False,
    )

    def __post_init__(self) -> None:
        columns = tuple(self.columns)
        if not columns:
            raise ValueError("GridConfig needs at least one column")
        index: dict[str, int] = {}
        for idx, label in enumerate(columns):
            if not label or not (label.isascii() and label.isalpha()):
                raise ValueError(f"Invalid column label: {label!r}")
            key = label.upper()
            if key in index:
                raise ValueError(f"Duplicate column label: {label!r}")
            index[key] = idx
        if self.rows < 1:
            raise ValueError(f"GridConfig needs at least one row, got {self.rows}")
        # frozen dataclass: bypass __setattr__ for normalized fields
        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "_column_index", index)

    @property
    def n_columns(self) -> int:
        return len(self.columns)

    def column_index(self, label: str) -> int | None:
        """0-based column for *label* (case-insensitive), or None."""
        return self._column_index.get(label.upper())

    def column_label(self, x: int) -> str:
        return self.columns[x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < len(self.columns) and 0 <= y < self.rows


DEFAULT_CONFIG = GridConfig()
