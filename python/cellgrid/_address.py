"""Cell coordinates and A1-style label conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from cellgrid._config import DEFAULT_CONFIG, GridConfig

# Column label (letters only) followed by row digits: A1, b12, Z0999
_LABEL_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")


@dataclass(frozen=True, order=True)
class Address:
    """A (column, row) coordinate; both 0-based."""

    x: int
    y: int

    @classmethod
    def from_label(cls, label: str, config: GridConfig = DEFAULT_CONFIG) -> Address:
        """``"B3"`` -> ``Address(x=1, y=3)``.

        Raises ValueError if *label* is not a reference into *config*'s grid.
        """
        address = label_to_address(label.strip(), config)
        if address is None:
            raise ValueError(f"Invalid cell reference: {label!r}")
        return address

    def label(self, config: GridConfig = DEFAULT_CONFIG) -> str:
        return f"{config.column_label(self.x)}{self.y}"


AddressLike = Union[Address, str]


def label_to_address(text: str, config: GridConfig = DEFAULT_CONFIG) -> Address | None:
    """Match *text* against the reference grammar, or return None.

    Rows are addressed exactly as written, so ``A1`` is row 1 and ``A0`` is
    the first row.  Column labels outside the alphabet and rows beyond the
    configured row count do not match.
    """
    m = _LABEL_RE.match(text)
    if m is None:
        return None
    x = config.column_index(m.group(1))
    if x is None:
        return None
    digits = m.group(2).lstrip("0") or "0"
    if len(digits) > len(str(config.rows)):
        return None
    y = int(digits)
    if not config.in_bounds(x, y):
        return None
    return Address(x, y)


def to_address(key: AddressLike, config: GridConfig = DEFAULT_CONFIG) -> Address:
    """Accept an Address or an A1 label."""
    if isinstance(key, Address):
        return key
    return Address.from_label(key, config)
