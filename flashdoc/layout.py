from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class GridLayout:
    cols: int
    rows: int

    def __post_init__(self) -> None:
        if self.cols < 1 or self.rows < 1:
            raise ValueError(f"grid must be at least 1x1, got {self.cols}x{self.rows}")

    @property
    def per_page(self) -> int:
        return self.cols * self.rows

    @property
    def name(self) -> str:
        return f"{self.cols}x{self.rows}"

    def slot_names(self) -> list[str]:
        return [f"card{i}" for i in range(self.per_page)]


GRID_2X3 = GridLayout(cols=2, rows=3)
GRID_1X2 = GridLayout(cols=1, rows=2)

PREDEFINED: dict[int, GridLayout] = {
    GRID_2X3.per_page: GRID_2X3,
    GRID_1X2.per_page: GRID_1X2,
}

FLOW = "flow"


def layout_for_count(per_page: int) -> GridLayout:
    """Grid for a bare per-page count: a predefined grid, else one column."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    return PREDEFINED.get(per_page) or GridLayout(cols=1, rows=per_page)


def parse_layout(text: str) -> GridLayout | None:
    """Parse ``"2x3"``-style layout names; ``"flow"`` means no pagination."""
    normalized = text.strip().lower()
    if normalized == FLOW:
        return None
    match = re.match(r"^(\d+)\s*[x×]\s*(\d+)$", normalized)
    if not match:
        raise ValueError(f"Unrecognized layout '{text}'. Use 'flow' or COLSxROWS, e.g. '2x3' or '1x2'.")
    return GridLayout(cols=int(match.group(1)), rows=int(match.group(2)))


def paginate(cards: Sequence[str], per_page: int) -> list[list[str]]:
    """Split ``cards`` into consecutive pages of ``per_page`` slots.

    The last page is padded with empty strings so every page has exactly
    ``per_page`` entries.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    pages: list[list[str]] = []
    for start in range(0, len(cards), per_page):
        group = list(cards[start : start + per_page])
        group.extend([""] * (per_page - len(group)))
        pages.append(group)
    return pages
