from __future__ import annotations

from dataclasses import dataclass
from typing import List

from reportlab.lib.pagesizes import LETTER


class LayoutConfigError(ValueError):
    """Raised when the page geometry cannot hold a header and one row."""


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page constants. All y values grow downwards from the top edge."""

    page_width: float = LETTER[0]
    page_height: float = LETTER[1]
    margin: float = 40
    header_height: float = 20
    row_height: float = 14
    banner_content_y: float = 150
    trailing_gap: float = 20

    banner_title_y: float = 100
    banner_subtitle_y: float = 124
    title_size: float = 18
    subtitle_size: float = 14
    header_size: float = 12
    row_size: float = 10

    @property
    def usable_height(self) -> float:
        return self.page_height - 2 * self.margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def top(self) -> float:
        return self.margin

    def remaining_height(self, y: float) -> float:
        return max(0.0, self.usable_height - y)

    def rows_that_fit(self, y: float) -> int:
        if self.row_height <= 0:
            return 0
        return max(0, int(self.remaining_height(y) // self.row_height))

    def x_positions(self, count: int) -> List[float]:
        if count <= 0:
            return []
        step = self.content_width / count
        return [self.margin + index * step for index in range(count)]

    def validate(self) -> None:
        if self.row_height <= 0 or self.header_height < 0:
            raise LayoutConfigError(
                f"Row height must be positive (row_height={self.row_height}, "
                f"header_height={self.header_height})"
            )
        if self.rows_that_fit(self.top + self.header_height) < 1:
            raise LayoutConfigError(
                f"Page cannot fit a header and one row: usable height {self.usable_height:g}, "
                f"header {self.header_height:g} at y={self.top:g}, row {self.row_height:g}"
            )
