from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from .geometry import LayoutConfigError, PageGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Column:
    """One display lane. An empty title makes the column a placeholder."""

    title: str
    x: float
    items: Tuple[str, ...] = ()
    width: float = 0.0

    @property
    def is_placeholder(self) -> bool:
        return not self.title


@dataclass(frozen=True)
class Section:
    columns: Tuple[Column, ...]
    banner: bool = False
    start_new_page: bool = False

    def is_empty(self) -> bool:
        return all(not column.items for column in self.columns if not column.is_placeholder)

    def item_count(self) -> int:
        return sum(len(column.items) for column in self.columns if not column.is_placeholder)


@dataclass(frozen=True)
class BannerPlacement:
    y: float
    title: str
    subtitle: str
    title_y: float
    subtitle_y: float


@dataclass(frozen=True)
class HeaderPlacement:
    column: int
    text: str
    x: float
    y: float
    width: float = 0.0


@dataclass(frozen=True)
class RowPlacement:
    column: int
    text: str
    x: float
    y: float
    width: float = 0.0


@dataclass(frozen=True)
class PageBreak:
    pass


Placement = Union[BannerPlacement, HeaderPlacement, RowPlacement, PageBreak]


class SectionState(str, Enum):
    AWAITING_FIRST_PAGE = "AWAITING_FIRST_PAGE"
    DRAWING_HEADERS = "DRAWING_HEADERS"
    DRAWING_ROWS = "DRAWING_ROWS"
    PAGE_FULL = "PAGE_FULL"
    AWAITING_NEXT_PAGE = "AWAITING_NEXT_PAGE"
    DONE = "DONE"


@dataclass
class ColumnPaginator:
    """Drains every column of one section into page placements.

    Each column is read through an index cursor; the section itself is never
    mutated, so paginating the same section twice yields the same placements.
    """

    section: Section
    geometry: PageGeometry
    banner_title: str = ""
    banner_subtitle: str = ""
    state: SectionState = SectionState.AWAITING_FIRST_PAGE
    end_y: float = 0.0
    pages: int = 0
    _cursors: List[int] = field(default_factory=list, repr=False)

    def _drained(self) -> bool:
        return all(
            column.is_placeholder or cursor >= len(column.items)
            for column, cursor in zip(self.section.columns, self._cursors)
        )

    def _banner(self, y: float) -> Tuple[BannerPlacement, float]:
        g = self.geometry
        placement = BannerPlacement(
            y=y,
            title=self.banner_title,
            subtitle=self.banner_subtitle,
            title_y=y + (g.banner_title_y - g.top),
            subtitle_y=y + (g.banner_subtitle_y - g.top),
        )
        return placement, y + (g.banner_content_y - g.top)

    def _headers(self, y: float) -> List[Placement]:
        return [
            HeaderPlacement(column=index, text=column.title, x=column.x, y=y, width=column.width)
            for index, column in enumerate(self.section.columns)
            if not column.is_placeholder
        ]

    def _rows(self, y: float, fit: int) -> Tuple[List[Placement], int]:
        placements: List[Placement] = []
        max_rows = 0
        for index, column in enumerate(self.section.columns):
            if column.is_placeholder:
                continue
            start = self._cursors[index]
            taken = column.items[start:start + fit]
            for offset, text in enumerate(taken):
                placements.append(
                    RowPlacement(
                        column=index,
                        text=text,
                        x=column.x,
                        y=y + offset * self.geometry.row_height,
                        width=column.width,
                    )
                )
            self._cursors[index] = start + len(taken)
            max_rows = max(max_rows, len(taken))
        return placements, max_rows

    def paginate(self, start_y: Optional[float] = None) -> List[Placement]:
        g = self.geometry
        g.validate()
        self._cursors = [0] * len(self.section.columns)
        self.state = SectionState.AWAITING_FIRST_PAGE
        self.pages = 1

        placements: List[Placement] = []
        y = g.top if start_y is None else start_y
        first_page = True

        while True:
            if first_page and self.section.banner:
                banner, y = self._banner(y)
                placements.append(banner)

            self.state = SectionState.DRAWING_HEADERS
            placements.extend(self._headers(y))
            y += g.header_height

            self.state = SectionState.DRAWING_ROWS
            fit = g.rows_that_fit(y)
            if fit == 0 and not first_page and not self._drained():
                # a fresh page that cannot take a single row would never terminate
                raise LayoutConfigError(
                    f"No rows fit below the headers at y={y:g} on a fresh page"
                )
            rows, max_rows = self._rows(y, fit)
            placements.extend(rows)
            y += max_rows * g.row_height + g.trailing_gap

            if self._drained():
                self.state = SectionState.DONE
                break

            self.state = SectionState.PAGE_FULL
            placements.append(PageBreak())
            self.pages += 1
            self.state = SectionState.AWAITING_NEXT_PAGE
            y = g.top
            first_page = False

        self.end_y = y
        logger.debug(
            "Paginated %d items over %d page(s) into %d placements",
            self.section.item_count(),
            self.pages,
            len(placements),
        )
        return placements


def split_pages(placements: Sequence[Placement]) -> List[List[Placement]]:
    """Group a placement stream by page; page breaks are dropped."""
    if not placements:
        return []
    pages: List[List[Placement]] = [[]]
    for placement in placements:
        if isinstance(placement, PageBreak):
            pages.append([])
        else:
            pages[-1].append(placement)
    if not pages[-1] and len(pages) > 1:
        pages.pop()
    return pages
