from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .. import config
from .geometry import PageGeometry
from .paginate import ColumnPaginator, Column, PageBreak, Placement, Section

logger = logging.getLogger(__name__)


def build_section(
    titles: Sequence[str],
    item_lists: Sequence[Sequence[str]],
    geometry: PageGeometry,
    banner: bool = False,
    start_new_page: bool = False,
) -> Section:
    if len(titles) != len(item_lists):
        raise ValueError("Each column title needs exactly one item list")
    xs = geometry.x_positions(len(titles))
    width = geometry.content_width / len(titles) if titles else 0.0
    columns = tuple(
        Column(title=title, x=x, items=tuple(items) if title else (), width=width)
        for title, x, items in zip(titles, xs, item_lists)
    )
    return Section(columns=columns, banner=banner, start_new_page=start_new_page)


def default_sections(
    lines: Dict[str, List[str]],
    geometry: PageGeometry,
    layout: Optional[Sequence[Tuple[List[str], bool, bool]]] = None,
) -> List[Section]:
    """Map aggregated category lines onto the configured report sections."""
    sections: List[Section] = []
    for keys, banner, start_new_page in layout or config.SECTION_LAYOUT:
        titles = [config.CATEGORY_TITLES.get(key, key) if key else "" for key in keys]
        item_lists = [lines.get(key, []) if key else [] for key in keys]
        sections.append(build_section(titles, item_lists, geometry, banner, start_new_page))
    return sections


def render_sections(
    sections: Sequence[Section],
    geometry: PageGeometry,
    banner_title: str = "",
    banner_subtitle: str = "",
) -> List[Placement]:
    """Lay out every section in order and return one flat placement stream.

    Nothing is drawn here. A geometry that cannot hold a header row fails
    before any placement exists, so no partial document can be produced.
    """
    geometry.validate()
    placements: List[Placement] = []
    y: Optional[float] = None

    for index, section in enumerate(sections):
        if section.is_empty():
            logger.info("Skipping section %d: every column is empty", index)
            continue

        if placements:
            fits_here = (
                y is not None
                and not section.banner
                and geometry.rows_that_fit(y + geometry.header_height) >= 1
            )
            if section.start_new_page or not fits_here:
                placements.append(PageBreak())
                y = None

        paginator = ColumnPaginator(
            section=section,
            geometry=geometry,
            banner_title=banner_title,
            banner_subtitle=banner_subtitle,
        )
        placements.extend(paginator.paginate(start_y=y))
        y = paginator.end_y
        logger.info(
            "Section %d: %d items on %d page(s)",
            index,
            section.item_count(),
            paginator.pages,
        )

    return placements
