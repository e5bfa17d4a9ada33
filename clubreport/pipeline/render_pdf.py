from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .. import config
from ..models import ReportData
from ..storage import artifact_path, temp_path
from .aggregate import aggregate
from .geometry import PageGeometry
from .paginate import BannerPlacement, HeaderPlacement, PageBreak, Placement, RowPlacement
from .sections import default_sections, render_sections

logger = logging.getLogger(__name__)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
MIN_FONT_SIZE = 7.0
COLUMN_PADDING = 6


def date_label(day: date) -> str:
    """'October 17, 2026'"""
    return f"{day:%B} {day.day}, {day.year}"


class PdfCanvas:
    """Drawing surface over a reportlab canvas, using top-down y coordinates.

    Pages go to a temporary file; ``finalize`` is the only step that makes
    the artifact visible at ``output_path``.
    """

    def __init__(self, output_path: Path, geometry: PageGeometry) -> None:
        self.output_path = output_path
        self.geometry = geometry
        self._tmp = temp_path(output_path)
        self.canv = canvas.Canvas(str(self._tmp), pagesize=(geometry.page_width, geometry.page_height))
        self.canv.setTitle(output_path.stem)
        self.page_count = 1
        self._page_blank = True

    def _baseline(self, y: float, font_size: float) -> float:
        return self.geometry.page_height - y - font_size

    def fit_font(self, text: str, font_name: str, base_size: float, max_width: float) -> float:
        """Shrink text until it fits ``max_width``; 0 means no limit."""
        size = float(base_size)
        if max_width <= 0:
            return size
        while size > MIN_FONT_SIZE:
            if self.canv.stringWidth(text, font_name, size) <= max_width:
                return size
            size -= 0.5
        return MIN_FONT_SIZE

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        font_size: float,
        font_name: str = FONT_REGULAR,
        centered: bool = False,
    ) -> None:
        self._page_blank = False
        self.canv.setFillColor(colors.black)
        self.canv.setFont(font_name, font_size)
        if centered:
            self.canv.drawCentredString(x, self._baseline(y, font_size), text)
        else:
            self.canv.drawString(x, self._baseline(y, font_size), text)

    def draw_image(
        self,
        data: bytes,
        x: float,
        y: float,
        width: float,
        max_height: float = 0,
        centered: bool = False,
    ) -> None:
        self._page_blank = False
        image = ImageReader(BytesIO(data))
        img_w, img_h = image.getSize()
        height = width * img_h / img_w
        if max_height > 0 and height > max_height:
            width = width * max_height / height
            height = max_height
        if centered:
            x = x - width / 2
        self.canv.drawImage(
            image,
            x,
            self.geometry.page_height - y - height,
            width=width,
            height=height,
            mask="auto",
        )

    def new_page(self) -> None:
        self.canv.showPage()
        self._page_blank = True
        self.page_count += 1

    def finalize(self) -> Path:
        if self._page_blank:
            # reportlab drops a trailing page with no drawing operations
            self.canv.showPage()
        self.canv.save()
        self._tmp.replace(self.output_path)
        return self.output_path

    def discard(self) -> None:
        self._tmp.unlink(missing_ok=True)


def _draw_banner(sink: PdfCanvas, banner: BannerPlacement, logo: Optional[bytes]) -> None:
    g = sink.geometry
    if logo:
        image_top = banner.y - g.top
        max_height = banner.title_y - g.title_size - image_top
        sink.draw_image(logo, g.page_width / 2, image_top, g.page_width, max_height=max_height, centered=True)
    if banner.title:
        sink.draw_text(banner.title, g.page_width / 2, banner.title_y, g.title_size, FONT_BOLD, centered=True)
    if banner.subtitle:
        sink.draw_text(banner.subtitle, g.page_width / 2, banner.subtitle_y, g.subtitle_size, centered=True)


def draw_placements(sink: PdfCanvas, placements: Sequence[Placement], logo: Optional[bytes] = None) -> None:
    g = sink.geometry
    for placement in placements:
        if isinstance(placement, PageBreak):
            sink.new_page()
        elif isinstance(placement, BannerPlacement):
            _draw_banner(sink, placement, logo)
        elif isinstance(placement, HeaderPlacement):
            size = sink.fit_font(placement.text, FONT_BOLD, g.header_size, placement.width - COLUMN_PADDING)
            sink.draw_text(placement.text, placement.x, placement.y, size, FONT_BOLD)
        elif isinstance(placement, RowPlacement):
            size = sink.fit_font(placement.text, FONT_REGULAR, g.row_size, placement.width - COLUMN_PADDING)
            sink.draw_text(placement.text, placement.x, placement.y, size)
        else:
            raise TypeError(f"Unknown placement: {placement!r}")


def render_pdf(
    placements: Sequence[Placement],
    geometry: PageGeometry,
    output_path: Path,
    logo: Optional[bytes] = None,
) -> int:
    sink = PdfCanvas(output_path, geometry)
    try:
        draw_placements(sink, placements, logo)
        sink.finalize()
    except Exception:
        sink.discard()
        raise
    return sink.page_count


def layout_report(data: ReportData, geometry: PageGeometry) -> list[Placement]:
    lines = aggregate(data.activities, data.members, report_date=data.report_date)
    sections = default_sections(lines, geometry)
    subtitle = date_label(data.report_date)
    placements = render_sections(sections, geometry, banner_title=config.REPORT_TITLE, banner_subtitle=subtitle)
    if not placements:
        logger.info("No activities or members for %s; rendering the title page only", data.report_date)
        placements = [
            BannerPlacement(
                y=geometry.top,
                title=config.REPORT_TITLE,
                subtitle=subtitle,
                title_y=geometry.banner_title_y,
                subtitle_y=geometry.banner_subtitle_y,
            )
        ]
    return placements


def render_report(
    data: ReportData,
    geometry: Optional[PageGeometry] = None,
    output_path: Optional[Path] = None,
) -> Path:
    geometry = geometry or PageGeometry()
    output_path = output_path or artifact_path(data.report_date, "report")
    placements = layout_report(data, geometry)
    pages = render_pdf(placements, geometry, output_path, logo=data.logo)
    logger.info("Wrote %s (%d page(s))", output_path, pages)
    return output_path
