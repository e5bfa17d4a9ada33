from __future__ import annotations

import pytest

from clubreport.pipeline.geometry import LayoutConfigError, PageGeometry
from clubreport.pipeline.paginate import BannerPlacement, HeaderPlacement, PageBreak, RowPlacement, split_pages
from clubreport.pipeline.sections import build_section, default_sections, render_sections

G = PageGeometry(page_height=400, margin=20)


def test_all_empty_section_is_skipped() -> None:
    section = build_section(["Walk", "Run", "Ride"], [[], [], []], G, banner=True)
    assert render_sections([section], G, banner_title="Report") == []


def test_start_fresh_section_forces_page_break() -> None:
    first = build_section(["Walk"], [["w1"]], G, banner=True)
    second = build_section(["Hike"], [["h1"]], G, start_new_page=True)
    placements = render_sections([first, second], G, banner_title="Report")
    pages = split_pages(placements)
    assert len(pages) == 2
    assert [p.text for p in pages[1] if isinstance(p, HeaderPlacement)] == ["Hike"]
    assert next(p for p in pages[1] if isinstance(p, HeaderPlacement)).y == G.top
    assert not any(isinstance(p, BannerPlacement) for p in pages[1])


def test_start_fresh_first_section_has_no_leading_break() -> None:
    skipped = build_section(["Walk"], [[]], G, banner=True)
    second = build_section(["Hike"], [["h1"]], G, start_new_page=True)
    placements = render_sections([skipped, second], G)
    assert not isinstance(placements[0], PageBreak)
    assert len(split_pages(placements)) == 1


def test_section_without_fresh_flag_continues_on_same_page() -> None:
    first = build_section(["Walk"], [["w1", "w2"]], G)
    second = build_section(["Hike"], [["h1"]], G)
    placements = render_sections([first, second], G)
    assert not any(isinstance(p, PageBreak) for p in placements)
    hike = next(p for p in placements if isinstance(p, HeaderPlacement) and p.text == "Hike")
    assert hike.y == G.top + G.header_height + 2 * G.row_height + G.trailing_gap


def test_continuing_section_breaks_when_no_row_fits() -> None:
    fit = G.rows_that_fit(G.top + G.header_height)
    first = build_section(["Walk"], [[f"w{i}" for i in range(fit)]], G)
    second = build_section(["Hike"], [["h1"]], G)
    placements = render_sections([first, second], G)
    pages = split_pages(placements)
    assert len(pages) == 2
    assert [p.text for p in pages[1] if isinstance(p, RowPlacement)] == ["h1"]


def test_banner_appears_once_per_bannered_section() -> None:
    first = build_section(["Walk"], [[f"w{i}" for i in range(80)]], G, banner=True)
    second = build_section(["Hike"], [["h1"]], G, start_new_page=True)
    placements = render_sections([first, second], G, banner_title="Report", banner_subtitle="Day")
    assert sum(isinstance(p, BannerPlacement) for p in placements) == 1


def test_bad_geometry_fails_before_placing_anything() -> None:
    g = PageGeometry(page_height=100, margin=20, header_height=60)
    section = build_section(["Walk"], [["w1"]], g)
    with pytest.raises(LayoutConfigError):
        render_sections([section], g)


def test_default_sections_follow_configured_layout() -> None:
    lines = {"Walk": ["w"], "Run": [], "Ride": ["r"], "Hike": ["h"], "NoActivity": ["n"]}
    sections = default_sections(lines, G)
    assert len(sections) == 2
    assert [c.title for c in sections[0].columns] == ["Walk", "Run", "Ride"]
    assert [c.title for c in sections[1].columns] == ["Hike", "No Activity", ""]
    assert sections[0].banner and not sections[0].start_new_page
    assert sections[1].start_new_page and not sections[1].banner
    assert sections[1].columns[1].items == ("n",)


def test_build_section_rejects_mismatched_lists() -> None:
    with pytest.raises(ValueError):
        build_section(["Walk", "Run"], [["w"]], G)
