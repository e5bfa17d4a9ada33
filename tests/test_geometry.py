from __future__ import annotations

import pytest

from clubreport.pipeline.geometry import LayoutConfigError, PageGeometry


def test_default_letter_geometry() -> None:
    g = PageGeometry()
    assert g.usable_height == 712
    assert g.top == 40
    assert g.rows_that_fit(g.top + g.header_height) == 46
    assert g.rows_that_fit(g.banner_content_y + g.header_height) == 38


def test_remaining_height_clamps_at_zero() -> None:
    g = PageGeometry()
    assert g.remaining_height(700) == 12
    assert g.remaining_height(900) == 0
    assert g.rows_that_fit(900) == 0
    assert g.rows_that_fit(700) == 0


def test_x_positions_are_evenly_spaced() -> None:
    g = PageGeometry(page_width=680, margin=40)
    assert g.x_positions(3) == [40, 240, 440]
    assert g.x_positions(1) == [40]
    assert g.x_positions(0) == []


def test_x_positions_do_not_drift() -> None:
    g = PageGeometry()
    xs = g.x_positions(7)
    step = g.content_width / 7
    for index, x in enumerate(xs):
        assert x == g.margin + index * step
    assert g.x_positions(7) == xs


def test_validate_accepts_default() -> None:
    PageGeometry().validate()


def test_validate_rejects_header_taller_than_page() -> None:
    g = PageGeometry(page_height=100, margin=20, header_height=60)
    with pytest.raises(LayoutConfigError):
        g.validate()


def test_validate_rejects_non_positive_row_height() -> None:
    with pytest.raises(LayoutConfigError):
        PageGeometry(row_height=0).validate()
