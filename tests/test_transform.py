from __future__ import annotations

import pytest

from formpdf.render.errors import InvalidGeometry
from formpdf.render.transform import (
    Box,
    Origin,
    Target,
    field_box,
    pdf_rect_to_design,
    screen_to_design,
    to_pdf,
    to_screen,
)
from tests.conftest import make_field


def test_pdf_transform_flips_around_page_height():
    box = to_pdf(100, 100, 150, 30, page_height=792)

    assert box == Box(100, 662, 150, 30, Origin.BOTTOM_LEFT)
    assert box.bottom == 792 - 100 - 30
    assert box.top == 792 - 100


def test_field_at_visual_top_lands_near_page_height_minus_height():
    box = to_pdf(0, 0, 200, 40, page_height=792)

    assert box.y == 752
    assert box.top == 792


def test_pdf_transform_applies_scale_before_flip():
    box = to_pdf(10, 20, 30, 40, page_height=500, scale=2.0)

    assert box == Box(20, 500 - 120, 60, 80, Origin.BOTTOM_LEFT)


def test_screen_transform_is_pure_scale():
    box = to_screen(10, 20, 30, 40, scale=1.5)

    assert box == Box(15, 30, 45, 60, Origin.TOP_LEFT)
    assert box.top == 30
    assert box.bottom == 90


def test_transform_is_deterministic():
    assert to_pdf(12.5, 7.25, 3, 4, 792) == to_pdf(12.5, 7.25, 3, 4, 792)


@pytest.mark.parametrize(
    "args",
    [
        (0, 0, 10, 10, 0),
        (0, 0, 10, 10, -5),
        (0, 0, 0, 10, 792),
        (0, 0, 10, -1, 792),
        (-1, 0, 10, 10, 792),
    ],
)
def test_degenerate_pdf_geometry_is_rejected(args):
    with pytest.raises(InvalidGeometry):
        to_pdf(*args)


def test_non_positive_scale_is_rejected():
    with pytest.raises(InvalidGeometry):
        to_screen(0, 0, 10, 10, scale=0)
    with pytest.raises(InvalidGeometry):
        to_pdf(0, 0, 10, 10, 792, scale=-1)


def test_field_box_follows_target_origin():
    field = make_field("name")

    assert field_box(field, Target.pdf(792)).origin is Origin.BOTTOM_LEFT
    assert field_box(field, Target.screen(792, 2.0)) == Box(200, 200, 300, 60)


def test_below_top_moves_down_in_both_conventions():
    screen = Box(0, 10, 50, 20, Origin.TOP_LEFT)
    pdf = Box(0, 10, 50, 20, Origin.BOTTOM_LEFT)

    assert screen.below_top(5) == 15
    assert pdf.below_top(5) == 25


def test_square_is_pinned_to_top_left_corner():
    pdf = Box(10, 100, 40, 20, Origin.BOTTOM_LEFT)

    square = pdf.square(20)

    assert square.top == pdf.top
    assert square.left == pdf.left
    assert square.bottom == 100


def test_pdf_rect_round_trips_to_design_space():
    box = to_pdf(72, 72, 200, 20, page_height=792)

    assert pdf_rect_to_design(box.x, box.y, box.right, box.top, 792) == (72, 72, 200, 20)


def test_screen_point_maps_back_to_design_units():
    assert screen_to_design(250, 125, scale=1.25) == (200, 100)
