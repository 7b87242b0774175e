"""Tests for the geometry primitives."""

import pytest

from docmodel.geometry import (
    Margins,
    Point,
    Rectangle,
    bounding_box_of,
    contains,
    inset_margins,
)

PAGE = Rectangle(0, 0, 612, 792)
KEEP = Rectangle(50, 80, 512, 632)


def test_inset_default_margins():
    assert inset_margins(PAGE, Margins()) == KEEP


def test_inset_respects_page_origin():
    page = Rectangle(10, 20, 200, 300)
    keep = inset_margins(page, Margins(left=1, right=2, top=3, bottom=4))
    assert keep == Rectangle(11, 24, 197, 293)


def test_inset_is_deterministic():
    margins = Margins(12.5, 7.25, 30, 45)
    assert inset_margins(PAGE, margins) == inset_margins(PAGE, margins)


def test_inset_passes_negative_dimensions_through():
    keep = inset_margins(Rectangle(0, 0, 100, 100), Margins(60, 60, 10, 10))
    assert keep.width == -20
    assert keep.is_empty


def test_margins_reject_negative_values():
    with pytest.raises(ValueError, match="left"):
        Margins(left=-1)


def test_bounding_box_of_horizontal_baseline_has_zero_height():
    box = bounding_box_of(Point(100, 400), Point(160, 400))
    assert box == Rectangle(100, 400, 60, 0)


def test_bounding_box_of_reversed_diagonal_baseline():
    box = bounding_box_of(Point(30, 50), Point(10, 20))
    assert box == Rectangle(10, 20, 20, 30)


def test_contains_is_reflexive():
    assert contains(KEEP, KEEP)
    assert contains(PAGE, PAGE)


def test_contains_includes_boundary():
    # Baselines lying exactly on each edge of the keep area are kept.
    assert contains(KEEP, bounding_box_of(Point(50, 80), Point(100, 80)))
    assert contains(KEEP, bounding_box_of(Point(500, 712), Point(562, 712)))


@pytest.mark.parametrize(
    "inner",
    [
        Rectangle(49.999, 100, 10, 0),  # left
        Rectangle(100, 79.999, 10, 0),  # bottom
        Rectangle(552.001, 100, 10, 0),  # right
        Rectangle(100, 700, 10, 12.001),  # top
    ],
)
def test_contains_rejects_any_overshoot(inner):
    assert not contains(KEEP, inner)


def test_contains_diagonal_baseline_uses_its_envelope():
    inside = bounding_box_of(Point(60, 90), Point(120, 150))
    crossing = bounding_box_of(Point(60, 90), Point(120, 720))
    assert contains(KEEP, inside)
    assert not contains(KEEP, crossing)


def test_negative_keep_area_contains_nothing_real():
    keep = inset_margins(Rectangle(0, 0, 100, 100), Margins(60, 60, 10, 10))
    assert not contains(keep, Rectangle(50, 50, 0, 0))
