"""
Planar geometry for page layout.

All shapes live in the page's y-up frame: the origin is the bottom-left
corner of the page box and ``y`` grows towards the top of the page.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A position on the page."""

    x: float
    y: float


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle anchored at its lower-left corner.

    Width and height are expected to be non-negative, but are not
    validated here: :func:`inset_margins` passes oversized margins
    through as negative dimensions and leaves the decision to the caller.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """True if either dimension is negative."""
        return self.width < 0 or self.height < 0


@dataclass(frozen=True)
class Margins:
    """Insets, in page units (points), trimmed from each side of a page."""

    left: float = 50.0
    right: float = 50.0
    top: float = 80.0
    bottom: float = 80.0

    def __post_init__(self):
        for name in ("left", "right", "top", "bottom"):
            if getattr(self, name) < 0:
                raise ValueError(
                    f"Margin '{name}' must be non-negative, got {getattr(self, name)}"
                )


def inset_margins(page_rect: Rectangle, margins: Margins) -> Rectangle:
    """
    Shrink *page_rect* by *margins* to get the content keep-rectangle.

    The bottom margin moves the lower edge up and the top margin moves the
    upper edge down. No clamping is applied.
    """
    return Rectangle(
        x=page_rect.x + margins.left,
        y=page_rect.y + margins.bottom,
        width=page_rect.width - margins.left - margins.right,
        height=page_rect.height - margins.top - margins.bottom,
    )


def bounding_box_of(start: Point, end: Point) -> Rectangle:
    """
    Axis-aligned envelope of a baseline segment.

    Horizontal baselines give a zero-height rectangle; rotated ones give
    the box spanned by both end points.
    """
    return Rectangle(
        x=min(start.x, end.x),
        y=min(start.y, end.y),
        width=abs(end.x - start.x),
        height=abs(end.y - start.y),
    )


def contains(outer: Rectangle, inner: Rectangle) -> bool:
    """
    Check whether *inner* lies entirely inside *outer*.

    Edges are inclusive: a rectangle touching the boundary of *outer*
    still counts as contained, and every rectangle contains itself.
    """
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.x + inner.width <= outer.x + outer.width
        and inner.y + inner.height <= outer.y + outer.height
    )
