"""
Character-level render events for PDF pages.
"""

from typing import Dict, Iterator, List, Optional, Tuple

import fitz

from docmodel.geometry import Point

from .models import EventKind, RenderEvent, TextRun


class PageTextLayer:
    """
    Walks the text structure of a PDF page and yields render events.

    PyMuPDF reports positions with the origin at the top-left corner and
    ``y`` growing downwards. Every point is flipped into the page's y-up
    frame here, so downstream geometry can treat the bottom edge of the
    page box as ``y = 0``.

    Each span becomes one ``RENDER_TEXT`` event whose run holds one
    sub-run per character. Line and block ends, and image blocks, are
    reported as separate events so consumers can keep track of structure
    without receiving any text from them.
    """

    FLAGS = (
        fitz.TEXT_PRESERVE_WHITESPACE
        | fitz.TEXT_PRESERVE_LIGATURES
        | fitz.TEXT_PRESERVE_IMAGES
    )

    def __init__(self, page: fitz.Page):
        self.page = page
        rect = page.rect
        self._y_flip = rect.y0 + rect.y1

    def events(self) -> Iterator[RenderEvent]:
        """
        Yield the page's render events in content-stream order.

        Text extraction only runs once the first event is requested.
        Each call starts a new, independent pass.
        """
        text_dict = self.page.get_text("rawdict", flags=self.FLAGS)

        for block_data in text_dict.get("blocks", []):
            if block_data.get("type") != 0:
                yield RenderEvent(EventKind.RENDER_IMAGE)
                continue

            for line_data in block_data.get("lines", []):
                direction = tuple(line_data.get("dir", (1, 0)))

                for span_data in line_data.get("spans", []):
                    run = self._span_run(span_data, direction)
                    if run is not None:
                        yield RenderEvent(EventKind.RENDER_TEXT, run)

                yield RenderEvent(EventKind.END_LINE)

            yield RenderEvent(EventKind.END_BLOCK)

    def _span_run(
        self, span_data: Dict, direction: Tuple[float, float]
    ) -> Optional[TextRun]:
        font_name = span_data.get("font", "")
        font_size = span_data.get("size", 0.0)

        chars: List[TextRun] = []
        for char_data in span_data.get("chars", []):
            origin = tuple(char_data.get("origin", (0, 0)))
            bbox = tuple(char_data.get("bbox", (0, 0, 0, 0)))
            end = _baseline_end(origin, bbox, direction)
            chars.append(
                TextRun(
                    start=self._to_page(origin),
                    end=self._to_page(end),
                    text=char_data.get("c", ""),
                    font_name=font_name,
                    font_size=font_size,
                )
            )

        if not chars:
            return None

        return TextRun(
            start=chars[0].start,
            end=chars[-1].end,
            text="".join(c.text for c in chars),
            font_name=font_name,
            font_size=font_size,
            chars=tuple(chars),
        )

    def _to_page(self, point: Tuple[float, float]) -> Point:
        """Convert a PyMuPDF point to the y-up page frame."""
        return Point(point[0], self._y_flip - point[1])


def _baseline_end(
    origin: Tuple[float, float],
    bbox: Tuple[float, float, float, float],
    direction: Tuple[float, float],
) -> Tuple[float, float]:
    """
    Estimate where a glyph's baseline ends.

    The advance is the furthest extent of the glyph box along the writing
    direction, measured from the baseline origin.
    """
    dx, dy = direction
    x0, y0, x1, y1 = bbox
    advance = max(
        (cx - origin[0]) * dx + (cy - origin[1]) * dy
        for cx in (x0, x1)
        for cy in (y0, y1)
    )
    advance = max(advance, 0.0)
    return origin[0] + advance * dx, origin[1] + advance * dy
