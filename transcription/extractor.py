"""
Area-filtered text extraction for a single page.

Consumes a page's render events in order and keeps only the characters
whose baseline lies inside a keep-rectangle. Kept text is not re-sorted:
content-stream order is the reading order within the kept region.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from docmodel.geometry import Rectangle, contains
from docmodel.page.models import EventKind, RenderEvent

logger = logging.getLogger(__name__)


@dataclass
class PageExtraction:
    """Filtered text of one page plus character counts."""

    page_index: int
    text: str = ""
    kept_chars: int = 0
    dropped_chars: int = 0


def filter_event(event: RenderEvent, keep: Rectangle) -> Tuple[str, int, int]:
    """
    Route one render event on its tag.

    Text events are tested character by character, so a run that
    straddles the keep edge is split and only its in-bounds characters
    survive. All other events produce no text.

    Returns:
        ``(kept_text, kept_count, dropped_count)``
    """
    if event.kind is EventKind.RENDER_TEXT and event.run is not None:
        kept = []
        dropped = 0
        for char in event.run.character_runs():
            if contains(keep, char.bounding_box):
                kept.append(char.text)
            else:
                dropped += 1
        return "".join(kept), len(kept), dropped

    return "", 0, 0


def extract_page(page, keep: Rectangle, line_breaks: bool = False) -> PageExtraction:
    """
    Extract the text of *page* that falls inside *keep*.

    Args:
        page:        Page exposing ``index`` and ``events()``.
        keep:        Keep-rectangle in the page's y-up frame.
        line_breaks: Emit ``"\\n"`` at the end of every line that kept
                     some text. Off by default: runs are joined with no
                     separator.

    Returns:
        :class:`PageExtraction` for the page.
    """
    result = PageExtraction(page_index=page.index)
    parts: List[str] = []
    line_has_text = False

    for event in page.events():
        text, kept, dropped = filter_event(event, keep)
        result.kept_chars += kept
        result.dropped_chars += dropped

        if text:
            parts.append(text)
            line_has_text = True
        elif event.kind is EventKind.END_LINE:
            if line_breaks and line_has_text:
                parts.append("\n")
            line_has_text = False

    result.text = "".join(parts)
    logger.debug(
        "Page %d: kept %d chars, dropped %d",
        result.page_index,
        result.kept_chars,
        result.dropped_chars,
    )
    return result
