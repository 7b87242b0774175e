"""
Locate the main-content page range of a document by marker text.

A marker is a literal, case-sensitive substring of a page's unfiltered
text. The start page is the first page containing the start marker; the
end page is the last page containing any of the end markers.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from tqdm import tqdm

from .errors import BoundaryNotFoundError, PageDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionWindow:
    """Inclusive, 1-based page range to extract."""

    start_page: int
    end_page: int

    @property
    def pages(self) -> range:
        return range(self.start_page, self.end_page + 1)

    def __len__(self) -> int:
        return max(0, self.end_page - self.start_page + 1)


def _page_text(document, index: int) -> str:
    """Unfiltered text of page *index*, with decoder failures wrapped."""
    try:
        return document.page_text(index)
    except Exception as e:
        raise PageDecodeError(f"Failed to read text of page {index}: {e}") from e


def find_start_page(
    document, marker: str, disable_progress: bool = True
) -> Optional[int]:
    """
    Scan pages from first to last for *marker*.

    Args:
        document:         Open document exposing ``page_count`` and
                          ``page_text(index)``.
        marker:           Literal substring to look for.
        disable_progress: Suppress the tqdm progress bar.

    Returns:
        1-based index of the first matching page, or ``None``.
    """
    pages = tqdm(
        range(1, document.page_count + 1),
        desc="Scanning for start",
        unit="page",
        disable=disable_progress,
    )
    for index in pages:
        if marker in _page_text(document, index):
            logger.debug("Start marker %r found on page %d", marker, index)
            return index
    return None


def find_end_page(
    document, markers: Iterable[str], disable_progress: bool = True
) -> Optional[int]:
    """
    Scan pages from last to first for any of *markers*.

    Searching backwards makes the first hit the last occurrence in the
    document, so a marker quoted early on does not cut the range short.

    Returns:
        1-based index of the last page containing a marker, or ``None``.
    """
    markers = tuple(markers)
    pages = tqdm(
        range(document.page_count, 0, -1),
        desc="Scanning for end",
        unit="page",
        disable=disable_progress,
    )
    for index in pages:
        text = _page_text(document, index)
        if any(marker in text for marker in markers):
            logger.debug("End marker found on page %d", index)
            return index
    return None


def find_extraction_window(
    document,
    start_marker: str,
    end_markers: Iterable[str],
    disable_progress: bool = True,
) -> ExtractionWindow:
    """
    Resolve the inclusive page window between the start and end markers.

    Raises:
        BoundaryNotFoundError: If either marker is missing, or the last
            end marker comes before the first start marker.
    """
    end_markers = tuple(end_markers)
    start = find_start_page(document, start_marker, disable_progress)
    end = find_end_page(document, end_markers, disable_progress)

    missing = []
    if start is None:
        missing.append(f"start marker {start_marker!r}")
    if end is None:
        missing.append(f"end markers {', '.join(repr(m) for m in end_markers)}")
    if missing:
        raise BoundaryNotFoundError(
            f"Could not find the {' or the '.join(missing)} in the document"
        )

    if end < start:
        raise BoundaryNotFoundError(
            f"Last end marker (page {end}) comes before the start marker "
            f"(page {start})"
        )

    logger.info("Content window: pages %d–%d", start, end)
    return ExtractionWindow(start, end)
