"""
Render event data models for PDF pages.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from docmodel.geometry import Point, Rectangle, bounding_box_of


class EventKind(Enum):
    """Kinds of events emitted while walking a page's content."""

    RENDER_TEXT = auto()
    END_LINE = auto()
    END_BLOCK = auto()
    RENDER_IMAGE = auto()


@dataclass(frozen=True)
class TextRun:
    """
    A run of glyphs rendered along a single baseline.

    A span-level run carries its character-level sub-runs in ``chars``;
    a character-level run has none.
    """

    start: Point  # baseline start
    end: Point  # baseline end
    text: str
    font_name: str = ""
    font_size: float = 0.0
    chars: Tuple["TextRun", ...] = ()

    @property
    def bounding_box(self) -> Rectangle:
        return bounding_box_of(self.start, self.end)

    def character_runs(self) -> Tuple["TextRun", ...]:
        """Character-level sub-runs, or the run itself if it is not split."""
        return self.chars or (self,)


@dataclass(frozen=True)
class RenderEvent:
    """A single tagged event; only ``RENDER_TEXT`` events carry a run."""

    kind: EventKind
    run: Optional[TextRun] = None

    @property
    def is_text(self) -> bool:
        return self.kind is EventKind.RENDER_TEXT and self.run is not None
