"""
Document model for PDF transcription.
Read-only page geometry, unfiltered text, and positioned text-render events.
"""

from .document import DocumentOpenError, PDFDocument
from .geometry import Margins, Point, Rectangle, bounding_box_of, contains, inset_margins
from .page import EventKind, PageModel, PageTextLayer, RenderEvent, TextRun

__all__ = [
    "PDFDocument",
    "DocumentOpenError",
    "PageModel",
    "PageTextLayer",
    "EventKind",
    "RenderEvent",
    "TextRun",
    "Point",
    "Rectangle",
    "Margins",
    "inset_margins",
    "bounding_box_of",
    "contains",
]
