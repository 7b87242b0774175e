"""
Page-level access for PDF documents: geometry, text, and render events.
"""

from .models import EventKind, RenderEvent, TextRun
from .page_model import PageModel
from .text_layer import PageTextLayer

__all__ = [
    "PageModel",
    "PageTextLayer",
    "EventKind",
    "RenderEvent",
    "TextRun",
]
