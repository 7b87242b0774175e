"""
Page model for the transcription pipeline.
Provides page geometry, unfiltered text, and lazy render events.
"""

from typing import Iterator, Optional

import fitz
from PIL import Image

from docmodel.geometry import Rectangle

from .models import RenderEvent
from .text_layer import PageTextLayer


class PageModel:
    """
    Lightweight, read-only view of one page.

    Pages are numbered from 1. The underlying fitz page is loaded on first
    access, so creating a model for every page of a long document is cheap.
    """

    def __init__(self, doc: fitz.Document, index: int):
        self._doc = doc
        self.index = index
        self._page: Optional[fitz.Page] = None

    @property
    def page(self) -> fitz.Page:
        """Get the underlying fitz page, loading if necessary."""
        if self._page is None:
            self._page = self._doc.load_page(self.index - 1)
        return self._page

    @property
    def rect(self) -> fitz.Rect:
        """Page rectangle in PyMuPDF coordinates."""
        return self.page.rect

    @property
    def bounding_box(self) -> Rectangle:
        """Page box in the y-up page frame used by the render events."""
        rect = self.rect
        return Rectangle(rect.x0, rect.y0, rect.width, rect.height)

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height

    @property
    def text(self) -> str:
        """All text on the page, without any geometric filtering."""
        return self.page.get_text()

    def events(self) -> Iterator[RenderEvent]:
        """Start a new single-pass iteration over the page's render events."""
        return PageTextLayer(self.page).events()

    def render_to_image(self, scale: float = 1.5) -> Image.Image:
        """
        Render the page to a PIL Image.

        Args:
            scale: Resolution scale factor

        Returns:
            PIL.Image.Image in RGB mode
        """
        mat = fitz.Matrix(scale, scale)
        pix = self.page.get_pixmap(matrix=mat, alpha=False)
        return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

    def unload(self):
        """Drop the loaded fitz page to free memory."""
        self._page = None

    def __repr__(self) -> str:
        return (
            f"PageModel(page={self.index}, "
            f"size={self.width:.0f}x{self.height:.0f})"
        )
