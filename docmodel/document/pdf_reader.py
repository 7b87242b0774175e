"""
PDF document access for the transcription pipeline.
Read-only: no rendering state, no editing.
"""

import logging
from typing import Iterator

import fitz  # PyMuPDF

from docmodel.page.page_model import PageModel

logger = logging.getLogger(__name__)


class DocumentOpenError(RuntimeError):
    """The input could not be opened or decoded as a PDF."""


def open_pdf(pdf_path: str) -> fitz.Document:
    """
    Open a PDF document.

    Args:
        pdf_path: Path to the PDF file.

    Returns:
        A fitz.Document instance.

    Raises:
        DocumentOpenError: If the file is missing or fitz cannot open it.
    """
    try:
        doc = fitz.open(pdf_path)
    except Exception as e:
        raise DocumentOpenError(f"Failed to open PDF '{pdf_path}': {e}") from e

    if not doc.is_pdf or doc.page_count == 0:
        doc.close()
        raise DocumentOpenError(f"Not a readable PDF document: '{pdf_path}'")

    return doc


class PDFDocument:
    """
    Keeps a PDF open for a sequence of page operations.

    Pages are addressed by 1-based index. Use as a context manager so the
    document is closed on every exit path.
    """

    def __init__(self, pdf_path: str):
        self.pdf_path = pdf_path
        self.doc = open_pdf(pdf_path)
        self.page_count = self.doc.page_count
        logger.debug("Opened %s (%d pages)", pdf_path, self.page_count)

    def page(self, index: int) -> PageModel:
        """Return the page model for 1-based *index*."""
        if self.doc is None:
            raise ValueError("Document is closed")
        if index < 1 or index > self.page_count:
            raise IndexError(
                f"Page {index} out of range (document has {self.page_count} pages)"
            )
        return PageModel(self.doc, index)

    def page_text(self, index: int) -> str:
        """Unfiltered text of page *index*. The page is unloaded afterwards."""
        page = self.page(index)
        try:
            return page.text
        finally:
            page.unload()

    def pages(self) -> Iterator[PageModel]:
        """Iterate page models in document order."""
        for index in range(1, self.page_count + 1):
            yield self.page(index)

    # -- lifecycle ----------------------------------------------------------

    def close(self):
        if self.doc is not None:
            self.doc.close()
            self.doc = None

    @property
    def is_closed(self) -> bool:
        return self.doc is None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def __len__(self) -> int:
        return self.page_count

    def __repr__(self):
        return f"PDFDocument('{self.pdf_path}', pages={self.page_count})"
