"""
Failure conditions for a transcription run.

All of them are terminal: nothing is retried and no output is written.
"""

from docmodel.document.pdf_reader import DocumentOpenError


class TranscriptionError(Exception):
    """Base class for failures raised by the transcription pipeline."""


class BoundaryNotFoundError(TranscriptionError):
    """The start or end marker could not be located in the document."""


class InvalidMarginsError(TranscriptionError, ValueError):
    """The configured margins leave no room on a page."""


class PageDecodeError(TranscriptionError):
    """The decoder failed while reading a page's text or content stream."""


class OutputWriteError(TranscriptionError):
    """The extracted text could not be written to its destination."""


__all__ = [
    "DocumentOpenError",
    "TranscriptionError",
    "BoundaryNotFoundError",
    "InvalidMarginsError",
    "PageDecodeError",
    "OutputWriteError",
]
