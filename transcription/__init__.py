"""
PDF transcription pipeline.

Marker-bounded page selection and margin-filtered text extraction for
turning a paginated PDF into a clean plain-text stream.
"""

from .errors import (
    BoundaryNotFoundError,
    DocumentOpenError,
    InvalidMarginsError,
    OutputWriteError,
    TranscriptionError,
)
from .extractor import PageExtraction, extract_page, filter_event
from .markers import ExtractionWindow, find_end_page, find_extraction_window, find_start_page
from .pipeline import (
    TranscriptionConfig,
    TranscriptionPipeline,
    TranscriptionResult,
    assemble_text,
)

__all__ = [
    "TranscriptionConfig",
    "TranscriptionPipeline",
    "TranscriptionResult",
    "assemble_text",
    "PageExtraction",
    "extract_page",
    "filter_event",
    "ExtractionWindow",
    "find_start_page",
    "find_end_page",
    "find_extraction_window",
    "TranscriptionError",
    "DocumentOpenError",
    "BoundaryNotFoundError",
    "InvalidMarginsError",
    "OutputWriteError",
]
