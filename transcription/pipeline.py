"""
Transcription pipeline orchestrator: PDF → content window → filtered text → file.

Coordinates the full transcription workflow:

1. **Boundary scan**: search the unfiltered page text for the start
   marker (forwards) and the end markers (backwards) to find the
   inclusive page window holding the main content.
2. **Filtered extraction**: for every page in the window, inset the page
   box by the configured margins and keep only the characters whose
   baseline lies inside the resulting rectangle.
3. **Export**: join the page texts with a separator and write them to
   the destination in one step.

Extraction is all-or-nothing: if any phase fails, nothing is written.

Usage::

    from transcription.pipeline import TranscriptionPipeline, TranscriptionConfig

    config = TranscriptionConfig(end_markers=("Afterword",))
    pipeline = TranscriptionPipeline(config)
    result = pipeline.transcribe("book.pdf", "book.txt")
    print(result.summary())
"""

import logging
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from docmodel.document.pdf_reader import PDFDocument
from docmodel.geometry import Margins, Rectangle, inset_margins

from .errors import InvalidMarginsError, OutputWriteError, PageDecodeError
from .extractor import PageExtraction, extract_page
from .markers import ExtractionWindow, find_extraction_window

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


@dataclass
class TranscriptionConfig:
    """
    All tuneable parameters for the transcription pipeline.

    Attributes:
        start_marker:     Literal text marking the first content page.
        end_markers:      Literal texts, any of which marks the last content page.
        margins:          Insets trimmed from every page to drop headers,
                          footers and margin notes.
        page_separator:   Appended after every page's text.
        line_breaks:      Insert a newline after each kept line of text.
        disable_tqdm:     Suppress progress bars.
        debug_layout_dir: Save keep-area overlay images here (``None`` to skip).
        render_scale:     Resolution multiplier for debug images.
    """

    start_marker: str = "Introduction"
    end_markers: Tuple[str, ...] = ("Epilogue", "Conclusion")
    margins: Margins = field(default_factory=Margins)

    page_separator: str = "\n"
    line_breaks: bool = False

    disable_tqdm: bool = False
    debug_layout_dir: Optional[str] = None
    render_scale: float = 1.5


# ------------------------------------------------------------------
# Result
# ------------------------------------------------------------------


@dataclass
class TranscriptionResult:
    """
    Summary returned after transcription completes.

    Carries the extracted text along with per-phase timing and counts.
    """

    text: str = ""
    output_path: str = ""
    total_pages: int = 0
    start_page: int = 0
    end_page: int = 0
    pages: List[PageExtraction] = field(default_factory=list)

    time_scan: float = 0.0
    time_extract: float = 0.0
    time_export: float = 0.0
    elapsed_seconds: float = 0.0

    @property
    def pages_processed(self) -> int:
        return len(self.pages)

    @property
    def kept_chars(self) -> int:
        return sum(p.kept_chars for p in self.pages)

    @property
    def dropped_chars(self) -> int:
        return sum(p.dropped_chars for p in self.pages)

    def summary(self) -> str:
        """Format a human-readable summary of the transcription run."""
        return (
            f"{'=' * 60}\n"
            f"TRANSCRIPTION COMPLETE\n"
            f"{'=' * 60}\n"
            f"  Output:     {self.output_path or '(not written)'}\n"
            f"  Window:     pages {self.start_page}–{self.end_page} "
            f"of {self.total_pages}\n"
            f"  Characters: {self.kept_chars} kept, "
            f"{self.dropped_chars} dropped\n"
            f"\n"
            f"  Boundary scan:   {self.time_scan:.2f}s\n"
            f"  Extraction:      {self.time_extract:.2f}s\n"
            f"  Export:          {self.time_export:.2f}s\n"
            f"  Total wall time: {self.elapsed_seconds:.2f}s\n"
            f"{'=' * 60}"
        )


# ------------------------------------------------------------------
# Assembly
# ------------------------------------------------------------------


def keep_rectangle(page, margins: Margins) -> Rectangle:
    """
    Inset *page*'s bounding box by *margins*.

    Raises:
        InvalidMarginsError: If the margins are larger than the page.
    """
    keep = inset_margins(page.bounding_box, margins)
    if keep.is_empty:
        box = page.bounding_box
        raise InvalidMarginsError(
            f"Margins {margins} do not fit page {page.index} "
            f"({box.width:.0f}x{box.height:.0f})"
        )
    return keep


def extract_window(
    document,
    window: ExtractionWindow,
    config: TranscriptionConfig,
) -> List[PageExtraction]:
    """
    Run the area-filtered extractor over every page of *window*, in order.

    Each page is unloaded once filtered, so long windows do not keep every
    decoded page in memory.

    Raises:
        InvalidMarginsError: If the margins do not fit a page.
        PageDecodeError:     If the decoder fails on a page.
    """
    pages: List[PageExtraction] = []
    pbar = tqdm(
        window.pages,
        desc="Extracting text",
        unit="page",
        disable=config.disable_tqdm,
    )
    for index in pbar:
        page = document.page(index)
        keep = keep_rectangle(page, config.margins)
        try:
            pages.append(extract_page(page, keep, line_breaks=config.line_breaks))
        except Exception as e:
            raise PageDecodeError(f"Failed to extract page {index}: {e}") from e
        finally:
            page.unload()
    return pages


def join_pages(pages: List[PageExtraction], separator: str = "\n") -> str:
    """Concatenate page texts, each followed by *separator*."""
    buffer: List[str] = []
    for page in pages:
        buffer.append(page.text)
        buffer.append(separator)
    return "".join(buffer)


def assemble_text(document, config: Optional[TranscriptionConfig] = None) -> str:
    """
    Extract the filtered text of an open document's content window.

    Raises:
        BoundaryNotFoundError: If the window cannot be resolved.
        InvalidMarginsError:   If the margins do not fit a page.
        PageDecodeError:       If the decoder fails on a page.
    """
    config = config or TranscriptionConfig()
    window = find_extraction_window(
        document,
        config.start_marker,
        config.end_markers,
        disable_progress=config.disable_tqdm,
    )
    pages = extract_window(document, window, config)
    return join_pages(pages, config.page_separator)


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


class TranscriptionPipeline:
    """
    End-to-end PDF transcription pipeline.

    The document is opened once per run and closed before returning,
    whether the run succeeds or fails.
    """

    def __init__(self, config: Optional[TranscriptionConfig] = None):
        self.config = config or TranscriptionConfig()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def extract(self, pdf_path: str) -> TranscriptionResult:
        """
        Extract the content window of a PDF without writing anything.

        Args:
            pdf_path: Path to the input PDF.

        Returns:
            :class:`TranscriptionResult` holding the text and metrics.

        Raises:
            DocumentOpenError:     If the PDF cannot be opened.
            BoundaryNotFoundError: If the markers cannot be found.
            InvalidMarginsError:   If the margins do not fit a page.
        """
        t_total = time.perf_counter()
        cfg = self.config
        result = TranscriptionResult()

        with PDFDocument(pdf_path) as document:
            result.total_pages = document.page_count

            # -- Phase 1: Boundary scan ------------------------------------
            window, result = self._phase_scan(document, result)

            # -- Phase 2: Filtered extraction ------------------------------
            result = self._phase_extract(document, window, result)

            if cfg.debug_layout_dir:
                from .utils.debug_overlay import save_debug_layouts

                save_debug_layouts(
                    document,
                    window,
                    cfg.margins,
                    scale=cfg.render_scale,
                    output_dir=cfg.debug_layout_dir,
                    disable_progress=cfg.disable_tqdm,
                )

        result.elapsed_seconds = time.perf_counter() - t_total
        return result

    def transcribe(self, pdf_path: str, output_path: str) -> TranscriptionResult:
        """
        Extract the content window of a PDF and write it to *output_path*.

        The file is only touched after extraction has fully succeeded.

        Raises:
            OutputWriteError: If the destination cannot be written, in
                addition to everything :meth:`extract` raises.
        """
        t_total = time.perf_counter()
        result = self.extract(pdf_path)

        # -- Phase 3: Export -----------------------------------------------
        result = self._phase_export(output_path, result)

        result.elapsed_seconds = time.perf_counter() - t_total
        logger.info("\n%s", result.summary())
        return result

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _phase_scan(
        self,
        document: PDFDocument,
        result: TranscriptionResult,
    ) -> Tuple[ExtractionWindow, TranscriptionResult]:
        """Locate the start and end pages of the main content."""
        cfg = self.config
        t0 = time.perf_counter()
        logger.info("Phase 1: Scanning %d pages for boundaries", document.page_count)

        window = find_extraction_window(
            document,
            cfg.start_marker,
            cfg.end_markers,
            disable_progress=cfg.disable_tqdm,
        )
        result.start_page = window.start_page
        result.end_page = window.end_page
        result.time_scan = time.perf_counter() - t0
        return window, result

    def _phase_extract(
        self,
        document: PDFDocument,
        window: ExtractionWindow,
        result: TranscriptionResult,
    ) -> TranscriptionResult:
        """Filter every page of the window and join the results."""
        cfg = self.config
        t0 = time.perf_counter()
        logger.info("Phase 2: Extracting %d pages", len(window))

        result.pages = extract_window(document, window, cfg)
        result.text = join_pages(result.pages, cfg.page_separator)
        result.time_extract = time.perf_counter() - t0

        logger.info(
            "Extraction complete: %d chars kept, %d dropped in %.2fs",
            result.kept_chars,
            result.dropped_chars,
            result.time_extract,
        )
        return result

    def _phase_export(
        self,
        output_path: str,
        result: TranscriptionResult,
    ) -> TranscriptionResult:
        """Write the extracted text to *output_path* in a single step."""
        t0 = time.perf_counter()
        logger.info("Phase 3: Writing %s", output_path)

        write_text(output_path, result.text)

        result.output_path = str(output_path)
        result.time_export = time.perf_counter() - t0
        return result


def write_text(output_path: str, text: str) -> None:
    """
    Write *text* to *output_path* as UTF-8.

    The text goes to a temporary file next to the destination, which is
    then moved into place, so a failed write leaves any existing file
    untouched.

    Raises:
        OutputWriteError: On any filesystem error.
    """
    out = Path(output_path)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{out.name}.", suffix=".tmp", dir=out.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, out)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise OutputWriteError(f"Failed to write '{output_path}': {e}") from e
