#!/usr/bin/env python3
"""
PDF Transcriber: command-line entry point.

Extracts the main content of a PDF (from the start marker page to the
last end marker page) as plain text, dropping headers, footers and margin
notes outside the configured margins.

Usage::

    python transcribe.py book.pdf book.txt
    python transcribe.py book.pdf --end-marker Afterword --end-marker Epilogue
    python transcribe.py book.pdf out.txt --margins 40 40 60 60 --line-breaks
    python transcribe.py book.pdf --debug-layout debug/book/ -v 2

Verbosity levels::

    -v 0   Quiet: warnings and errors only.
    -v 1   Normal: phase summaries and progress bars (default).
    -v 2   Debug: per-page character counts.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from docmodel.document.pdf_reader import DocumentOpenError
from docmodel.geometry import Margins
from transcription.errors import TranscriptionError
from transcription.pipeline import TranscriptionConfig, TranscriptionPipeline

logger = logging.getLogger("transcription")

# Mapping from --verbose integer to logging level
_VERBOSITY_MAP = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}

_DEFAULT_END_MARKERS = ("Epilogue", "Conclusion")


# ------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------


def _parse_margin(value: str) -> float:
    """Parse a single non-negative margin value."""
    try:
        margin = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid margin '{value}'. Use a number.")
    if margin < 0:
        raise argparse.ArgumentTypeError(
            f"Invalid margin '{value}'. Margins must be >= 0."
        )
    return margin


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser with all pipeline options."""
    defaults = Margins()
    p = argparse.ArgumentParser(
        description="Extract the main content of a PDF as plain text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python transcribe.py book.pdf book.txt\n"
            "  python transcribe.py book.pdf --end-marker Afterword\n"
            "  python transcribe.py book.pdf --margins 40 40 60 60\n"
            "  python transcribe.py book.pdf --debug-layout debug/ -v 2\n"
        ),
    )

    # -- Positional --------------------------------------------------------
    p.add_argument("input", help="Path to the input PDF file")
    p.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output text file. Default: the input path with a .txt suffix.",
    )

    # -- Boundaries --------------------------------------------------------
    bounds = p.add_argument_group("boundaries")
    bounds.add_argument(
        "--start-marker",
        default="Introduction",
        metavar="TEXT",
        help="Text marking the first content page (default: Introduction)",
    )
    bounds.add_argument(
        "--end-marker",
        action="append",
        default=None,
        metavar="TEXT",
        help="Text marking the last content page; repeat for alternatives "
        "(default: Epilogue, Conclusion)",
    )

    # -- Layout ------------------------------------------------------------
    layout = p.add_argument_group("layout")
    layout.add_argument(
        "--margins",
        nargs=4,
        type=_parse_margin,
        default=None,
        metavar=("LEFT", "RIGHT", "TOP", "BOTTOM"),
        help=f"Page margins in points (default: {defaults.left:g} "
        f"{defaults.right:g} {defaults.top:g} {defaults.bottom:g})",
    )
    layout.add_argument(
        "--line-breaks",
        action="store_true",
        help="Insert a newline after each line of kept text",
    )

    # -- Debug / output control --------------------------------------------
    debug = p.add_argument_group("debug & output")
    debug.add_argument(
        "--debug-layout",
        default=None,
        metavar="DIR",
        help="Save keep-area overlay images for the content pages to DIR",
    )
    debug.add_argument(
        "-v",
        "--verbose",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="Verbosity: 0=quiet, 1=normal (default), 2=debug",
    )
    debug.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars",
    )

    return p


# ------------------------------------------------------------------
# Logging setup
# ------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    """
    Set up the ``transcription`` and ``docmodel`` loggers.

    At verbosity 0 (WARNING), uses a minimal format. At 2 (DEBUG),
    includes timestamps and the module name for traceability.
    """
    level = _VERBOSITY_MAP.get(verbosity, logging.INFO)

    if level <= logging.DEBUG:
        fmt = "%(asctime)s %(name)s %(levelname)s: %(message)s"
        datefmt = "%H:%M:%S"
    elif level <= logging.INFO:
        fmt = "%(message)s"
        datefmt = None
    else:
        fmt = "%(levelname)s: %(message)s"
        datefmt = None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    for name in ("transcription", "docmodel"):
        root = logging.getLogger(name)
        root.setLevel(level)
        root.handlers.clear()
        root.addHandler(handler)

    # Suppress noisy third-party loggers regardless of verbosity
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ------------------------------------------------------------------
# Output path resolution
# ------------------------------------------------------------------


def _resolve_output_path(args: argparse.Namespace) -> str:
    """Use the given output path, or the input path with a ``.txt`` suffix."""
    if args.output:
        return args.output
    return str(Path(args.input).with_suffix(".txt"))


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, configure logging, and run the pipeline."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Logging must be configured before any logger calls
    _configure_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        parser.error(f"Input file not found: {input_path}")

    output_path = _resolve_output_path(args)
    if Path(output_path).resolve() == input_path.resolve():
        parser.error("Output path must differ from the input path.")

    config = TranscriptionConfig(
        start_marker=args.start_marker,
        end_markers=tuple(args.end_marker or _DEFAULT_END_MARKERS),
        margins=Margins(*args.margins) if args.margins else Margins(),
        line_breaks=args.line_breaks,
        debug_layout_dir=args.debug_layout,
        disable_tqdm=args.no_progress or args.verbose == 0,
    )

    # Log run header
    logger.info("PDF Transcriber")
    logger.info("  Input:   %s", input_path)
    logger.info("  Output:  %s", output_path)
    logger.info(
        "  Markers: %r → %s",
        config.start_marker,
        ", ".join(repr(m) for m in config.end_markers),
    )
    m = config.margins
    logger.info(
        "  Margins: left=%g right=%g top=%g bottom=%g", m.left, m.right, m.top, m.bottom
    )

    pipeline = TranscriptionPipeline(config)
    try:
        pipeline.transcribe(str(input_path), output_path)
    except (DocumentOpenError, TranscriptionError) as e:
        logger.error("Error extracting text from PDF: %s", e)
        return 1
    except Exception as e:
        logger.error("Error extracting text from PDF: %s", e)
        logger.debug("Unexpected failure", exc_info=True)
        return 1

    logger.info("Text extracted and saved to: %s", output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
