"""Tests for the document assembler and the end-to-end pipeline."""

import pytest

from docmodel.geometry import Margins, Rectangle
from docmodel.page.page_model import PageModel
from tests.fakes import FakeDocument, FakePage, book_pages, build_pdf, text_event
from transcription.errors import (
    BoundaryNotFoundError,
    DocumentOpenError,
    InvalidMarginsError,
    OutputWriteError,
    PageDecodeError,
)
from transcription.pipeline import (
    TranscriptionConfig,
    TranscriptionPipeline,
    assemble_text,
    keep_rectangle,
    write_text,
)

QUIET = dict(disable_tqdm=True)
EXPECTED_BOOK_TEXT = "".join(f"Page {n} body\n" for n in range(2, 9))


def fake_book(page_count=10, intro=2, conclusion=8):
    """Fake document with the same layout as :func:`tests.fakes.book_pages`."""
    pages = []
    for n in range(1, page_count + 1):
        marker = ""
        if n == intro:
            marker = "Introduction"
        elif n == conclusion:
            marker = "Conclusion"
        events = [
            text_event(100, 750, "HEADER"),
            text_event(100, 392, f"Page {n} body"),
        ]
        if marker:
            events.append(text_event(100, 22, marker))
        pages.append(FakePage(n, events))
    return FakeDocument(pages)


# ------------------------------------------------------------------
# Assembler
# ------------------------------------------------------------------


def test_assemble_text_end_to_end():
    text = assemble_text(fake_book(), TranscriptionConfig(**QUIET))
    assert text == EXPECTED_BOOK_TEXT
    assert "HEADER" not in text


def test_assemble_text_covers_window_inclusively():
    doc = fake_book(page_count=12, intro=3, conclusion=9)
    text = assemble_text(doc, TranscriptionConfig(**QUIET))
    assert text.splitlines() == [f"Page {n} body" for n in range(3, 10)]


def test_assemble_text_uses_configured_markers_and_separator():
    doc = FakeDocument(
        [
            FakePage(1, [text_event(100, 400, "Prologue")]),
            FakePage(2, [text_event(100, 400, "middle")]),
            FakePage(3, [text_event(100, 400, "Afterword")]),
        ]
    )
    config = TranscriptionConfig(
        start_marker="Prologue",
        end_markers=("Afterword",),
        page_separator="\f",
        **QUIET,
    )
    assert assemble_text(doc, config) == "Prologue\fmiddle\fAfterword\f"


def test_assemble_text_fails_closed_without_start_marker():
    doc = fake_book(intro=None)
    with pytest.raises(BoundaryNotFoundError):
        assemble_text(doc, TranscriptionConfig(**QUIET))
    # No page was filtered.
    assert all(doc.page(n).passes == 0 for n in range(1, 11))


def test_keep_rectangle_rejects_oversized_margins():
    page = FakePage(3, bounding_box=Rectangle(0, 0, 100, 100))
    with pytest.raises(InvalidMarginsError, match="page 3"):
        keep_rectangle(page, Margins())


def test_keep_rectangle_follows_each_page_box():
    small = FakePage(1, bounding_box=Rectangle(0, 0, 300, 400))
    assert keep_rectangle(small, Margins()) == Rectangle(50, 80, 200, 240)


# ------------------------------------------------------------------
# Pipeline on real PDFs
# ------------------------------------------------------------------


def test_extract_book(book_pdf):
    result = TranscriptionPipeline(TranscriptionConfig(**QUIET)).extract(book_pdf)
    assert result.text == EXPECTED_BOOK_TEXT
    assert (result.start_page, result.end_page) == (2, 8)
    assert result.total_pages == 10
    assert result.pages_processed == 7
    assert result.dropped_chars > 0
    assert result.output_path == ""


def test_extract_is_idempotent(book_pdf):
    pipeline = TranscriptionPipeline(TranscriptionConfig(**QUIET))
    assert pipeline.extract(book_pdf).text == pipeline.extract(book_pdf).text


def test_transcribe_writes_output(book_pdf, tmp_path):
    out = tmp_path / "book.txt"
    result = TranscriptionPipeline(TranscriptionConfig(**QUIET)).transcribe(
        book_pdf, str(out)
    )
    assert out.read_bytes() == EXPECTED_BOOK_TEXT.encode("utf-8")
    assert result.output_path == str(out)
    assert "pages 2–8 of 10" in result.summary()
    assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []


def test_transcribe_without_markers_writes_nothing(tmp_path):
    pdf = build_pdf(tmp_path / "plain.pdf", [[(100, 400, "nothing to see")]] * 3)
    out = tmp_path / "plain.txt"
    with pytest.raises(BoundaryNotFoundError):
        TranscriptionPipeline(TranscriptionConfig(**QUIET)).transcribe(pdf, str(out))
    assert not out.exists()


def test_transcribe_failure_keeps_existing_output(tmp_path):
    pdf = build_pdf(tmp_path / "plain.pdf", [[(100, 400, "Conclusion")]])
    out = tmp_path / "plain.txt"
    out.write_text("previous run")
    with pytest.raises(BoundaryNotFoundError):
        TranscriptionPipeline(TranscriptionConfig(**QUIET)).transcribe(pdf, str(out))
    assert out.read_text() == "previous run"


def test_extract_with_oversized_margins(book_pdf):
    config = TranscriptionConfig(margins=Margins(400, 400, 0, 0), **QUIET)
    with pytest.raises(InvalidMarginsError):
        TranscriptionPipeline(config).extract(book_pdf)


def test_extract_missing_file(tmp_path):
    with pytest.raises(DocumentOpenError):
        TranscriptionPipeline(TranscriptionConfig(**QUIET)).extract(
            str(tmp_path / "missing.pdf")
        )


def test_extract_saves_debug_layouts(book_pdf, tmp_path):
    debug_dir = tmp_path / "debug"
    config = TranscriptionConfig(debug_layout_dir=str(debug_dir), render_scale=0.5, **QUIET)
    TranscriptionPipeline(config).extract(book_pdf)
    names = sorted(p.name for p in debug_dir.iterdir())
    assert names == [f"page_{n:03d}.png" for n in range(2, 9)]


def test_extract_drops_margin_notes_and_splits_straddling_lines(tmp_path):
    pages = book_pages(page_count=3, intro=1, conclusion=3)
    pages[1] = [(100, 400, "Body"), (10, 500, "note"), (30, 300, "ABCDEFGHIJ")]
    pdf = build_pdf(tmp_path / "notes.pdf", pages)

    result = TranscriptionPipeline(TranscriptionConfig(**QUIET)).extract(pdf)
    page_two = result.pages[1].text

    assert page_two.startswith("Body")
    assert "note" not in page_two
    tail = page_two[len("Body"):]
    assert tail and tail != "ABCDEFGHIJ" and "ABCDEFGHIJ".endswith(tail)


def test_write_text_into_missing_directory(tmp_path):
    with pytest.raises(OutputWriteError):
        write_text(str(tmp_path / "nope" / "out.txt"), "text")
    assert not (tmp_path / "nope").exists()


def test_extract_window_unloads_each_page():
    doc = fake_book()
    assemble_text(doc, TranscriptionConfig(**QUIET))
    assert [doc.page(n).unloads for n in range(1, 11)] == [0] + [1] * 7 + [0, 0]


def test_decoder_failure_is_reported_as_page_error(monkeypatch):
    doc = fake_book()

    def broken_events():
        raise RuntimeError("broken content stream")

    monkeypatch.setattr(doc.page(5), "events", broken_events)
    with pytest.raises(PageDecodeError, match="page 5.*broken content stream"):
        assemble_text(doc, TranscriptionConfig(**QUIET))
    assert doc.page(5).unloads == 1


def test_decoder_failure_while_scanning(monkeypatch):
    doc = fake_book()

    def broken_text(index):
        raise ValueError("bad xref")

    monkeypatch.setattr(doc, "page_text", broken_text)
    with pytest.raises(PageDecodeError, match="page 1.*bad xref"):
        assemble_text(doc, TranscriptionConfig(**QUIET))


def test_debug_image_failure_is_reported(book_pdf, tmp_path, monkeypatch):
    def broken_render(self, scale=1.5):
        raise RuntimeError("cannot render")

    monkeypatch.setattr(PageModel, "render_to_image", broken_render)
    config = TranscriptionConfig(debug_layout_dir=str(tmp_path / "debug"), **QUIET)
    with pytest.raises(PageDecodeError, match="cannot render"):
        TranscriptionPipeline(config).extract(book_pdf)
