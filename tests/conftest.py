import pytest

from tests.fakes import book_pages, build_pdf


@pytest.fixture
def book_pdf(tmp_path):
    """Ten-page book: Introduction on page 2, Conclusion on page 8."""
    return build_pdf(tmp_path / "book.pdf", book_pages())
