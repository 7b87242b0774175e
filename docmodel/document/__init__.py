from .pdf_reader import DocumentOpenError, PDFDocument, open_pdf

__all__ = ["DocumentOpenError", "PDFDocument", "open_pdf"]
