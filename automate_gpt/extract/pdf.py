"""PDF text extraction using PyMuPDF."""

from __future__ import annotations


def extract_pdf(data: bytes) -> str:
    """Return the text of every page, separated by blank lines."""
    import fitz  # pymupdf

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        pages = [page.get_text() for page in doc]
    finally:
        doc.close()
    return "\n\n".join(p.strip() for p in pages if p.strip())
