"""DOCX text extraction using python-docx."""

from __future__ import annotations

import io


def extract_docx(data: bytes) -> str:
    """Return paragraph text followed by table rows."""
    from docx import Document

    doc = Document(io.BytesIO(data))
    parts = [para.text.strip() for para in doc.paragraphs if para.text.strip()]

    for table in doc.tables:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(" | ".join(cells))
        if rows:
            parts.append("\n".join(rows))
    return "\n\n".join(parts)
