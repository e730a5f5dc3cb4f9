"""Render PDF books into page images and pull text out of single pages, using PyMuPDF."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pymupdf

from scholarverse.errors import NotFoundError, ValidationError

from .discovery import PAGE_EXTENSION

log = logging.getLogger(__name__)


def render_pdf_pages(pdf_path: Path, out_dir: Path, zoom: float = 2.0) -> int:
    """Write every page of ``pdf_path`` to ``out_dir/{n}.jpg`` (1-based)."""
    if not pdf_path.is_file():
        raise NotFoundError(f"PDF not found: {pdf_path}", path=str(pdf_path))
    out_dir.mkdir(parents=True, exist_ok=True)
    doc = pymupdf.open(str(pdf_path))
    try:
        matrix = pymupdf.Matrix(zoom, zoom)
        for index, page in enumerate(doc, start=1):
            pix = page.get_pixmap(matrix=matrix)
            pix.save(str(out_dir / f"{index}{PAGE_EXTENSION}"))
        count = len(doc)
    finally:
        doc.close()
    log.info("Rendered %d pages from %s into %s", count, pdf_path, out_dir)
    return count


def extract_page_text(pdf_path: Path, page: int) -> str:
    if not pdf_path.is_file():
        raise NotFoundError(f"PDF not found: {pdf_path}", path=str(pdf_path))
    doc = pymupdf.open(str(pdf_path))
    try:
        if page < 1 or page > len(doc):
            raise ValidationError(f"Page {page} out of range 1-{len(doc)}")
        blocks = doc[page - 1].get_text("blocks")
    finally:
        doc.close()

    parts: list[str] = []
    for block in sorted(blocks, key=lambda b: b[1]):
        # block: (x0, y0, x1, y1, text, block_no, block_type)
        if block[6] != 0:  # skip image blocks
            continue
        cleaned = re.sub(r"\s+", " ", block[4]).strip()
        if cleaned:
            parts.append(cleaned)
    return "\n".join(parts)
