#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Note export
===========
Packages a single note for download:

  md / markdown : raw source
  txt           : raw source as plain text
  html          : standalone document (print stylesheet inlined)
  pdf           : the same document converted with WeasyPrint (optional)

The HTML body is the renderer's fragment, embedded verbatim.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.models import Note
from app.schemas import EXPORT_FORMATS
from app.services.notes import rendered_html


# -----------------------------------------------------------------------------

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@dataclass
class ExportResult:
    body:       str | bytes
    media_type: str
    filename:   str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


# -----------------------------------------------------------------------------
# Document shell
# -----------------------------------------------------------------------------

@lru_cache(maxsize=4)
def _read_stylesheet(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        log.warning("Export stylesheet %s not readable; exporting unstyled", path)
        return ""


def _format_timestamp(note: Note) -> str:
    return note.created_at.strftime("%Y-%m-%d %H:%M:%S") if note.created_at else ""


def build_document(note: Note) -> str:
    """Wrap the rendered note in a complete, self-contained HTML document."""
    settings = get_settings()
    css   = _read_stylesheet(Path(settings.export_stylesheet))
    title = html.escape(note.filename_base)
    meta  = html.escape(_format_timestamp(note))
    return (
        '<!doctype html><html><head><meta charset="utf-8">'
        f'<title>{title}</title>'
        f'<style>{css}</style>'
        '</head><body><article class="print-note">'
        f'<div class="meta">{meta}</div>'
        f'{rendered_html(note)}'
        '</article></body></html>'
    )


# -----------------------------------------------------------------------------
# PDF
# -----------------------------------------------------------------------------

def _html_to_pdf(document: str) -> bytes:
    try:
        from weasyprint import HTML
    except ImportError:
        log.warning("PDF export requested but weasyprint is not installed")
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="PDF export requires WeasyPrint. Install with: pip install 'pynotes[pdf]'",
        )
    # A4 portrait comes from the @page rule in the print stylesheet.
    return HTML(string=document).write_pdf()


# -----------------------------------------------------------------------------
# Public entry point
# -----------------------------------------------------------------------------

def export_note(note: Note, fmt: str = "pdf") -> ExportResult:
    """Return the body, media type and download filename for *note* in *fmt*."""
    fmt  = (fmt or "pdf").strip().lower()
    base = note.filename_base

    if fmt in ("md", "markdown"):
        result = ExportResult(note.content, "text/markdown; charset=utf-8", f"{base}.md")
    elif fmt == "txt":
        result = ExportResult(note.content, "text/plain; charset=utf-8", f"{base}.txt")
    elif fmt == "html":
        result = ExportResult(build_document(note), "text/html; charset=utf-8", f"{base}.html")
    elif fmt == "pdf":
        result = ExportResult(_html_to_pdf(build_document(note)), "application/pdf", f"{base}.pdf")
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported format. Use one of: {', '.join(EXPORT_FORMATS)}",
        )

    log.info("Note #%d exported as %s", note.id, fmt)
    return result


# -----------------------------------------------------------------------------
