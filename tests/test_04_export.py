#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for single-note export (md / txt / html / pdf)."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys

import pytest

from app.services import export as export_svc
from tests.conftest import create_note


# ── Markdown / text ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_export_markdown(client):
    note = await create_note(client, "# Title\n\n<b>raw</b>")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=md")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/markdown")
    assert resp.headers["content-disposition"] == f'attachment; filename="note-{note["id"]}.md"'
    assert resp.text == "# Title\n\n<b>raw</b>"


@pytest.mark.asyncio
async def test_export_markdown_alias(client):
    note = await create_note(client, "x")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=markdown")
    assert resp.status_code == 200
    assert resp.headers["content-disposition"].endswith('.md"')


@pytest.mark.asyncio
async def test_export_text(client):
    note = await create_note(client, "plain *text*")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=txt")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.headers["content-disposition"] == f'attachment; filename="note-{note["id"]}.txt"'
    assert resp.text == "plain *text*"


@pytest.mark.asyncio
async def test_export_format_is_case_insensitive(client):
    note = await create_note(client, "x")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=TXT")
    assert resp.status_code == 200


# ── HTML ──────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_export_html_document(client):
    note = await create_note(client, "## Heading\n\n<script>x</script>")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=html")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert resp.headers["content-disposition"] == f'attachment; filename="note-{note["id"]}.html"'
    body = resp.text
    assert body.startswith("<!doctype html>")
    assert f"<title>note-{note['id']}</title>" in body
    assert '<article class="print-note">' in body
    assert "<h2>Heading</h2>" in body
    assert "<script>" not in body
    assert "@page" in body


# ── PDF ───────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_export_pdf(client, monkeypatch):
    captured = {}

    def fake_pdf(document: str) -> bytes:
        captured["document"] = document
        return b"%PDF-1.7 fake"

    monkeypatch.setattr(export_svc, "_html_to_pdf", fake_pdf)
    note = await create_note(client, "**pdf**")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=pdf")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["content-disposition"] == f'attachment; filename="note-{note["id"]}.pdf"'
    assert resp.content == b"%PDF-1.7 fake"
    assert "<strong>pdf</strong>" in captured["document"]


@pytest.mark.asyncio
async def test_export_defaults_to_pdf(client, monkeypatch):
    monkeypatch.setattr(export_svc, "_html_to_pdf", lambda document: b"%PDF")
    note = await create_note(client, "x")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"


@pytest.mark.asyncio
async def test_export_pdf_without_weasyprint_is_501(client, monkeypatch):
    monkeypatch.setitem(sys.modules, "weasyprint", None)
    note = await create_note(client, "x")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=pdf")
    assert resp.status_code == 501
    assert "WeasyPrint" in resp.json()["detail"]


# ── Errors ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_export_unknown_format_is_400(client):
    note = await create_note(client, "x")
    resp = await client.get(f"/api/v1/notes/{note['id']}/export?format=docx")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unsupported format. Use one of: pdf, html, md, txt"


@pytest.mark.asyncio
async def test_export_missing_note_is_404(client):
    resp = await client.get("/api/v1/notes/777/export?format=md")
    assert resp.status_code == 404


# -----------------------------------------------------------------------------
