#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Notes router
============
GET    /api/v1/notes?q=&page=        — paginated list (newest first, optional search)
POST   /api/v1/notes                 — create note
GET    /api/v1/notes/{id}            — get note (rendered)
GET    /api/v1/notes/{id}/raw        — get raw Markdown source
PUT    /api/v1/notes/{id}            — replace note content
DELETE /api/v1/notes/{id}            — delete note
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import Note
from app.schemas import (
    NoteCreate, NoteListResponse, NoteResponse,
    NoteUpdate, OKResponse,
)
from app.services import notes as note_svc


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/notes", tags=["notes"])


# ── List / search ─────────────────────────────────────────────────────────────

@router.get("", response_model=NoteListResponse)
async def list_notes(
    q:        Optional[str] = Query(None, max_length=256, description="Substring to search for"),
    page:     int           = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=100),
    render_html: bool       = Query(True, alias="render"),
    db: AsyncSession        = Depends(get_db),
):
    result = await note_svc.list_notes(db, q=q, page=page, per_page=per_page)
    return {
        "items":    [_note_response(n, render_html) for n in result.items],
        "q":        result.q,
        "page":     result.page,
        "per_page": result.per_page,
        "has_next": result.has_next,
        "has_prev": result.has_prev,
    }


# ── Create ────────────────────────────────────────────────────────────────────

@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    data: NoteCreate,
    db: AsyncSession = Depends(get_db),
):
    note = await note_svc.create_note(db, data)
    return _note_response(note, True)


# ── Read ──────────────────────────────────────────────────────────────────────

@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: int,
    render_html: bool = Query(True, alias="render"),
    db: AsyncSession  = Depends(get_db),
):
    note = await note_svc.get_note(db, note_id)
    return _note_response(note, render_html)


# ── Raw source ────────────────────────────────────────────────────────────────

@router.get("/{note_id}/raw")
async def get_note_raw(
    note_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Return the raw Markdown source as plain text."""
    note = await note_svc.get_note(db, note_id)
    return Response(content=note.content, media_type="text/plain; charset=utf-8")


# ── Update ────────────────────────────────────────────────────────────────────

@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    db: AsyncSession = Depends(get_db),
):
    note = await note_svc.update_note(db, note_id, data)
    return _note_response(note, True)


# ── Delete ────────────────────────────────────────────────────────────────────

@router.delete("/{note_id}", response_model=OKResponse)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
):
    await note_svc.delete_note(db, note_id)
    return OKResponse(message=f"Note #{note_id} deleted")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Response builders
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _note_response(note: Note, render_html: bool) -> dict:
    return {
        "id":         note.id,
        "content":    note.content,
        "rendered":   note_svc.rendered_html(note) if render_html else None,
        "created_at": note.created_at,
        "updated_at": note.updated_at,
    }


# -----------------------------------------------------------------------------
