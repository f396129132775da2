#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Note service
============
Create / read / update / delete, substring search and pagination for notes.

Rendered HTML is cached on the row (``notes.rendered``) stamped with the
renderer version; saving a note clears the cache.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models import Note
from app.schemas import NoteCreate, NoteUpdate
from app.services.renderer import is_cache_valid, render, stamp, unstamp


# -----------------------------------------------------------------------------

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

@dataclass
class NotePage:
    """One page of a (possibly filtered) note listing."""
    items:    list[Note]
    q:        str
    page:     int
    per_page: int
    has_next: bool
    has_prev: bool


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally (escape char: backslash)."""
    return text.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")


def rendered_html(note: Note) -> str:
    """Return the note's HTML, re-rendering and caching it when stale."""
    if is_cache_valid(note.rendered):
        return unstamp(note.rendered)
    fragment = render(note.content)
    note.rendered = stamp(fragment)
    return fragment


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CRUD
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def create_note(db: AsyncSession, data: NoteCreate) -> Note:
    note = Note(content=data.content)
    db.add(note)
    await db.flush()
    await db.refresh(note)
    log.info("Note #%d created (%d chars)", note.id, len(note.content))
    return note


# -----------------------------------------------------------------------------

async def get_note(db: AsyncSession, note_id: int) -> Note:
    note = await db.get(Note, note_id)
    if not note:
        raise HTTPException(status_code=404, detail=f"Note #{note_id} not found")
    return note


# -----------------------------------------------------------------------------

async def update_note(db: AsyncSession, note_id: int, data: NoteUpdate) -> Note:
    note = await get_note(db, note_id)
    note.content  = data.content
    note.rendered = None   # invalidate cache
    await db.flush()
    await db.refresh(note)
    log.info("Note #%d updated", note_id)
    return note


# -----------------------------------------------------------------------------

async def delete_note(db: AsyncSession, note_id: int) -> None:
    note = await get_note(db, note_id)
    await db.delete(note)
    await db.flush()
    log.info("Note #%d deleted", note_id)


# -----------------------------------------------------------------------------

async def list_notes(
    db: AsyncSession,
    q: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> NotePage:
    """Newest-first listing, optionally filtered by a content substring.

    One extra row is fetched to find out whether a next page exists.
    """
    per_page = per_page or get_settings().notes_per_page
    page     = max(1, page)
    q        = (q or "").strip()

    stmt = (
        select(Note)
        .order_by(Note.created_at.desc(), Note.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page + 1)
    )
    if q:
        stmt = stmt.where(Note.content.ilike(f"%{_escape_like(q)}%", escape="\\"))

    result = await db.execute(stmt)
    rows = list(result.scalars().all())

    has_next = len(rows) > per_page
    if has_next:
        rows.pop()

    return NotePage(
        items=rows,
        q=q,
        page=page,
        per_page=per_page,
        has_next=has_next,
        has_prev=page > 1,
    )


# -----------------------------------------------------------------------------
