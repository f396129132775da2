#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Export router
=============
GET /api/v1/notes/{id}/export?format=pdf|html|md|txt   — download one note
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.services import notes as note_svc
from app.services.export import export_note


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/notes", tags=["export"])


# -----------------------------------------------------------------------------

@router.get("/{note_id}/export")
async def export(
    note_id: int,
    format: str      = Query(default="pdf", max_length=16),
    db: AsyncSession = Depends(get_db),
):
    note = await note_svc.get_note(db, note_id)
    result = export_note(note, format)
    return Response(
        content=result.body,
        media_type=result.media_type,
        headers={"Content-Disposition": result.content_disposition},
    )


# -----------------------------------------------------------------------------
