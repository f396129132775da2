#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint — live preview for the editor.

GET /api/v1/render?content=...
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Query

from app.schemas import MAX_NOTE_LENGTH, RenderResponse
from app.services.renderer import render


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

@router.get("", response_model=RenderResponse)
async def render_preview(
    content: str = Query(default="", max_length=MAX_NOTE_LENGTH),
):
    """Return rendered HTML for a snippet of Markdown — used by the editor preview."""
    return {"html": render(content)}


# -----------------------------------------------------------------------------
