#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# -----------------------------------------------------------------------------

# Upper bound enforced on note bodies (characters).
MAX_NOTE_LENGTH = 1_000_000

EXPORT_FORMATS = ("pdf", "html", "md", "txt")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Shared
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OKResponse(BaseModel):
    ok: bool = True
    message: str = "success"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Notes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NoteCreate(BaseModel):
    content: str = Field(..., max_length=MAX_NOTE_LENGTH)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Note content is required.")
        return v


# -----------------------------------------------------------------------------

class NoteUpdate(NoteCreate):
    pass


# -----------------------------------------------------------------------------

class NoteResponse(BaseModel):
    id: int
    content: str
    rendered: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# -----------------------------------------------------------------------------

class NoteListResponse(BaseModel):
    items: list[NoteResponse]
    q: str = ""
    page: int
    per_page: int
    has_next: bool
    has_prev: bool


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render preview
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderResponse(BaseModel):
    html: str
