#!/usr/bin/env python
#
#
# ----------------------------------------------------------------------------
"""
ORM Models for PyNotes
======================

Tables
------
notes   — one row per note; Markdown source plus a cached HTML render

Primary keys are auto-incrementing integers.  Timestamps stored in UTC.
"""
# ----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


# ----------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# notes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Note(Base):
    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_created_at", "created_at"),
    )

    id:         Mapped[int]        = mapped_column(Integer, primary_key=True, autoincrement=True)
    content:    Mapped[str]        = mapped_column(Text, nullable=False)
    # Cached rendered HTML, prefixed with the renderer version stamp (cleared on save)
    rendered:   Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def filename_base(self) -> str:
        return f"note-{self.id}"
