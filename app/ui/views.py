#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Jinja2 UI views (server-rendered HTML pages)
============================================
GET  /                      — note cards, search box, pager
POST /notes                 — create a note
POST /notes/{id}/edit       — save edits
POST /notes/{id}/delete     — delete a note

Every POST redirects back to the list (303) with a one-shot status message
carried in a short-lived cookie.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote, urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.schemas import EXPORT_FORMATS, NoteCreate, NoteUpdate
from app.services import notes as note_svc


# -----------------------------------------------------------------------------

router = APIRouter(tags=["ui"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

_FLASH_COOKIE = "flash"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _ctx(**extra) -> dict:
    """Base template context (request passed separately as first arg to TemplateResponse)."""
    settings = get_settings()
    return {
        "site_name": settings.site_name,
        "app_version": settings.app_version,
        **extra,
    }


def _redirect_home(kind: str, message: str) -> RedirectResponse:
    resp = RedirectResponse(url="/", status_code=303)
    resp.set_cookie(_FLASH_COOKIE, quote(f"{kind}|{message}"), max_age=60, samesite="lax")
    return resp


def _read_flash(request: Request) -> dict | None:
    raw = request.cookies.get(_FLASH_COOKIE)
    if not raw:
        return None
    kind, _, message = unquote(raw).partition("|")
    if kind not in ("ok", "err") or not message:
        return None
    return {"type": kind, "msg": message}


def _validation_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    return errors[0].get("msg", "Invalid input.").removeprefix("Value error, ")


def _page_link(q: str, page: int) -> str:
    return "?" + urlencode({"q": q, "page": page})


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# List / search
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    q: Optional[str] = None,
    page: int = 1,
    db: AsyncSession = Depends(get_db),
):
    result = await note_svc.list_notes(db, q=q, page=page)
    cards = [
        {"note": n, "html": note_svc.rendered_html(n)}
        for n in result.items
    ]
    resp = templates.TemplateResponse(
        request,
        "index.html",
        _ctx(cards=cards,
             q=result.q,
             page=result.page,
             has_next=result.has_next,
             has_prev=result.has_prev,
             prev_url=_page_link(result.q, result.page - 1),
             next_url=_page_link(result.q, result.page + 1),
             export_formats=EXPORT_FORMATS,
             flash=_read_flash(request)),
    )
    resp.delete_cookie(_FLASH_COOKIE)
    return resp


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Create / edit / delete
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/notes", response_class=HTMLResponse)
async def create_note_submit(
    content: str     = Form(default=""),
    db: AsyncSession = Depends(get_db),
):
    try:
        data = NoteCreate(content=content)
    except ValidationError as e:
        return _redirect_home("err", _validation_message(e))
    await note_svc.create_note(db, data)
    return _redirect_home("ok", "Note created")


# -----------------------------------------------------------------------------

@router.post("/notes/{note_id}/edit", response_class=HTMLResponse)
async def edit_note_submit(
    note_id: int,
    content: str     = Form(default=""),
    db: AsyncSession = Depends(get_db),
):
    try:
        data = NoteUpdate(content=content)
    except ValidationError as e:
        return _redirect_home("err", _validation_message(e))
    try:
        await note_svc.update_note(db, note_id, data)
    except HTTPException as e:
        return _redirect_home("err", e.detail)
    return _redirect_home("ok", f"Note #{note_id} updated")


# -----------------------------------------------------------------------------

@router.post("/notes/{note_id}/delete", response_class=HTMLResponse)
async def delete_note_submit(
    note_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        await note_svc.delete_note(db, note_id)
    except HTTPException as e:
        return _redirect_home("err", e.detail)
    return _redirect_home("ok", f"Note #{note_id} deleted")


# -----------------------------------------------------------------------------
