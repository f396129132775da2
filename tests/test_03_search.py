#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for note listing, substring search and pagination."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from app.schemas import NoteCreate
from app.services import notes as note_svc
from tests.conftest import create_note


# ── Listing ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_empty_list(client):
    resp = await client.get("/api/v1/notes")
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["page"] == 1
    assert data["per_page"] == 9
    assert data["has_next"] is False
    assert data["has_prev"] is False


@pytest.mark.asyncio
async def test_list_is_newest_first(client):
    ids = [(await create_note(client, f"note {i}"))["id"] for i in range(3)]
    data = (await client.get("/api/v1/notes")).json()
    assert [n["id"] for n in data["items"]] == list(reversed(ids))


@pytest.mark.asyncio
async def test_list_without_render(client):
    await create_note(client, "**x**")
    data = (await client.get("/api/v1/notes?render=false")).json()
    assert data["items"][0]["rendered"] is None


# ── Pagination ────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_pagination_next_and_prev(client):
    for i in range(10):
        await create_note(client, f"note {i}")

    first = (await client.get("/api/v1/notes?page=1")).json()
    assert len(first["items"]) == 9
    assert first["has_next"] is True
    assert first["has_prev"] is False

    second = (await client.get("/api/v1/notes?page=2")).json()
    assert len(second["items"]) == 1
    assert second["items"][0]["content"] == "note 0"
    assert second["has_next"] is False
    assert second["has_prev"] is True


@pytest.mark.asyncio
async def test_exactly_one_full_page_has_no_next(client):
    for i in range(9):
        await create_note(client, f"note {i}")
    data = (await client.get("/api/v1/notes")).json()
    assert len(data["items"]) == 9
    assert data["has_next"] is False


@pytest.mark.asyncio
async def test_custom_page_size(client):
    for i in range(3):
        await create_note(client, f"note {i}")
    data = (await client.get("/api/v1/notes?per_page=2")).json()
    assert data["per_page"] == 2
    assert len(data["items"]) == 2
    assert data["has_next"] is True


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(client):
    await create_note(client)
    data = (await client.get("/api/v1/notes?page=5")).json()
    assert data["items"] == []
    assert data["has_prev"] is True
    assert data["has_next"] is False


@pytest.mark.asyncio
async def test_page_zero_is_rejected_by_api(client):
    resp = await client.get("/api/v1/notes?page=0")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_service_clamps_page_to_one(db_session):
    await note_svc.create_note(db_session, NoteCreate(content="only"))
    await db_session.commit()
    result = await note_svc.list_notes(db_session, page=-3)
    assert result.page == 1
    assert [n.content for n in result.items] == ["only"]


# ── Search ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(client):
    await create_note(client, "Buy MILK and eggs")
    await create_note(client, "Call the plumber")
    data = (await client.get("/api/v1/notes?q=milk")).json()
    assert data["q"] == "milk"
    assert [n["content"] for n in data["items"]] == ["Buy MILK and eggs"]


@pytest.mark.asyncio
async def test_search_query_is_trimmed(client):
    await create_note(client, "alpha")
    data = (await client.get("/api/v1/notes", params={"q": "  alpha  "})).json()
    assert data["q"] == "alpha"
    assert len(data["items"]) == 1


@pytest.mark.asyncio
async def test_blank_search_lists_everything(client):
    await create_note(client, "one")
    await create_note(client, "two")
    data = (await client.get("/api/v1/notes", params={"q": "   "})).json()
    assert data["q"] == ""
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(client):
    await create_note(client, "progress: 100% done")
    await create_note(client, "progress: 100 items")
    await create_note(client, "snake_case name")
    await create_note(client, "snakeXcase name")

    pct = (await client.get("/api/v1/notes", params={"q": "100%"})).json()
    assert [n["content"] for n in pct["items"]] == ["progress: 100% done"]

    under = (await client.get("/api/v1/notes", params={"q": "snake_case"})).json()
    assert [n["content"] for n in under["items"]] == ["snake_case name"]


@pytest.mark.asyncio
async def test_search_with_pagination(client):
    for i in range(11):
        await create_note(client, f"match {i}")
    await create_note(client, "other")
    first = (await client.get("/api/v1/notes", params={"q": "match"})).json()
    assert len(first["items"]) == 9
    assert first["has_next"] is True
    second = (await client.get("/api/v1/notes", params={"q": "match", "page": 2})).json()
    assert len(second["items"]) == 2
    assert all("match" in n["content"] for n in second["items"])


# -----------------------------------------------------------------------------
