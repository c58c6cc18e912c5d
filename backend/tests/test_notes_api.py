"""
Notes API — HTTP Endpoint Tests
================================

What:  End-to-end tests of /api/notes through the full middleware, routing
       and error handling stack.
How:   HTTPX AsyncClient over ASGITransport, backed by an in-memory SQLite
       note store per test.

What we test:
    ✅ Create → read back round trip
    ✅ "content missing" and store validation errors (400)
    ✅ Malformed id (400) vs well-formed absent id (404, empty body)
    ✅ Update changes only content/important
    ✅ Idempotent delete (204, 204)
    ✅ Unclassified failures normalized to 500
    ✅ A failed commit answers 500 and stores nothing
    ✅ Trailing slash on the collection path
"""

import re
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import DatabaseError
from notes_api.services.note_service import note_service

ABSENT_ID = "000000000000000000000000"
OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")


def parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create(client, content="HTML is easy", **extra):
    response = await client.post("/api/notes", json={"content": content, **extra})
    assert response.status_code == 200, response.text
    return response.json()


class TestListNotes:

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_array(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_lists_created_notes(self, test_client):
        first = await create(test_client, "Browser can execute only JavaScript")
        second = await create(test_client, "GET and POST are the most important methods")

        response = await test_client.get("/api/notes")

        ids = {note["id"] for note in response.json()}
        assert ids == {first["id"], second["id"]}

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client):
        with patch.object(note_service, "find_all", AsyncMock(side_effect=DatabaseError())):
            response = await test_client.get("/api/notes")

        assert response.status_code == 500
        assert response.json() == {"error": "internal server error"}

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_500(self, test_client):
        with patch.object(note_service, "find_all", AsyncMock(side_effect=RuntimeError("boom"))):
            response = await test_client.get("/api/notes")

        assert response.status_code == 500
        assert response.json() == {"error": "internal server error"}

    @pytest.mark.asyncio
    async def test_trailing_slash_lists_notes(self, test_client):
        created = await create(test_client, "slash at the end")

        response = await test_client.get("/api/notes/")

        assert response.status_code == 200
        assert [note["id"] for note in response.json()] == [created["id"]]


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_200_with_api_representation(self, test_client):
        before = datetime.now(timezone.utc)
        response = await test_client.post(
            "/api/notes", json={"content": "HTML is easy", "important": True}
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "content", "important", "date"}
        assert OBJECT_ID_RE.match(body["id"])
        assert body["content"] == "HTML is easy"
        assert body["important"] is True
        assert parse_date(body["date"]) >= before - timedelta(seconds=1)

    @pytest.mark.asyncio
    async def test_created_note_reads_back(self, test_client):
        created = await create(test_client, "Notes survive a round trip", important=True)

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        fetched = response.json()
        assert fetched["content"] == created["content"]
        assert fetched["important"] is True
        delta = datetime.now(timezone.utc) - parse_date(fetched["date"])
        assert abs(delta) < timedelta(seconds=10)

    @pytest.mark.asyncio
    async def test_important_defaults_to_false(self, test_client):
        created = await create(test_client, "no flag given")

        assert created["important"] is False

    @pytest.mark.asyncio
    async def test_explicit_false_and_null_important_are_false(self, test_client):
        # Falsy values fall through to the default: false and null look the same
        explicit = await create(test_client, "explicit false", important=False)
        null = await create(test_client, "explicit null", important=None)

        assert explicit["important"] is False
        assert null["important"] is False

    @pytest.mark.asyncio
    async def test_client_date_is_ignored(self, test_client):
        created = await create(test_client, "date from client", date="2000-01-01T00:00:00Z")

        assert parse_date(created["date"]).year != 2000

    @pytest.mark.asyncio
    async def test_content_missing(self, test_client):
        response = await test_client.post("/api/notes", json={"important": True})

        assert response.status_code == 400
        assert response.json() == {"error": "content missing"}

    @pytest.mark.asyncio
    async def test_empty_content_is_missing(self, test_client):
        response = await test_client.post("/api/notes", json={"content": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "content missing"}

    @pytest.mark.asyncio
    async def test_no_body_is_content_missing(self, test_client):
        response = await test_client.post("/api/notes")

        assert response.status_code == 400
        assert response.json() == {"error": "content missing"}

    @pytest.mark.asyncio
    async def test_rejected_create_does_not_store(self, test_client):
        await create(test_client, "already here")

        await test_client.post("/api/notes", json={"important": True})
        await test_client.post("/api/notes", json={"content": "abc"})

        response = await test_client.get("/api/notes")
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_short_content_returns_store_validation_message(self, test_client):
        response = await test_client.post("/api/notes", json={"content": "abc"})

        assert response.status_code == 400
        assert response.json() == {
            "error": (
                "Note validation failed: content: Path `content` (`abc`) is shorter "
                "than the minimum allowed length (5)."
            )
        }

    @pytest.mark.asyncio
    async def test_wrong_content_type_is_400(self, test_client):
        response = await test_client.post("/api/notes", json={"content": 12345})

        assert response.status_code == 400
        assert response.json()["error"].startswith("content:")

    @pytest.mark.asyncio
    async def test_invalid_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_trailing_slash_creates_note(self, test_client):
        response = await test_client.post("/api/notes/", json={"content": "posted with a slash"})

        assert response.status_code == 200
        assert response.json()["content"] == "posted with a slash"

    @pytest.mark.asyncio
    async def test_failed_commit_is_500_and_stores_nothing(self, test_client):
        commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))

        with patch.object(AsyncSession, "commit", commit):
            response = await test_client.post("/api/notes", json={"content": "never committed"})

        assert response.status_code == 500
        assert response.json() == {"error": "internal server error"}
        commit.assert_awaited()
        assert (await test_client.get("/api/notes")).json() == []


class TestGetNote:

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, test_client):
        response = await test_client.get("/api/notes/not-a-valid-id")

        assert response.status_code == 400
        assert response.json() == {"error": "malformatted id"}

    @pytest.mark.asyncio
    async def test_absent_id_is_404_with_empty_body(self, test_client):
        response = await test_client.get(f"/api/notes/{ABSENT_ID}")

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_uppercase_id_finds_note(self, test_client):
        created = await create(test_client, "case of the id")

        response = await test_client.get(f"/api/notes/{created['id'].upper()}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_changes_content_and_important_only(self, test_client):
        created = await create(test_client, "original content", important=False)
        before = (await test_client.get(f"/api/notes/{created['id']}")).json()

        response = await test_client.put(
            f"/api/notes/{created['id']}",
            json={"content": "updated content", "important": True, "date": "2000-01-01T00:00:00Z"},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == before["id"]
        assert updated["date"] == before["date"]
        assert updated["content"] == "updated content"
        assert updated["important"] is True

        after = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert after == updated

    @pytest.mark.asyncio
    async def test_toggle_important_keeps_content(self, test_client):
        created = await create(test_client, "toggle me please")

        response = await test_client.put(f"/api/notes/{created['id']}", json={"important": True})

        assert response.status_code == 200
        assert response.json()["content"] == "toggle me please"
        assert response.json()["important"] is True

    @pytest.mark.asyncio
    async def test_update_absent_note_is_404(self, test_client):
        response = await test_client.put(
            f"/api/notes/{ABSENT_ID}", json={"content": "does not matter"}
        )

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_update_malformed_id_is_400(self, test_client):
        response = await test_client.put("/api/notes/xyz", json={"content": "valid content"})

        assert response.status_code == 400
        assert response.json() == {"error": "malformatted id"}

    @pytest.mark.asyncio
    async def test_update_with_short_content_is_400_and_keeps_note(self, test_client):
        created = await create(test_client, "long enough")

        response = await test_client.put(f"/api/notes/{created['id']}", json={"content": "abc"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Validation failed: content:")
        stored = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert stored["content"] == "long enough"

    @pytest.mark.asyncio
    async def test_failed_commit_is_500_and_keeps_note(self, test_client):
        created = await create(test_client, "committed content")
        commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))

        with patch.object(AsyncSession, "commit", commit):
            response = await test_client.put(
                f"/api/notes/{created['id']}", json={"content": "lost update"}
            )

        assert response.status_code == 500
        stored = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert stored["content"] == "committed content"


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, test_client):
        created = await create(test_client, "delete me twice")
        await create(test_client, "keep me around")

        first = await test_client.delete(f"/api/notes/{created['id']}")
        second = await test_client.delete(f"/api/notes/{created['id']}")

        assert first.status_code == 204
        assert second.status_code == 204
        assert first.content == b""
        remaining = (await test_client.get("/api/notes")).json()
        assert [note["content"] for note in remaining] == ["keep me around"]

    @pytest.mark.asyncio
    async def test_delete_absent_id_is_204(self, test_client):
        response = await test_client.delete(f"/api/notes/{ABSENT_ID}")

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_delete_malformed_id_is_400(self, test_client):
        response = await test_client.delete("/api/notes/12345")

        assert response.status_code == 400
        assert response.json() == {"error": "malformatted id"}

    @pytest.mark.asyncio
    async def test_failed_commit_is_500_and_keeps_note(self, test_client):
        created = await create(test_client, "still here afterwards")
        commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))

        with patch.object(AsyncSession, "commit", commit):
            response = await test_client.delete(f"/api/notes/{created['id']}")

        assert response.status_code == 500
        assert (await test_client.get(f"/api/notes/{created['id']}")).status_code == 200


class TestRequestId:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/notes")

        assert len(response.headers["X-Request-ID"]) == 8
