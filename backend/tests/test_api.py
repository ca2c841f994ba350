"""
JournalApp — API Integration Tests
====================================

What:  End-to-end tests of the HTTP API against a temporary SQLite database.
How:   httpx AsyncClient over ASGITransport (no server process).

What we test:
    ✅ Register / login / profile, duplicate accounts, bad credentials
    ✅ Journal CRUD with ownership scoping
    ✅ Partial update, search, streak
    ✅ Error envelope shape and status codes
    ✅ Health and welcome endpoints
"""

from datetime import date, timedelta

import pytest


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_root_welcome(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.json()["documentation"] == "/docs"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_request_id_echoed_when_safe(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "ios-7f3a"})
        assert response.headers["X-Request-ID"] == "ios-7f3a"

    @pytest.mark.asyncio
    async def test_request_id_replaced_when_unsafe(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "bad id; drop table"})
        rid = response.headers["X-Request-ID"]
        assert rid != "bad id; drop table"
        assert len(rid) == 12


class TestUsers:

    @pytest.mark.asyncio
    async def test_register_login_profile(self, test_client, register_user):
        registered = await register_user(test_client, username="ada", email="Ada@Example.com")
        assert registered["email"] == "ada@example.com"
        assert registered["token"]

        login = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": "secret123"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        profile = await test_client.get(
            "/api/users/profile", headers={"Authorization": f"Bearer {token}"}
        )
        assert profile.status_code == 200
        assert profile.json()["username"] == "ada"
        assert profile.json()["last_login_at"] is not None

    @pytest.mark.asyncio
    async def test_duplicate_account_rejected(self, test_client, register_user):
        await register_user(test_client)
        response = await test_client.post(
            "/api/users/register",
            json={"username": "other", "email": "writer@example.com", "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, register_user):
        await register_user(test_client)
        response = await test_client.post(
            "/api/users/login", json={"email": "writer@example.com", "password": "wrong-one"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "auth_error"


class TestJournalAuth:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/api/journal")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client):
        response = await test_client.get(
            "/api/journal", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
        body = response.json()
        assert body["message"] == "Session expired. Please log in again."
        assert "request_id" in body


class TestJournalCrud:

    @pytest.mark.asyncio
    async def test_create_defaults(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/journal", json={"title": "Morning pages"}, headers=auth_headers
        )
        assert response.status_code == 201
        body = response.json()
        assert body["content"] == ""
        assert body["date"] == date.today().isoformat()

    @pytest.mark.asyncio
    async def test_blank_title_is_validation_error(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/journal", json={"title": "  ", "content": "text"}, headers=auth_headers
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "title" in body["details"]["violations"]

    @pytest.mark.asyncio
    async def test_list_ordered_by_date_desc(self, test_client, auth_headers):
        for title, day in [("old", "2024-01-01"), ("new", "2024-03-01"), ("mid", "2024-02-01")]:
            await test_client.post(
                "/api/journal", json={"title": title, "date": day}, headers=auth_headers
            )

        response = await test_client.get("/api/journal", headers=auth_headers)

        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["new", "mid", "old"]
        assert response.headers["X-Total-Count"] == "3"

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, test_client, auth_headers):
        created = (
            await test_client.post(
                "/api/journal",
                json={"title": "Walk", "content": "Long one", "date": "2024-03-01"},
                headers=auth_headers,
            )
        ).json()

        response = await test_client.put(
            f"/api/journal/{created['id']}", json={"content": "Longer one"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Walk"
        assert body["content"] == "Longer one"
        assert body["date"] == "2024-03-01"

    @pytest.mark.asyncio
    async def test_delete_then_not_found(self, test_client, auth_headers):
        created = (
            await test_client.post("/api/journal", json={"title": "Gone"}, headers=auth_headers)
        ).json()

        deleted = await test_client.delete(f"/api/journal/{created['id']}", headers=auth_headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Entry removed"}

        missing = await test_client.get(f"/api/journal/{created['id']}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_entries_of_other_users_are_invisible(self, test_client, auth_headers, register_user):
        created = (
            await test_client.post("/api/journal", json={"title": "Private"}, headers=auth_headers)
        ).json()
        intruder = await register_user(test_client, username="intruder", email="i@example.com")
        intruder_headers = {"Authorization": f"Bearer {intruder['token']}"}

        response = await test_client.put(
            f"/api/journal/{created['id']}", json={"title": "Mine now"}, headers=intruder_headers
        )

        assert response.status_code == 404
        listing = await test_client.get("/api/journal", headers=intruder_headers)
        assert listing.json() == []


class TestSearchAndStreak:

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, test_client, auth_headers):
        await test_client.post(
            "/api/journal", json={"title": "Hiking", "content": "Saw a HERON"}, headers=auth_headers
        )
        await test_client.post("/api/journal", json={"title": "Groceries"}, headers=auth_headers)

        response = await test_client.get(
            "/api/journal/search", params={"query": "heron"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["Hiking"]

    @pytest.mark.asyncio
    async def test_empty_search_rejected(self, test_client, auth_headers):
        response = await test_client.get(
            "/api/journal/search", params={"query": ""}, headers=auth_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_streak(self, test_client, auth_headers):
        today = date.today()
        for offset in (0, 1, 1, 3):
            await test_client.post(
                "/api/journal",
                json={"title": f"day -{offset}", "date": (today - timedelta(days=offset)).isoformat()},
                headers=auth_headers,
            )

        response = await test_client.get("/api/journal/streak", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "current_streak": 2,
            "longest_streak": 2,
            "last_entry_date": today.isoformat(),
        }

    @pytest.mark.asyncio
    async def test_streak_without_entries(self, test_client, auth_headers):
        response = await test_client.get("/api/journal/streak", headers=auth_headers)
        assert response.json()["current_streak"] == 0
        assert response.json()["last_entry_date"] is None
