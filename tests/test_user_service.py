# =============================================================================
# tests/test_user_service.py - Profile, Preferences and History Tests
# =============================================================================

from uuid import uuid4

import pytest

from app.exceptions import NotFoundError
from core.models.user import MAX_SEARCH_HISTORY


class TestProfile:
    """Tests for UserService profile operations."""

    @pytest.mark.asyncio
    async def test_get_profile(self, services, buyer):
        profile = await services.users.get_profile(buyer["id"])

        assert profile["username"] == "bob"

    @pytest.mark.asyncio
    async def test_get_missing_profile(self, services):
        with pytest.raises(NotFoundError):
            await services.users.get_profile(uuid4())

    @pytest.mark.asyncio
    async def test_update_profile(self, services, buyer):
        updated = await services.users.update_profile(buyer["id"], {"full_name": "Bob B", "bio": "Hi"})

        assert updated["full_name"] == "Bob B"
        assert updated["bio"] == "Hi"
        assert updated["email"] == buyer["email"]

    @pytest.mark.asyncio
    async def test_empty_update_returns_profile(self, services, buyer):
        profile = await services.users.update_profile(buyer["id"], {})

        assert profile["id"] == buyer["id"]


class TestPreferences:
    """Tests for UserService preferences."""

    @pytest.mark.asyncio
    async def test_defaults_without_stored_row(self, services, buyer):
        prefs = await services.users.get_preferences(buyer["id"])

        assert prefs["theme"] == "system"
        assert prefs["email_notifications"] is True
        assert prefs["search_history"] == []

    @pytest.mark.asyncio
    async def test_update_merges_over_defaults(self, services, buyer):
        await services.users.update_preferences(buyer["id"], {"theme": "dark"})

        prefs = await services.users.update_preferences(buyer["id"], {"language": "fr"})

        assert prefs["theme"] == "dark"
        assert prefs["language"] == "fr"
        assert prefs["marketing_emails"] is False


class TestHistory:
    """Tests for search and browsing history."""

    @pytest.mark.asyncio
    async def test_search_history_most_recent_first_without_duplicates(self, services, buyer):
        for query in ("lamp", "desk", "lamp"):
            await services.users.record_search(buyer["id"], query)

        prefs = await services.users.get_preferences(buyer["id"])

        assert prefs["search_history"] == ["lamp", "desk"]

    @pytest.mark.asyncio
    async def test_search_history_is_bounded(self, services, buyer):
        for i in range(MAX_SEARCH_HISTORY + 5):
            await services.users.record_search(buyer["id"], f"query {i}")

        prefs = await services.users.get_preferences(buyer["id"])

        assert len(prefs["search_history"]) == MAX_SEARCH_HISTORY
        assert prefs["search_history"][0] == f"query {MAX_SEARCH_HISTORY + 4}"

    @pytest.mark.asyncio
    async def test_browsing_history(self, services, buyer, product):
        await services.users.record_view(buyer["id"], product["id"])
        await services.users.record_view(buyer["id"], uuid4())
        await services.users.record_view(buyer["id"], product["id"])

        prefs = await services.users.get_preferences(buyer["id"])

        assert len(prefs["browsing_history"]) == 2
        assert prefs["browsing_history"][0]["product_id"] == product["id"]

    @pytest.mark.asyncio
    async def test_history_failure_is_swallowed(self, services, store, buyer):
        store.fail.add("upsert_preferences")

        await services.users.record_search(buyer["id"], "lamp")

        assert store.preferences == {}
