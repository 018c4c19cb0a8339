# =============================================================================
# core/services/user_service.py - Profile and Preferences Logic
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import MarketplaceException, NotFoundError
from core.models.user import MAX_BROWSING_HISTORY, MAX_SEARCH_HISTORY, default_preferences
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid, utcnow_iso

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for a user's own profile, preferences and history.
    """

    def __init__(self, store: SupabaseStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    async def get_profile(self, user_id: str | UUID) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: If the user doesn't exist
        """
        user = await self.store.get_user(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def update_profile(self, user_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial profile update. An empty update returns the profile unchanged."""
        if not changes:
            return await self.get_profile(user_id)

        updated = await self.store.update_user(user_id, {**changes, "updated_at": utcnow_iso()})
        if not updated:
            raise NotFoundError("User", str(user_id))

        logger.info(f"Updated profile for user {user_id}: {sorted(changes)}")
        return updated

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    async def get_preferences(self, user_id: str | UUID) -> dict[str, Any]:
        """Stored preferences merged over the defaults."""
        stored = await self.store.get_preferences(user_id) or {}
        merged = default_preferences()
        merged.update({key: value for key, value in stored.items() if value is not None})
        return merged

    async def update_preferences(self, user_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any]:
        if changes:
            await self.store.upsert_preferences(user_id, {**changes, "updated_at": utcnow_iso()})
        return await self.get_preferences(user_id)

    # -------------------------------------------------------------------------
    # History (best-effort)
    # -------------------------------------------------------------------------

    async def record_search(self, user_id: str | UUID, query: str) -> None:
        """Push a query onto the search history: most recent first, no duplicates."""
        try:
            stored = await self.store.get_preferences(user_id) or {}
            history = [q for q in stored.get("search_history") or [] if q != query]
            history.insert(0, query)
            await self.store.upsert_preferences(user_id, {
                "search_history": history[:MAX_SEARCH_HISTORY],
                "updated_at": utcnow_iso(),
            })
        except MarketplaceException as e:
            logger.warning(f"Failed to record search for user {user_id}: {e.message}")

    async def record_view(self, user_id: str | UUID, product_id: str | UUID) -> None:
        """Push a product onto the browsing history: most recent first, no duplicates."""
        product_id = normalize_uuid(product_id)
        try:
            stored = await self.store.get_preferences(user_id) or {}
            history = [
                entry for entry in stored.get("browsing_history") or []
                if entry.get("product_id") != product_id
            ]
            history.insert(0, {"product_id": product_id, "viewed_at": utcnow_iso()})
            await self.store.upsert_preferences(user_id, {
                "browsing_history": history[:MAX_BROWSING_HISTORY],
                "updated_at": utcnow_iso(),
            })
        except MarketplaceException as e:
            logger.warning(f"Failed to record view for user {user_id}: {e.message}")
