# =============================================================================
# core/services/notification_service.py - Notification Business Logic
# =============================================================================
# In-app notifications: listing, read state and deletion for their owner,
# plus notify() which other services call after a state change commits.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ForbiddenError, MarketplaceException, NotFoundError
from core.models.notification import NotificationType
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid, utcnow_iso

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for a user's notification inbox.

    Only the owner of a notification can read, mark or delete it.
    """

    def __init__(self, store: SupabaseStore):
        self.store = store

    async def notify(
        self,
        user_id: str | UUID,
        type: NotificationType,
        title: str,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Create a notification for a user.

        Best-effort: the state change that triggered it has already been
        committed, so a failure here is logged and swallowed.

        Returns:
            The created notification, or None if it couldn't be stored
        """
        try:
            notification = await self.store.create_notification({
                "user_id": normalize_uuid(user_id),
                "type": type.value,
                "title": title,
                "message": message,
                "data": data or {},
            })
        except MarketplaceException as e:
            logger.warning(f"Failed to notify user {user_id} ({type.value}): {e.message}")
            return None

        logger.debug(f"Notified user {user_id}: {type.value}")
        return notification

    async def list_notifications(
        self,
        user_id: str | UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> dict[str, Any]:
        """
        List a user's notifications, newest first.

        Returns:
            Dict matching NotificationList (notifications, total, unread, ...)
        """
        notifications, total = await self.store.list_notifications(user_id, unread_only, limit, offset)
        unread = await self.store.count_unread_notifications(user_id)
        return {
            "notifications": notifications,
            "total": total,
            "unread": unread,
            "limit": limit,
            "offset": offset,
        }

    async def _get_owned(self, notification_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        notification = await self.store.get_notification(notification_id)
        if not notification:
            raise NotFoundError("Notification", str(notification_id))
        if str(notification["user_id"]) != str(user_id):
            raise ForbiddenError("You can only manage your own notifications")
        return notification

    async def mark_read(self, notification_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        """
        Mark one notification as read.

        Raises:
            NotFoundError: If the notification doesn't exist
            ForbiddenError: If it belongs to another user
        """
        notification = await self._get_owned(notification_id, user_id)
        if notification.get("is_read"):
            return notification

        updated = await self.store.update_notification(
            notification_id,
            {"is_read": True, "read_at": utcnow_iso()},
        )
        return updated or notification

    async def mark_all_read(self, user_id: str | UUID) -> int:
        """Mark every unread notification as read. Returns how many changed."""
        count = await self.store.mark_all_notifications_read(user_id)
        logger.info(f"Marked {count} notifications read for user {user_id}")
        return count

    async def delete(self, notification_id: str | UUID, user_id: str | UUID) -> None:
        """
        Permanently delete a notification.

        Raises:
            NotFoundError: If the notification doesn't exist
            ForbiddenError: If it belongs to another user
        """
        await self._get_owned(notification_id, user_id)
        if not await self.store.delete_notification(notification_id):
            raise NotFoundError("Notification", str(notification_id))
