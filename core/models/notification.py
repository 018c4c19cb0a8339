# =============================================================================
# core/models/notification.py - Notification Schemas
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class NotificationType(str, Enum):
    """Kinds of messages the services emit."""
    ORDER_PLACED = "order_placed"
    ORDER_STATUS = "order_status"
    PAYMENT = "payment"
    REVIEW = "review"
    SYSTEM = "system"


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str | None = None
    data: dict[str, Any] | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None


class NotificationList(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread: int
    limit: int
    offset: int
