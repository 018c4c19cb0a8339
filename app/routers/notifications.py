# =============================================================================
# app/routers/notifications.py - Notification Endpoints
# =============================================================================
# Endpoints:
# - GET    /api/v1/notifications            - Inbox, newest first
# - PUT    /api/v1/notifications/read-all   - Mark everything read
# - PUT    /api/v1/notifications/{id}/read  - Mark one read
# - DELETE /api/v1/notifications/{id}       - Delete one
# =============================================================================

from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from app.auth import CurrentUser
from app.dependencies import NotificationServiceDep
from core.models.notification import NotificationList, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class MarkAllReadResponse(BaseModel):
    updated: int


@router.get("", response_model=NotificationList)
async def list_notifications(
    user: CurrentUser,
    notifications: NotificationServiceDep,
    unread_only: bool = False,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    return await notifications.list_notifications(user.id, unread_only, limit, offset)


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user: CurrentUser, notifications: NotificationServiceDep):
    return MarkAllReadResponse(updated=await notifications.mark_all_read(user.id))


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: UUID, user: CurrentUser, notifications: NotificationServiceDep):
    return await notifications.mark_read(notification_id, user.id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: UUID, user: CurrentUser, notifications: NotificationServiceDep):
    await notifications.delete(notification_id, user.id)
