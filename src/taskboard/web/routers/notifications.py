"""Notification inbox endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from taskboard.core.modules.notification.models import NotificationFeed
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router: APIRouter = APIRouter(tags=["notifications"])


@router.get(
    "/notifications",
    summary="List notifications",
    description="Get the current user's notifications, newest first, with the unread count.",
    operation_id="listNotifications",
    responses={
        200: {"description": "Page of notifications"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_notifications(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum items to return")] = 20,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    unread_only: Annotated[bool, Query(alias="unreadOnly", description="Only unread notifications")] = False,
) -> ApiResponse[NotificationFeed]:
    return ApiResponse(data=await app.get_notifications(auth_token, limit, offset, unread_only))


@router.put(
    "/notifications/read-all",
    summary="Mark all notifications read",
    operation_id="markAllNotificationsRead",
    responses={
        200: {"description": "Number of notifications marked read"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def mark_all_read(app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[int]:
    return ApiResponse(data=await app.mark_all_notifications_read(auth_token))


@router.put(
    "/notifications/{notification_id}/read",
    summary="Mark notification read",
    operation_id="markNotificationRead",
    status_code=204,
    responses={
        204: {"description": "Marked read"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Notification not found"},
    },
)
async def mark_read(notification_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.mark_notification_read(auth_token, notification_id)


@router.delete(
    "/notifications/{notification_id}",
    summary="Delete notification",
    operation_id="deleteNotification",
    status_code=204,
    responses={
        204: {"description": "Deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Notification not found"},
    },
)
async def delete_notification(notification_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_notification(auth_token, notification_id)
