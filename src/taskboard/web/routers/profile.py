"""Endpoints acting on the signed-in user's own account."""

from fastapi import APIRouter
from pydantic import Field

from taskboard.core.modules.user.models import UserView
from taskboard.core.views import ViewModel
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(tags=["profile"])

UNAUTHENTICATED = {"model": ErrorResponse, "description": "Not authenticated"}


class ChangePasswordRequest(ViewModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, description="At least 2 characters, no whitespace")


class TelegramChatRequest(ViewModel):
    chat_id: str | None = Field(None, description="Chat that receives copies of notifications; null unlinks")


@router.get(
    "/profile",
    summary="Current user",
    operation_id="getProfile",
    responses={200: {"description": "Signed-in user"}, 401: UNAUTHENTICATED},
)
async def get_profile(app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[UserView]:
    return ApiResponse(data=await app.get_current_user(auth_token))


@router.post(
    "/profile/change-password",
    summary="Change password",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed"},
        400: {"model": ErrorResponse, "description": "Wrong current password or weak new password"},
        401: UNAUTHENTICATED,
    },
)
async def change_password(body: ChangePasswordRequest, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.change_password(auth_token, body.old_password, body.new_password)


@router.put(
    "/profile/telegram",
    summary="Link Telegram chat",
    description="Notifications are mirrored to the linked chat when the server has a Telegram bot token.",
    operation_id="setTelegramChat",
    responses={200: {"description": "Updated user"}, 401: UNAUTHENTICATED},
)
async def set_telegram_chat(body: TelegramChatRequest, app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[UserView]:
    return ApiResponse(data=await app.set_telegram_chat(auth_token, body.chat_id))
