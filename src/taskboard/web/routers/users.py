"""User directory endpoints."""

from fastapi import APIRouter
from pydantic import Field

from taskboard.core.modules.user.models import UserRole, UserView
from taskboard.core.views import ViewModel
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(tags=["users"])


class CreateUserRequest(ViewModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1, description="At least 2 characters, no whitespace")
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    role: UserRole = UserRole.MEMBER
    avatar: str | None = Field(None, description="Avatar image URL")


@router.get(
    "/users",
    summary="List users",
    description="All users, e.g. for picking a task assignee.",
    operation_id="listUsers",
    responses={
        200: {"description": "Users"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_users(app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[list[UserView]]:
    return ApiResponse(data=await app.get_all_users(auth_token))


@router.post(
    "/users",
    summary="Create user",
    description="Admins only.",
    operation_id="createUser",
    status_code=201,
    responses={
        201: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Email taken, malformed or weak password"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Caller is not an admin"},
    },
)
async def create_user(body: CreateUserRequest, app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[UserView]:
    user = await app.create_user(
        auth_token, body.email, body.password, body.first_name, body.last_name, body.role, body.avatar
    )
    return ApiResponse(data=user)
