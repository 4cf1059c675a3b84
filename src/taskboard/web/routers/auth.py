from fastapi import APIRouter, Request, Response
from pydantic import Field

from taskboard.core.modules.session.models import SESSION_LIFETIME
from taskboard.core.modules.user.models import UserView
from taskboard.core.views import ViewModel
from taskboard.web.deps import AUTH_COOKIE, AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(ViewModel):
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Account password")


class LoginResponse(ViewModel):
    """Token for the Authorization header plus the signed-in user."""

    token: str = Field(..., description="Bearer token for subsequent requests")
    user: UserView


@router.post(
    "/auth/login",
    summary="Sign in",
    description="Exchange email and password for a bearer token. The token is also set as an HTTP-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Signed in"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
    },
)
async def login(body: LoginRequest, app: AppDep, request: Request, response: Response) -> ApiResponse[LoginResponse]:
    token = await app.login(body.email, body.password)
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=request.url.scheme == "https",
        max_age=int(SESSION_LIFETIME.total_seconds()),
    )
    return ApiResponse(data=LoginResponse(token=token, user=await app.get_current_user(token)))


@router.post(
    "/auth/logout",
    summary="Sign out",
    description="Invalidate the session behind the current token and clear the cookie.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Signed out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE)
