from fastapi import APIRouter

from taskboard.core.views import ViewModel
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(tags=["metadata"])


class VersionInfo(ViewModel):
    """Build the server was deployed from."""

    git_commit_hash: str
    git_commit_date: str
    build_time: str


@router.get(
    "/metadata/version",
    summary="Build information",
    operation_id="getVersion",
    responses={
        200: {"description": "Commit and build time of the running server"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_version(app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[VersionInfo]:
    return ApiResponse(data=VersionInfo.model_validate(await app.get_version(auth_token)))
