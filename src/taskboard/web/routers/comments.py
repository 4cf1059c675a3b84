"""Task comment endpoints."""

from uuid import UUID

from fastapi import APIRouter
from pydantic import Field, field_validator

from taskboard.core.modules.comment.models import CommentThreadView, CommentView
from taskboard.core.views import ViewModel
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router: APIRouter = APIRouter(tags=["comments"])


class CreateCommentRequest(ViewModel):
    """Request to comment on a task or reply to one of its comments."""

    content: str = Field(..., description="The comment text, must not be blank")
    parent_comment_id: UUID | None = Field(None, description="Top-level comment being replied to")

    @field_validator("parent_comment_id", mode="before")
    @classmethod
    def blank_parent_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@router.get(
    "/tasks/{task_id}/comments",
    summary="List task comments",
    description="Get the comment tree of a task: top-level comments with their replies, oldest first.",
    operation_id="listTaskComments",
    responses={
        200: {"description": "Comment tree"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not allowed to view this task"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def list_comments(task_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[list[CommentThreadView]]:
    return ApiResponse(data=await app.get_task_comments(auth_token, task_id))


@router.post(
    "/tasks/{task_id}/comments",
    summary="Create comment",
    description=(
        "Add a comment to a task, or a reply when parentCommentId names a top-level comment. "
        "Admins, team leaders and the task assignee can comment. The task creator, assignee and "
        "replied-to author are notified; notification failures do not fail the request."
    ),
    operation_id="createTaskComment",
    responses={
        200: {"description": "Comment created"},
        400: {"model": ErrorResponse, "description": "Empty content or malformed request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not allowed to comment on this task"},
        404: {"model": ErrorResponse, "description": "Task or parent comment not found"},
        500: {"model": ErrorResponse, "description": "Comment could not be stored"},
    },
)
async def create_comment(
    task_id: UUID, request: CreateCommentRequest, app: AppDep, auth_token: AuthTokenDep
) -> ApiResponse[CommentView]:
    comment = await app.create_task_comment(auth_token, task_id, request.content, request.parent_comment_id)
    return ApiResponse(data=comment)
