"""Task endpoints."""

from uuid import UUID

from fastapi import APIRouter
from pydantic import Field

from taskboard.core.modules.task.views import TaskView
from taskboard.core.views import ViewModel
from taskboard.web.deps import AppDep, AuthTokenDep
from taskboard.web.openapi import ApiResponse, ErrorResponse

router: APIRouter = APIRouter(tags=["tasks"])


class CreateTaskRequest(ViewModel):
    """Request to create a new task."""

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field("", description="Task description")
    assigned_to: UUID | None = Field(None, description="ID of the member the task is assigned to")


@router.post(
    "/tasks",
    summary="Create task",
    description="Create a task and notify its assignee. Only admins, managers and team leaders can create tasks.",
    operation_id="createTask",
    status_code=201,
    responses={
        201: {"description": "Task created"},
        400: {"model": ErrorResponse, "description": "Invalid task data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Role may not create tasks"},
    },
)
async def create_task(request: CreateTaskRequest, app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[TaskView]:
    task = await app.create_task(auth_token, request.title, request.description, request.assigned_to)
    return ApiResponse(data=task)


@router.get(
    "/tasks/{task_id}",
    summary="Get task",
    description="Get a task with its full comment tree. Members can only view tasks assigned to them.",
    operation_id="getTask",
    responses={
        200: {"description": "Task with comments"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not allowed to view this task"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def get_task(task_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> ApiResponse[TaskView]:
    return ApiResponse(data=await app.get_task(auth_token, task_id))
