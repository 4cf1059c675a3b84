from typing import Any, Generic, TypeVar

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, ConfigDict, Field

from taskboard.core.views import ViewModel

SECURITY_SCHEMES = {
    "BearerAuth": {"type": "http", "scheme": "bearer", "description": "Token from POST /api/v1/auth/login"},
    "AuthTokenCookie": {"type": "apiKey", "in": "cookie", "name": "auth_token", "description": "Set by login"},
}

# (method, path) pairs callable without a token
PUBLIC_OPERATIONS = frozenset({("post", "/api/v1/auth/login"), ("get", "/health")})

T = TypeVar("T")


class ApiResponse(ViewModel, Generic[T]):
    """Success envelope: `{"success": true, "data": ...}`."""

    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    """Failure envelope returned by every error handler."""

    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="Message safe to show to the user")
    type: str = Field(..., description="Machine-readable error kind, e.g. not_found")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"success": False, "error": "Task not found", "type": "not_found"},
                {"success": False, "error": "Unauthorized to comment on this task", "type": "access_denied"},
                {"success": False, "error": "Comment content is required", "type": "validation_error"},
            ]
        }
    )


def set_custom_openapi(app: FastAPI) -> None:
    """Document token auth on every operation except the public ones."""

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=app.title,
            version="0.1.0",
            summary="Team task board with threaded task comments and notifications",
            routes=app.routes,
        )
        schema.setdefault("components", {})["securitySchemes"] = SECURITY_SCHEMES
        schema["security"] = [{name: []} for name in SECURITY_SCHEMES]
        for path, operations in schema["paths"].items():
            for method, operation in operations.items():
                if (method, path) in PUBLIC_OPERATIONS:
                    operation["security"] = []

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]
