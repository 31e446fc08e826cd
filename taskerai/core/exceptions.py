"""
Application error taxonomy.

Services raise these; the handler registered in ``taskerai.main`` turns them
into JSON responses of the form ``{"detail": ..., "code": ...}``.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class TaskerError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, detail: str, code: str | None = None, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class UnauthenticatedError(TaskerError):
    """Missing or invalid caller identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ForbiddenError(TaskerError):
    """Caller is known but a permission check failed."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(TaskerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class BadRequestError(TaskerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"


class ConflictError(TaskerError):
    """Duplicate resource or a transition that already happened."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


async def tasker_error_handler(request: Request, exc: TaskerError) -> JSONResponse:
    """Render a TaskerError as a JSON response."""
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or missing request fields as a 400."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    detail = "; ".join(f"{'.'.join(str(p) for p in e['loc'][1:])}: {e['msg']}" for e in errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail or "Invalid request", "code": "VALIDATION_ERROR", "errors": errors},
    )
