from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    remaining: int | None = None
    blocking_count: int | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class LeaveValidationError(AppError):
    """Missing or inconsistent input on a ledger command."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class QuotaExceededError(AppError):
    """A request would push a quota-limited leave type over its yearly limit."""

    def __init__(self, leave_type: str, remaining: int) -> None:
        self.leave_type = leave_type
        self.remaining = remaining
        super().__init__(
            f"{leave_type} quota exceeded: {remaining} day(s) remaining",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class NotAuthenticatedError(AppError):
    def __init__(self, message: str = "Not logged in") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class NotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class ConstraintViolationError(AppError):
    """Uniqueness or referential constraint would be broken by the command."""

    def __init__(self, message: str, blocking_count: int | None = None) -> None:
        self.blocking_count = blocking_count
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class StorePersistenceError(AppError):
    """A remote store call failed or timed out. Never leaves the ledger."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f"Store operation '{operation}' failed"
        if cause is not None:
            detail = f"{detail}: {cause!r}"
        super().__init__(detail, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            remaining=getattr(exc, "remaining", None),
            blocking_count=getattr(exc, "blocking_count", None),
        ).model_dump(exclude_none=True),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(exclude_none=True),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
