"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

BASE_ERROR_URI = "https://quickclock.app/errors"

logger = logging.getLogger(__name__)


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
        code: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        self.code = code or error_type.replace("-", "_")
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class ConflictError(AppException):
    """409 — the entity's current state does not allow the operation."""

    def __init__(self, detail: str, *, code: str = "conflict") -> None:
        super().__init__(
            status_code=409,
            error_type="conflict",
            title="Conflict",
            detail=detail,
            code=code,
        )


class ForbiddenException(AppException):
    """403 — insufficient permissions."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(
            status_code=403,
            error_type="forbidden",
            title="Forbidden",
            detail=detail,
        )


class ValidationException(AppException):
    """422 — business-logic validation failures."""

    def __init__(
        self,
        errors: dict[str, list[str]],
        *,
        code: str = "validation_error",
    ) -> None:
        super().__init__(
            status_code=422,
            error_type="validation-error",
            title="Validation Error",
            detail="One or more fields failed validation.",
            errors=errors,
            code=code,
        )


# ── Attendance ──────────────────────────────────────────────────────

class AlreadyCheckedIn(ConflictError):
    def __init__(self) -> None:
        super().__init__("Already checked in today.", code="already_checked_in")


class AlreadyCheckedOut(ConflictError):
    def __init__(self) -> None:
        super().__init__("Already checked out today.", code="already_checked_out")


class NoCheckInFound(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            "No check-in record found for today.", code="no_check_in_found",
        )


# ── Requests / leave ────────────────────────────────────────────────

class DuplicatePendingRequest(ConflictError):
    def __init__(self, target_date: Any) -> None:
        super().__init__(
            f"A pending request already exists for {target_date}.",
            code="duplicate_pending_request",
        )


class OverlapExists(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            "A leave already exists that overlaps these dates.",
            code="overlap_exists",
        )


class NotPending(ConflictError):
    def __init__(self, entity_type: str, status: Any) -> None:
        value = getattr(status, "value", status)
        super().__init__(
            f"{entity_type} has already been processed (status '{value}').",
            code="not_pending",
        )


class FutureDateNotAllowed(ValidationException):
    def __init__(self) -> None:
        super().__init__(
            {"date": ["Cannot request for future dates."]},
            code="future_date_not_allowed",
        )


class InvalidRange(ValidationException):
    def __init__(self) -> None:
        super().__init__(
            {"end_date": ["End date must be on or after start date."]},
            code="invalid_range",
        )


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "code": exc.code,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    if isinstance(exc, ForbiddenException):
        logger.warning("Forbidden %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=422,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed.",
            "code": "validation_error",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
