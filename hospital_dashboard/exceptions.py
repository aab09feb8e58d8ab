from typing import Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class DashboardError(Exception):
    """Base class for every error raised by the dashboard core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreError(DashboardError):
    """A call to the data store failed (network, missing row, constraint)"""

    def __init__(self, message: str, code: str = "unavailable"):
        super().__init__(message)
        self.code = code


class NotFoundError(StoreError):
    def __init__(self, message: str):
        super().__init__(message, code="not_found")


class ConstraintError(StoreError):
    def __init__(self, message: str):
        super().__init__(message, code="constraint")


class ValidationError(DashboardError):
    """A draft or patch failed its presence checks; no request was issued"""

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class FormStateError(DashboardError):
    pass


class DuplicateSubmissionError(FormStateError):
    pass


class ConfirmationError(DashboardError):
    pass


def store_error_from(code: str, message: str) -> StoreError:
    if code == "not_found":
        return NotFoundError(message)
    if code == "constraint":
        return ConstraintError(message)
    return StoreError(message, code=code)


def create_error_response(error_message: str, details: Optional[dict] = None) -> dict:
    """Create a standardized error response"""
    body = {
        "success": False,
        "data": None,
        "error": error_message
    }
    if details:
        body["details"] = details
    return body


def _status_for(exc: DashboardError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ConstraintError, ConfirmationError, FormStateError)):
        return 409
    if isinstance(exc, StoreError):
        return 502
    return 400


async def dashboard_exception_handler(request: Request, exc: DashboardError) -> JSONResponse:
    """Map core errors onto the standard error envelope"""
    details = exc.fields if isinstance(exc, ValidationError) else None
    return JSONResponse(
        status_code=_status_for(exc),
        content=create_error_response(exc.message, details)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail))
    )
