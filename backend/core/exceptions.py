"""
Custom exceptions and handlers for consistent API error responses.

Services raise these directly; FastAPI turns them into
``{"detail", "error_code", "path"}`` bodies with the matching status.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

    def __str__(self) -> str:
        return str(self.detail)


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self, detail: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, error_code=error_code
        )


class ValidationError(APIError):
    """Malformed or out-of-range input"""

    def __init__(
        self, detail: str = "Validation failed", error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class PolicyError(APIError):
    """Well-formed request that a business rule forbids"""

    def __init__(
        self, detail: str = "Operation not allowed", error_code: str = "POLICY_VIOLATION"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class AuthenticationError(APIError):
    """Authentication error"""

    def __init__(
        self, detail: str = "Authentication failed", error_code: str = "AUTH_FAILED"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(APIError):
    """Authenticated caller lacks ownership or role"""

    def __init__(self, detail: str = "Permission denied", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN, detail=detail, error_code=error_code
        )


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(self, detail: str = "Resource conflict", error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT, detail=detail, error_code=error_code
        )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "error_code": "VALIDATION_ERROR",
            "path": str(request.url.path),
        },
    )


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Unique constraint races surface as 409 rather than 500"""
    logger.warning(f"IntegrityError at {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": "Resource conflict",
            "error_code": "CONFLICT",
            "path": str(request.url.path),
        },
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(APIError, handle_api_error)
