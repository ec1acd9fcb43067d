"""
Error taxonomy for the inventory engine and its FastAPI wiring.

Every failed command raises exactly one of these; the handler installed by
install_handlers() turns them into {"detail", "error", "context"} JSON.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.code, "context": self.context}


class ValidationError(AppError):
    """Malformed input: empty name, negative price, unknown enum value."""
    status_code = 422


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Uniqueness violated."""
    status_code = 409


class DuplicateAssignmentError(ConflictError):
    pass


class ReferentialConflictError(AppError):
    """Delete blocked by dependents; context lists them."""
    status_code = 409


class NotAvailableError(AppError):
    status_code = 409


def install_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=ValidationError.status_code,
            content={"detail": "Invalid request", "error": "ValidationError", "context": {"errors": errors}},
        )
