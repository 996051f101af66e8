# customer_update/api/errors.py
"""
Map service exceptions onto the response envelope.

Expected conditions are surfaced verbatim; anything else becomes a generic 500
without internal detail.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from customer_update.api.schemas import ApiResponse
from customer_update.errors import (
    CustomerNotFound,
    DuplicateTaxId,
    ExternalValidationFailed,
    ExternalValidatorUnavailable,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def _format_request_error(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    message = err.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return ApiResponse(success=False, message="Validation failed", errors=exc.errors).to_response(400)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_request_error(err) for err in exc.errors()]
    return ApiResponse(success=False, message="Validation failed", errors=errors).to_response(400)


async def external_validation_failed_handler(
    request: Request, exc: ExternalValidationFailed
) -> JSONResponse:
    return ApiResponse(
        success=False,
        message="External validation failed",
        error=exc.message,
        errors=exc.errors,
    ).to_response(400)


async def not_found_handler(request: Request, exc: CustomerNotFound) -> JSONResponse:
    return ApiResponse(success=False, message="Customer not found", error=exc.message).to_response(404)


async def duplicate_tax_id_handler(request: Request, exc: DuplicateTaxId) -> JSONResponse:
    return ApiResponse(success=False, message="Tax ID already exists", error=exc.message).to_response(400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return ApiResponse(success=False, message=str(exc.detail)).to_response(
        exc.status_code, headers=getattr(exc, "headers", None)
    )


async def external_validator_unavailable_handler(
    request: Request, exc: ExternalValidatorUnavailable
) -> JSONResponse:
    # Already logged with context by the service
    return ApiResponse(success=False, message=UNEXPECTED_ERROR_MESSAGE).to_response(500)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return ApiResponse(success=False, message=UNEXPECTED_ERROR_MESSAGE).to_response(500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ExternalValidationFailed, external_validation_failed_handler)
    app.add_exception_handler(CustomerNotFound, not_found_handler)
    app.add_exception_handler(DuplicateTaxId, duplicate_tax_id_handler)
    app.add_exception_handler(ExternalValidatorUnavailable, external_validator_unavailable_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
