"""
Errors raised by services and the handlers that render them as JSON.

Every error response has the same body:

    {"status": 404, "code": "NOT_FOUND", "name": "Not Found",
     "message": "Not Found", "errors": []}
"""

import logging
import re
from http import HTTPStatus
from typing import Dict, List, Optional, Sequence

import inflection
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from emis_party.config import settings

logger = logging.getLogger(__name__)

# Postgres error codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
# Class 22 is data exceptions (bad text for a uuid, json or timestamp column)
DATA_EXCEPTION_CLASS = "22"
# PGRST1xx is a malformed request (bad filter operator or column)
REQUEST_ERROR_PREFIX = "PGRST1"

NOT_FOUND = "Not Found"

_KEY_PATTERN = re.compile(r"Key \((?P<fields>[^)]+)\)=")


def field_error(field: str, message: str, type_: str = "value_error") -> Dict[str, str]:
    return {"field": field, "message": message, "type": type_}


class NotFoundError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)


class ValidationFailed(HTTPException):
    """Record failed validation after normalization."""

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message)
        self.errors = errors


class ConflictError(HTTPException):
    """Write would duplicate a unique key."""

    def __init__(self, fields: Sequence[str]):
        message = f"Duplicate value for {', '.join(fields)}"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)
        self.errors = [field_error(f, "already exists", "unique") for f in fields]


def translate_api_error(exc: APIError, unique_fields: Sequence[str] = ()) -> HTTPException:
    """Map a PostgREST error to the HTTP error the caller should see."""
    if exc.code == UNIQUE_VIOLATION:
        match = _KEY_PATTERN.search(exc.details or "")
        if match:
            fields = [inflection.camelize(f.strip(), False) for f in match.group("fields").split(",")]
        else:
            fields = list(unique_fields)
        return ConflictError(fields)
    if exc.code in (FOREIGN_KEY_VIOLATION, NOT_NULL_VIOLATION):
        return ValidationFailed([field_error("", exc.message or "Invalid reference", "reference_error")])
    code = exc.code or ""
    if code.startswith(DATA_EXCEPTION_CLASS) or code.startswith(REQUEST_ERROR_PREFIX):
        return ValidationFailed(
            [field_error("", exc.message or "Invalid value", "value_error")],
            message="Invalid value",
        )
    logger.error("Database error %s: %s", exc.code, exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message or "Database error")


def error_body(status_code: int, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None) -> dict:
    phrase = HTTPStatus(status_code).phrase
    return {
        "status": status_code,
        "code": phrase.upper().replace(" ", "_").replace("-", "_"),
        "name": phrase,
        "message": message or phrase,
        "errors": errors or [],
    }


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else None
    errors = getattr(exc, "errors", None)
    if errors is None and isinstance(exc.detail, list):
        errors = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message, errors),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append(field_error(".".join(loc), error.get("msg", ""), error.get("type", "value_error")))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", errors),
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return await http_exception_handler(request, translate_api_error(exc))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    message = "Internal server error" if settings.is_production else str(exc)
    return JSONResponse(status_code=500, content=error_body(500, message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
