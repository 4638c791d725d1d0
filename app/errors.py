"""JSON error envelope shared by every endpoint.

All error bodies carry a ``message`` key; validation failures add an ``errors``
object keyed by field name::

    {"message": "The given data was invalid.", "errors": {"title": ["field required"]}}
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_key(location: Iterable[Any]) -> str:
    parts = [str(part) for part in location]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for error in errors:
        key = _field_key(error.get("loc", ()))
        grouped.setdefault(key, []).append(str(error.get("msg", "Invalid value")))
    return grouped


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, Mapping):
        body = dict(detail)
        body.setdefault("message", VALIDATION_MESSAGE)
    else:
        body = {"message": str(detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(body),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": VALIDATION_MESSAGE, "errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
