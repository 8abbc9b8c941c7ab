"""
Request pipeline shared by the user operations.

parse -> validate (FastAPI body parsing, ``request_validation_handler``),
execute (``within_deadline``), envelope (``respond`` / ``operation_error_handler``).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userdb.errors import DecodeError, OperationError, StoreError, ValidationError
from userdb.models import Envelope
from userdb.store import USERS_COLLECTION, UserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _describe(errors) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in errors
    )


def get_repository(request: Request) -> UserRepository:
    return UserRepository(request.app.state.connector.collection(USERS_COLLECTION))


def get_deadline(request: Request) -> float:
    return request.app.state.request_timeout


async def within_deadline(operation: Awaitable[T], seconds: float) -> T:
    try:
        return await asyncio.wait_for(operation, seconds)
    except asyncio.TimeoutError as exc:
        raise StoreError(f"operation exceeded deadline of {seconds:g}s") from exc


def respond(envelope: Envelope) -> JSONResponse:
    return JSONResponse(status_code=envelope.status, content=envelope.model_dump(mode="json"))


async def operation_error_handler(request: Request, exc: OperationError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc)
    return respond(Envelope.error(exc.status_code, exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = _describe(errors)
    # malformed JSON is a decode failure; anything else is a field failure
    if any(err["type"] == "json_invalid" for err in errors):
        return await operation_error_handler(request, DecodeError(detail))
    return await operation_error_handler(request, ValidationError(detail))
