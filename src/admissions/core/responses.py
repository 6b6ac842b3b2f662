"""
Response Envelope

Every response body has the shape ``{success, data?, message?, error?}``.

Routers return ``ApiResponse`` instances for success; the exception handlers
registered by ``register_exception_handlers`` render every ``HTTPException``
and request validation error in the same envelope.
"""

import logging
from typing import Any, Generic, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope. Unset (``None``) envelope keys are left out of the body."""

    success: bool = True
    data: T | None = None
    message: str | None = None
    error: str | None = None

    @model_serializer(mode="wrap")
    def _drop_empty_keys(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Only the envelope level; None inside ``data`` is kept
        return {key: value for key, value in handler(self).items() if value is not None}


def _envelope_from_detail(detail: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False}
    if isinstance(detail, dict):
        body["message"] = detail.get("message") or detail.get("error") or "Request failed"
        if detail.get("error"):
            body["error"] = str(detail["error"])
    else:
        body["message"] = str(detail) if detail else "Request failed"
    return body


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope_from_detail(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    summary = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in errors
    )
    logger.info(f"Rejected malformed request: {summary}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request", "error": summary},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = [
    "ApiResponse",
    "register_exception_handlers",
]
