"""FastAPI exception handlers for the gateway.

Session failures never reach these handlers: the session service answers
them with 200 failure bodies. Only two errors escape a route:

- 400 Bad Request: EnvelopeError, the body cannot produce any session response
- 500 Internal Server Error: ConfigurationError on the gateway configuration
  and health endpoints; session webhooks answer it with a failure body

Both are answered as ``{"errors": [{field, message, code}], "data": null}``.

Usage:
    from gateway_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from gateway_shared.models.errors import (
    ERROR_MESSAGES,
    ConfigurationError,
    EnvelopeError,
    ErrorCode,
    FieldError,
)

logger = logging.getLogger(__name__)


def _error_body(errors: list[FieldError]) -> dict:
    return {"errors": [error.model_dump(mode="json") for error in errors], "data": None}


async def envelope_error_handler(request: Request, exc: EnvelopeError) -> JSONResponse:
    """Answer a malformed outer envelope with a structured 400."""
    logger.warning("Rejected webhook %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=_error_body(exc.to_field_errors()),
    )


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Answer with a 500 when the gateway has no usable credentials."""
    logger.error("Gateway not configured: %s", exc.message)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            [
                FieldError(
                    field="configuration",
                    message=ERROR_MESSAGES[ErrorCode.GATEWAY_NOT_CONFIGURED],
                    code=ErrorCode.GATEWAY_NOT_CONFIGURED.value,
                )
            ]
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the gateway exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(EnvelopeError, envelope_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConfigurationError, configuration_error_handler)  # type: ignore[arg-type]
