"""Maps failures to the platform's failure vocabulary.

Every failure except a malformed envelope is answered with HTTP 200 and a
well-formed failure body, so the platform records a terminal failure event
instead of treating the call as a transport error.
"""

import uuid
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from gateway_shared.models.errors import (
    ERROR_MESSAGES,
    ConfigurationError,
    EnvelopeError,
    ErrorCode,
    GatewayError,
    GatewayNotFoundError,
    PayloadValidationError,
    TransactionError,
)
from gateway_shared.models.transaction import SessionResponse
from gateway_shared.services.action_classifier import failure_result_for
from gateway_shared.services.payload_validator import RequestContext
from gateway_shared.utils.money import as_wire_amount


@dataclass(frozen=True)
class ErrorClassification:
    """How a failure is reported back to the platform."""

    kind: str  # envelope, validation, not_found, gateway, configuration, internal
    code: ErrorCode
    message: str
    http_status: int
    processor_error_code: Optional[str] = None


def classify_error(exc: BaseException) -> ErrorClassification:
    """Classify an exception raised while servicing a session."""
    if isinstance(exc, EnvelopeError):
        return ErrorClassification(
            kind="envelope",
            code=exc.code,
            message=exc.message,
            http_status=HTTPStatus.BAD_REQUEST,
        )
    if isinstance(exc, PayloadValidationError):
        return ErrorClassification(
            kind="validation",
            code=exc.code,
            message=f"Validation error: {exc.message}",
            http_status=HTTPStatus.OK,
        )
    if isinstance(exc, GatewayNotFoundError):
        return ErrorClassification(
            kind="not_found",
            code=exc.code,
            message=f"Razorpay error: {exc.message}",
            http_status=HTTPStatus.OK,
            processor_error_code=exc.processor_error_code,
        )
    if isinstance(exc, GatewayError):
        return ErrorClassification(
            kind="gateway",
            code=exc.code,
            message=f"Razorpay error: {exc.message}",
            http_status=HTTPStatus.OK,
            processor_error_code=exc.processor_error_code,
        )
    if isinstance(exc, ConfigurationError):
        return ErrorClassification(
            kind="configuration",
            code=exc.code,
            message=f"Razorpay error: {ERROR_MESSAGES[exc.code]}",
            http_status=HTTPStatus.OK,
        )
    if isinstance(exc, TransactionError):
        return ErrorClassification(
            kind="internal",
            code=exc.code,
            message=f"Internal error: {exc.message}",
            http_status=HTTPStatus.OK,
        )
    return ErrorClassification(
        kind="internal",
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR]}",
        http_status=HTTPStatus.OK,
    )


def build_failure_response(
    context: RequestContext,
    classification: ErrorClassification,
) -> SessionResponse:
    """Build the 200 failure body for a classified error.

    The result is the failure variant of the requested action, the amount
    echoes the requested amount, and no follow-up actions are offered.
    """
    psp_reference = None
    if context.include_psp_reference:
        psp_reference = context.reference or str(uuid.uuid4())

    data: dict[str, str | bool] = {
        "exception": True,
        "errorCode": classification.code.value,
    }
    if classification.processor_error_code:
        data["processorErrorCode"] = classification.processor_error_code

    return SessionResponse(
        psp_reference=psp_reference,
        result=failure_result_for(context.action),
        message=classification.message,
        amount=as_wire_amount(context.amount),
        actions=[],
        data=data,
    )
