"""Error codes and exceptions for transaction sessions.

Every failure raised while servicing a webhook is a ``TransactionError``.
The session service turns all of them into a failure ``SessionResponse``,
except ``EnvelopeError`` which is answered with a structured 400.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes for transaction sessions."""

    # Payload errors (ERR_TXN_001-ERR_TXN_003)
    INVALID_PAYLOAD = "ERR_TXN_001"
    MISSING_REQUIRED_FIELD = "ERR_TXN_002"
    ACTION_NOT_ALLOWED = "ERR_TXN_003"

    # Razorpay errors (ERR_RZP_001-ERR_RZP_004)
    GATEWAY_ERROR = "ERR_RZP_001"
    PAYMENT_NOT_FOUND = "ERR_RZP_002"
    PAYMENT_NOT_CAPTURABLE = "ERR_RZP_003"
    GATEWAY_NOT_CONFIGURED = "ERR_RZP_004"

    INTERNAL_ERROR = "ERR_INTERNAL"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_PAYLOAD: "Transaction payload is invalid",
    ErrorCode.MISSING_REQUIRED_FIELD: "Missing required field",
    ErrorCode.ACTION_NOT_ALLOWED: "Action is not allowed for this stage",
    ErrorCode.GATEWAY_ERROR: "Razorpay API error occurred",
    ErrorCode.PAYMENT_NOT_FOUND: "Payment not found at Razorpay",
    ErrorCode.PAYMENT_NOT_CAPTURABLE: "Payment is not in a capturable state",
    ErrorCode.GATEWAY_NOT_CONFIGURED: "Razorpay credentials are not configured",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}

# Short codes used in the 400 error list (platform vocabulary)
ENVELOPE_ERROR_CODE = "INVALID"


class FieldError(BaseModel):
    """One entry of the structured error list returned with a 400."""

    model_config = ConfigDict(strict=True)

    field: Optional[str] = None
    message: str
    code: str = ENVELOPE_ERROR_CODE


class TransactionError(Exception):
    """Base exception for every failure while servicing a session.

    Attributes:
        code: Standard error code.
        message: Human-readable message (defaults to the code's message).
        details: Optional extra context for logs.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.details = details
        super().__init__(self.message)


class PayloadValidationError(TransactionError):
    """Inbound payload failed validation before any processor call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: ErrorCode = ErrorCode.INVALID_PAYLOAD,
    ):
        self.field = field
        super().__init__(code, message, {"field": field} if field else None)


class EnvelopeError(TransactionError):
    """Request is malformed at the outer envelope.

    Raised when no transaction reference and no event context exist, so no
    compliant failure body can be built.
    """

    def __init__(self, field: Optional[str], message: Optional[str] = None):
        self.field = field
        super().__init__(ErrorCode.MISSING_REQUIRED_FIELD, message)

    def to_field_errors(self) -> list[FieldError]:
        """Convert to the structured error list sent with the 400."""
        return [FieldError(field=self.field, message=self.message)]


class GatewayError(TransactionError):
    """Razorpay rejected the call or could not be reached."""

    def __init__(
        self,
        message: str,
        processor_error_code: Optional[str] = None,
        code: ErrorCode = ErrorCode.GATEWAY_ERROR,
    ):
        self.processor_error_code = processor_error_code
        super().__init__(code, message)


class GatewayNotFoundError(GatewayError):
    """Referenced payment or order does not exist at Razorpay."""

    def __init__(self, message: str, processor_error_code: Optional[str] = None):
        super().__init__(message, processor_error_code, code=ErrorCode.PAYMENT_NOT_FOUND)


class InternalError(TransactionError):
    """Unexpected failure inside the adapter."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ErrorCode.INTERNAL_ERROR, message)


class ConfigurationError(TransactionError):
    """Gateway configuration is missing or unusable."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ErrorCode.GATEWAY_NOT_CONFIGURED, message)
