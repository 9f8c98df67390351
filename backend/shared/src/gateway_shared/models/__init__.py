"""Pydantic models for Razorpay transaction sessions."""

from .enums import (
    PaymentStatus,
    ProcessorOperation,
    SessionStage,
    TransactionAction,
    TransactionEventType,
)
from .errors import (
    ConfigurationError,
    EnvelopeError,
    ERROR_MESSAGES,
    ErrorCode,
    FieldError,
    GatewayError,
    GatewayNotFoundError,
    InternalError,
    PayloadValidationError,
    TransactionError,
)
from .processor import ProcessorOrder, ProcessorPayment, ProcessorRefund
from .transaction import (
    InitializeSessionPayload,
    PAYLOAD_VERSION,
    ProcessSessionPayload,
    ReferencedSessionPayload,
    RefundRequestedPayload,
    SessionRequest,
    SessionResponse,
    TransactionEvent,
)

__all__ = [
    # Enums
    "PaymentStatus",
    "ProcessorOperation",
    "SessionStage",
    "TransactionAction",
    "TransactionEventType",
    # Errors
    "ConfigurationError",
    "EnvelopeError",
    "ERROR_MESSAGES",
    "ErrorCode",
    "FieldError",
    "GatewayError",
    "GatewayNotFoundError",
    "InternalError",
    "PayloadValidationError",
    "TransactionError",
    # Razorpay entities
    "ProcessorOrder",
    "ProcessorPayment",
    "ProcessorRefund",
    # Transaction sessions
    "InitializeSessionPayload",
    "PAYLOAD_VERSION",
    "ProcessSessionPayload",
    "ReferencedSessionPayload",
    "RefundRequestedPayload",
    "SessionRequest",
    "SessionResponse",
    "TransactionEvent",
]
