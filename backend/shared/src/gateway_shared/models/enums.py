"""Enumeration types for transaction sessions and Razorpay entities."""

from enum import Enum


class TransactionEventType(str, Enum):
    """Result vocabulary the platform accepts for a transaction event."""

    CHARGE_SUCCESS = "CHARGE_SUCCESS"
    CHARGE_FAILURE = "CHARGE_FAILURE"
    AUTHORIZATION_SUCCESS = "AUTHORIZATION_SUCCESS"
    AUTHORIZATION_FAILURE = "AUTHORIZATION_FAILURE"
    REFUND_SUCCESS = "REFUND_SUCCESS"
    REFUND_FAILURE = "REFUND_FAILURE"
    CANCEL_SUCCESS = "CANCEL_SUCCESS"
    CANCEL_FAILURE = "CANCEL_FAILURE"


class TransactionAction(str, Enum):
    """Action the platform requests (or may request next) on a transaction."""

    CHARGE = "CHARGE"
    AUTHORIZATION = "AUTHORIZATION"
    REFUND = "REFUND"
    CANCEL = "CANCEL"


class SessionStage(str, Enum):
    """Webhook stage of the transaction lifecycle."""

    INITIALIZE = "initialize"
    PROCESS = "process"
    CHARGE_REQUESTED = "charge_requested"
    REFUND_REQUESTED = "refund_requested"
    CANCEL_REQUESTED = "cancel_requested"


class ProcessorOperation(str, Enum):
    """Family of Razorpay operations a stage translates into."""

    CREATE_ORDER = "create_order"
    CAPTURE_OR_FETCH = "capture_or_fetch"
    REFUND = "refund"
    CANCEL = "cancel"


class PaymentStatus(str, Enum):
    """Status of a Razorpay payment."""

    CREATED = "created"
    AUTHORIZED = "authorized"
    CAPTURED = "captured"
    REFUNDED = "refunded"
    FAILED = "failed"
