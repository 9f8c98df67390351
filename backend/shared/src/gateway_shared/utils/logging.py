"""Logging with per-request correlation IDs.

Every webhook call gets a correlation ID (taken from X-Correlation-ID or
generated) that is stamped on each record, so a single transaction can be
followed from the inbound webhook through every Razorpay call.

Usage:
    from gateway_shared.utils.logging import get_logger, log_session_event

    logger = get_logger(__name__)
    log_session_event(logger, "process", "CHARGE_SUCCESS", reference="pay_123")
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

NO_CORRELATION_ID = "no-correlation-id"

# ContextVar so concurrent requests (threads or tasks) never share an ID
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context.

    Args:
        correlation_id: Incoming ID; a new UUID is generated when empty.

    Returns:
        The bound ID.
    """
    bound = correlation_id or generate_correlation_id()
    _correlation_id.set(bound)
    return bound


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` on every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes each line with ``[correlation-id]``."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is None:
            correlation_id = get_correlation_id() or NO_CORRELATION_ID
            record.correlation_id = correlation_id

        return f"[{correlation_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with the correlation filter attached once."""
    named = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in named.filters):
        named.addFilter(CorrelationIdFilter())
    return named


def configure_logging(level: int = logging.INFO) -> None:
    """Install the structured formatter on the root logger.

    Safe to call more than once; an existing structured handler is reused.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def _emit(logger: logging.Logger, level: int, headline: str, context: dict[str, Any]) -> None:
    """Log ``headline | k=v | ...`` and attach the same fields as record attributes."""
    fields = {key: value for key, value in context.items() if value is not None and value != ""}
    parts = [headline] + [f"{key}={value}" for key, value in fields.items()]
    logger.log(level, " | ".join(parts), extra=fields)


def log_processor_operation(
    logger: logging.Logger,
    operation: str,
    *,
    payment_id: str | None = None,
    order_id: str | None = None,
    amount_minor: int | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one Razorpay call; failures (``error`` set) are logged at ERROR.

    Args:
        logger: Logger to write to.
        operation: SDK operation, e.g. "create_order" or "capture_payment".
        payment_id: Razorpay payment ID, when known.
        order_id: Razorpay order ID, when known.
        amount_minor: Amount in paise.
        status: Entity status returned by Razorpay.
        error: Failure text; switches the level to ERROR.
        **extra: Further fields (refund_id, error_code, ...).
    """
    _emit(
        logger,
        logging.ERROR if error else logging.INFO,
        f"Razorpay operation: {operation}",
        {
            "payment_id": payment_id,
            "order_id": order_id,
            "amount_minor": amount_minor,
            "status": status,
            "error": error,
            **extra,
        },
    )


# Session outcome -> log level; anything else is INFO
SESSION_OUTCOME_LEVELS: dict[str, int] = {
    "exception": logging.ERROR,
    "failure": logging.WARNING,
    "rejected": logging.WARNING,
}


def log_session_event(
    logger: logging.Logger,
    stage: str,
    result: str,
    *,
    reference: str | None = None,
    outcome: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log how a webhook stage was answered.

    Args:
        logger: Logger to write to.
        stage: Session stage, e.g. "initialize" or "refund_requested".
        result: Event type returned to the platform.
        reference: Transaction ID or Razorpay payment ID.
        outcome: success, rejected, failure or exception.
        error: Failure text, if any.
        **extra: Further fields.
    """
    _emit(
        logger,
        SESSION_OUTCOME_LEVELS.get(outcome or "", logging.INFO),
        f"Transaction session: {stage} -> {result}",
        {
            "stage": stage,
            "result": result,
            "reference": reference,
            "outcome": outcome,
            "error": error,
            **extra,
        },
    )
