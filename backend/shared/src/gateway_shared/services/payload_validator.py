"""Parses and validates inbound transaction webhook payloads.

Three entry points, used in this order by the session service:

1. ``check_envelope`` rejects bodies that carry neither a transaction
   reference nor any event context (answered with a 400).
2. ``read_request_context`` leniently reads what a failure body needs
   (action, amount, reference, includePspReference) without validating.
3. ``parse_session_request`` strictly validates the stage's v1 payload and
   returns the typed ``SessionRequest`` all downstream code works on.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gateway_shared.models.enums import SessionStage, TransactionAction
from gateway_shared.models.errors import EnvelopeError, PayloadValidationError
from gateway_shared.models.transaction import (
    InitializeSessionPayload,
    ProcessSessionPayload,
    ReferencedSessionPayload,
    RefundRequestedPayload,
    SessionRequest,
    TransactionEvent,
)
from gateway_shared.services.action_classifier import (
    STAGE_ACTIONS,
    default_action_for,
    results_for,
)
from gateway_shared.utils.money import is_accepted_amount

STAGE_PAYLOADS: dict[SessionStage, type[BaseModel]] = {
    SessionStage.INITIALIZE: InitializeSessionPayload,
    SessionStage.PROCESS: ProcessSessionPayload,
    SessionStage.CHARGE_REQUESTED: ReferencedSessionPayload,
    SessionStage.REFUND_REQUESTED: RefundRequestedPayload,
    SessionStage.CANCEL_REQUESTED: ReferencedSessionPayload,
}

# Wire names of the reference field per stage; the first one is canonical
STAGE_REFERENCE_FIELDS: dict[SessionStage, tuple[str, ...]] = {
    SessionStage.INITIALIZE: ("transactionId",),
    SessionStage.PROCESS: ("paymentId", "razorpay_payment_id"),
    SessionStage.CHARGE_REQUESTED: ("transactionReference", "payment_id"),
    SessionStage.REFUND_REQUESTED: ("transactionReference", "payment_id"),
    SessionStage.CANCEL_REQUESTED: ("transactionReference", "payment_id"),
}


@dataclass(frozen=True)
class RequestContext:
    """Best-effort view of a raw payload, used to answer failures."""

    stage: SessionStage
    action: TransactionAction
    amount: Optional[Decimal] = None
    reference: Optional[str] = None
    include_psp_reference: bool = True


def _format_location(location: tuple[Any, ...], prefix: str = "") -> str:
    parts = [str(part) for part in location]
    if prefix:
        parts.insert(0, prefix)
    return ".".join(parts)


def _to_validation_error(
    error: PydanticValidationError, prefix: str = ""
) -> PayloadValidationError:
    """Convert the first pydantic error into a PayloadValidationError."""
    first = error.errors()[0]
    field = _format_location(first["loc"], prefix) or prefix or None
    message = f"{field}: {first['msg']}" if field else first["msg"]
    return PayloadValidationError(message, field=field)


def _read_event(payload: dict[str, Any]) -> Any:
    data = payload.get("data")
    if isinstance(data, dict):
        return data.get("event")
    return None


def _read_reference(stage: SessionStage, payload: dict[str, Any]) -> Optional[str]:
    # First present alias wins, even when empty, as in the payload models
    for name in STAGE_REFERENCE_FIELDS[stage]:
        if name in payload:
            value = payload[name]
            return value if isinstance(value, str) and value else None
    return None


def check_envelope(stage: SessionStage, payload: Any) -> dict[str, Any]:
    """Reject payloads that cannot produce any compliant response.

    Args:
        stage: Webhook stage being serviced.
        payload: Decoded JSON body.

    Returns:
        The payload, typed as a mapping.

    Raises:
        EnvelopeError: If the body is not an object, or if it has neither a
            transaction reference nor a ``data.event`` object.
    """
    if not isinstance(payload, dict):
        raise EnvelopeError("body", "Request body must be a JSON object")

    if _read_reference(stage, payload) is None and _read_event(payload) is None:
        raise EnvelopeError(STAGE_REFERENCE_FIELDS[stage][0])

    return payload


def read_request_context(stage: SessionStage, payload: dict[str, Any]) -> RequestContext:
    """Read the fields a failure response needs, tolerating bad input."""
    action = default_action_for(stage)
    raw_action = payload.get("action")
    if isinstance(raw_action, str) and raw_action in TransactionAction.__members__:
        candidate = TransactionAction(raw_action)
        if candidate in STAGE_ACTIONS[stage]:
            action = candidate

    amount: Optional[Decimal] = None
    raw_amount = payload.get("amount")
    if isinstance(raw_amount, (int, float, str)) and not isinstance(raw_amount, bool):
        try:
            parsed = Decimal(str(raw_amount))
        except InvalidOperation:
            parsed = None
        if parsed is not None and is_accepted_amount(parsed):
            amount = parsed

    include_psp_reference = True
    event = _read_event(payload)
    if isinstance(event, dict) and isinstance(event.get("includePspReference"), bool):
        include_psp_reference = event["includePspReference"]

    return RequestContext(
        stage=stage,
        action=action,
        amount=amount,
        reference=_read_reference(stage, payload),
        include_psp_reference=include_psp_reference,
    )


def parse_transaction_event(data: Any) -> TransactionEvent:
    """Parse ``data.event`` into a TransactionEvent.

    ``type`` must be one of the eight event types; ``includePspReference``
    must be a boolean when present and defaults to True.

    Raises:
        PayloadValidationError: If the event is missing or malformed.
    """
    if not isinstance(data, dict) or "event" not in data:
        raise PayloadValidationError("data.event: Field required", field="data.event")

    try:
        return TransactionEvent.model_validate(data["event"])
    except PydanticValidationError as e:
        raise _to_validation_error(e, prefix="data.event") from e


def parse_session_request(stage: SessionStage, payload: dict[str, Any]) -> SessionRequest:
    """Validate a stage payload and build the SessionRequest.

    Args:
        stage: Webhook stage being serviced.
        payload: Decoded JSON body (already envelope-checked).

    Raises:
        PayloadValidationError: If any field is missing or invalid, or the
            declared event type is outside the action's result family.
    """
    try:
        body = STAGE_PAYLOADS[stage].model_validate(payload)
    except PydanticValidationError as e:
        raise _to_validation_error(e) from e

    event = parse_transaction_event(body.data)
    action = getattr(body, "action", default_action_for(stage))

    if event.type not in results_for(action):
        raise PayloadValidationError(
            f"data.event.type: {event.type.value} is not a result of action {action.value}",
            field="data.event.type",
        )

    if isinstance(body, InitializeSessionPayload):
        reference = body.transaction_id
    elif isinstance(body, ProcessSessionPayload):
        reference = body.payment_id
    else:
        reference = body.transaction_reference

    return SessionRequest(
        stage=stage,
        action=action,
        amount=body.amount,
        transaction_id=reference,
        currency=body.currency.upper() if body.currency else None,
        event=event,
        raw_data=body.data,
        idempotency_key=getattr(body, "idempotency_key", None),
    )
