"""Builds platform-shaped SessionResponses from successful Razorpay calls."""

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from gateway_shared.models.transaction import ScalarValue, SessionRequest, SessionResponse
from gateway_shared.services.transaction_actions import get_transaction_actions
from gateway_shared.utils.money import as_wire_amount


def flatten_data(values: Mapping[str, Any]) -> dict[str, ScalarValue]:
    """Reduce audit fields to scalars.

    Strings, numbers and booleans pass through, ``None`` is dropped, and
    anything else (dicts, lists, enums) is stored as a string.
    """
    flat: dict[str, ScalarValue] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, (str, bool, int, float)):
            flat[key] = value
        elif isinstance(value, (dict, list, tuple)):
            flat[key] = json.dumps(value, sort_keys=True, default=str)
        else:
            flat[key] = str(value)
    return flat


def build_external_url(dashboard_url: str, entity: str, entity_id: str) -> str:
    """Deep link into the Razorpay dashboard, e.g. ``.../app/payments/pay_123``."""
    return f"{dashboard_url.rstrip('/')}/{entity}/{entity_id}"


def build_success_response(
    request: SessionRequest,
    *,
    psp_reference: str,
    message: str,
    data: Mapping[str, Any],
    external_url: Optional[str] = None,
    amount: Optional[float] = None,
) -> SessionResponse:
    """Build the response for a call Razorpay accepted.

    The result echoes the event type the platform declared, and the amount
    echoes the request amount in major units (``amount`` overrides it only
    when the request carried none).

    Args:
        request: The validated request.
        psp_reference: Razorpay ID proving the operation.
        message: Human-readable outcome.
        data: Audit fields; flattened to scalars.
        external_url: Dashboard link for the entity.
        amount: Fallback amount in major units.
    """
    result = request.event.type
    wire_amount = as_wire_amount(request.amount)
    if request.amount is None and amount is not None:
        wire_amount = amount

    return SessionResponse(
        psp_reference=psp_reference if request.event.include_psp_reference else None,
        result=result,
        message=message,
        amount=wire_amount,
        actions=get_transaction_actions(result),
        external_url=external_url,
        data=flatten_data(data),
    )
