"""Transaction-session webhook endpoints.

Provides endpoints for:
- transaction-initialize-session: create the Razorpay order
- transaction-process-session: confirm (and capture) the checkout payment
- transaction-charge-requested: capture an authorized payment
- transaction-refund-requested: refund a captured payment
- transaction-cancel-requested: acknowledge a cancel
- payment-gateway-initialize-session: checkout widget configuration

Every session endpoint answers 200 with a SessionResponse, including for
validation and Razorpay failures and missing Razorpay credentials. Only a
malformed outer envelope gets a 400.
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_200_OK

from gateway_api.dependencies import (
    get_optional_session_service,
    get_transaction_session_service,
)
from gateway_shared.models.enums import SessionStage
from gateway_shared.models.errors import ConfigurationError, EnvelopeError, FieldError
from gateway_shared.models.transaction import PAYLOAD_VERSION, SessionResponse
from gateway_shared.services.transaction_session import TransactionSessionService, fail_session
from gateway_shared.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix=f"/webhooks/{PAYLOAD_VERSION}", tags=["webhooks"])


# === Response Models ===


class EnvelopeErrorResponse(BaseModel):
    """400 body for requests that cannot be serviced at all."""

    errors: list[FieldError]
    data: None = None


SESSION_RESPONSES: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Session serviced; result carries success or failure",
        "model": SessionResponse,
    },
    400: {
        "description": "Body is not a JSON object or lacks any transaction context",
        "model": EnvelopeErrorResponse,
    },
}


# === Helper Functions ===


async def _read_payload(request: Request) -> Any:
    """Decode the JSON body; undecodable bodies are envelope errors."""
    body = await request.body()
    # bad JSON, bad UTF-8 and integers past the int conversion limit are all ValueError
    try:
        return json.loads(body)
    except ValueError as e:
        raise EnvelopeError("body", "Request body must be valid JSON") from e


async def _run_stage(
    sessions: Optional[TransactionSessionService], stage: SessionStage, request: Request
) -> JSONResponse:
    payload = await _read_payload(request)
    if sessions is None:
        response = fail_session(stage, payload, ConfigurationError())
    else:
        # Razorpay SDK calls block; keep them off the event loop
        response = await run_in_threadpool(sessions.handle, stage, payload)
    return JSONResponse(status_code=HTTP_200_OK, content=response.to_wire())


# === Session Endpoints ===


@router.post(
    "/transaction-initialize-session",
    summary="Initialize a transaction session",
    description="""
Creates a Razorpay order for the transaction.

**Payload:** `{action, amount, currency, transactionId, idempotencyKey, data: {event}}`

Transaction IDs longer than 40 characters are hashed into the order receipt;
the full ID is kept in the order notes as `checkout_id`.
""",
    response_model=SessionResponse,
    response_model_by_alias=True,
    responses=SESSION_RESPONSES,
)
async def transaction_initialize_session(
    request: Request,
    sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
) -> JSONResponse:
    return await _run_stage(sessions, SessionStage.INITIALIZE, request)


@router.post(
    "/transaction-process-session",
    summary="Process a transaction session",
    description="""
Fetches the checkout payment and, for CHARGE, captures it when authorized.

**Payload:** `{action, amount, currency, paymentId | razorpay_payment_id, data: {event}}`
""",
    response_model=SessionResponse,
    response_model_by_alias=True,
    responses=SESSION_RESPONSES,
)
async def transaction_process_session(
    request: Request,
    sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
) -> JSONResponse:
    return await _run_stage(sessions, SessionStage.PROCESS, request)


@router.post(
    "/transaction-charge-requested",
    summary="Capture an authorized transaction",
    description="**Payload:** `{amount, currency, transactionReference, data: {event}}`",
    response_model=SessionResponse,
    response_model_by_alias=True,
    responses=SESSION_RESPONSES,
)
async def transaction_charge_requested(
    request: Request,
    sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
) -> JSONResponse:
    return await _run_stage(sessions, SessionStage.CHARGE_REQUESTED, request)


@router.post(
    "/transaction-refund-requested",
    summary="Refund a transaction",
    description="**Payload:** `{amount, currency, transactionReference, data: {event}}`",
    response_model=SessionResponse,
    response_model_by_alias=True,
    responses=SESSION_RESPONSES,
)
async def transaction_refund_requested(
    request: Request,
    sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
) -> JSONResponse:
    return await _run_stage(sessions, SessionStage.REFUND_REQUESTED, request)


@router.post(
    "/transaction-cancel-requested",
    summary="Cancel a transaction",
    description="""
Acknowledges the cancel without calling Razorpay, which cannot void
authorized or captured funds.

**Payload:** `{transactionReference, data: {event}}`
""",
    response_model=SessionResponse,
    response_model_by_alias=True,
    responses=SESSION_RESPONSES,
)
async def transaction_cancel_requested(
    request: Request,
    sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
) -> JSONResponse:
    return await _run_stage(sessions, SessionStage.CANCEL_REQUESTED, request)


@router.post(
    "/payment-gateway-initialize-session",
    summary="Checkout widget configuration",
    description="Returns the public key and display settings for Razorpay checkout.",
    responses={400: {"model": EnvelopeErrorResponse}},
)
async def payment_gateway_initialize_session(
    request: Request,
    sessions: TransactionSessionService = Depends(get_transaction_session_service),
) -> dict[str, Any]:
    payload = await _read_payload(request)
    return sessions.gateway_initialize(payload)
