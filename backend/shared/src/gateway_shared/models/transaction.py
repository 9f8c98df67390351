"""Transaction session models: inbound payloads, parsed requests, responses.

Payload models describe the canonical v1 body of each webhook stage.
Downstream code only ever sees ``SessionRequest`` and ``TransactionEvent``.
"""

from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
)
from pydantic.alias_generators import to_camel

from gateway_shared.utils.money import MAX_MAJOR_AMOUNT

from .enums import SessionStage, TransactionAction, TransactionEventType

PAYLOAD_VERSION = "v1"

# Values allowed in SessionResponse.data (bool first so True stays a bool)
ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class TransactionEvent(BaseModel):
    """Event the platform expects the adapter to report.

    Parsed from the payload's ``data.event`` object.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: TransactionEventType = Field(
        ...,
        description="Expected transaction event type",
        examples=["CHARGE_SUCCESS"],
    )
    include_psp_reference: StrictBool = Field(
        default=True,
        alias="includePspReference",
        description="Whether the response must carry a pspReference",
    )


# === Inbound payloads (v1) ===


class _SessionPayload(BaseModel):
    """Fields shared by every stage payload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=MAX_MAJOR_AMOUNT,
        description="Amount in major units (e.g. rupees)",
        examples=[2.00],
    )
    currency: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="ISO-4217 currency code; the payment's or configured currency when absent",
        examples=["INR"],
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque payload data; must contain the event object",
    )


class InitializeSessionPayload(_SessionPayload):
    """Body of the transaction-initialize-session webhook."""

    action: TransactionAction = TransactionAction.CHARGE
    amount: Decimal = Field(
        ..., gt=0, le=MAX_MAJOR_AMOUNT, description="Amount in major units"
    )
    transaction_id: str = Field(
        ...,
        min_length=1,
        alias="transactionId",
        description="Platform transaction identifier",
        examples=["txn-1"],
    )
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")


class ProcessSessionPayload(_SessionPayload):
    """Body of the transaction-process-session webhook."""

    action: TransactionAction = TransactionAction.CHARGE
    payment_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("paymentId", "razorpay_payment_id"),
        description="Razorpay payment ID returned by checkout",
        examples=["pay_abc"],
    )


class ReferencedSessionPayload(_SessionPayload):
    """Body of the charge-, refund- and cancel-requested webhooks."""

    transaction_reference: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("transactionReference", "payment_id"),
        description="pspReference of the transaction (Razorpay payment ID)",
        examples=["pay_abc"],
    )


class RefundRequestedPayload(ReferencedSessionPayload):
    """Body of the transaction-refund-requested webhook."""

    amount: Decimal = Field(
        ..., gt=0, le=MAX_MAJOR_AMOUNT, description="Refund amount in major units"
    )


# === Parsed request ===


class SessionRequest(BaseModel):
    """Validated request for one webhook call. Never persisted."""

    model_config = ConfigDict(frozen=True)

    stage: SessionStage
    action: TransactionAction
    amount: Optional[Decimal] = None
    transaction_id: str
    # None when the payload named no currency
    currency: Optional[str] = None
    event: TransactionEvent
    raw_data: dict[str, Any] = Field(default_factory=dict)
    idempotency_key: Optional[str] = None


# === Response ===


class SessionResponse(BaseModel):
    """Platform-shaped answer to a transaction webhook.

    Serialized with camelCase keys; absent optional fields are omitted.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    psp_reference: Optional[str] = None
    result: TransactionEventType
    message: str
    amount: float
    actions: list[TransactionAction] = Field(default_factory=list)
    external_url: Optional[str] = None
    data: dict[str, ScalarValue] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON body sent back to the platform."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
