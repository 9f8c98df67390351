"""Read-only views of Razorpay entities.

Amounts are integer minor units (paise). Unknown fields are ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import PaymentStatus


class ProcessorOrder(BaseModel):
    """A Razorpay order."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., examples=["order_test123"])
    amount: int = Field(..., ge=0, description="Amount in minor units")
    currency: str
    receipt: Optional[str] = None
    status: Optional[str] = None


class ProcessorPayment(BaseModel):
    """A Razorpay payment."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., examples=["pay_test123"])
    amount: int = Field(..., ge=0, description="Amount in minor units")
    currency: str
    status: PaymentStatus
    order_id: Optional[str] = None
    method: Optional[str] = None
    captured: bool = False
    error_code: Optional[str] = None
    error_description: Optional[str] = None


class ProcessorRefund(BaseModel):
    """A Razorpay refund."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., examples=["rfnd_test123"])
    amount: int = Field(..., ge=0, description="Amount in minor units")
    currency: str
    status: str
    payment_id: Optional[str] = None
