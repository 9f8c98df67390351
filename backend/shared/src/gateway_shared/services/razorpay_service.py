"""Razorpay gateway client for orders, payments and refunds.

Thin wrapper over the official ``razorpay`` SDK. Every call is a single
remote attempt; SDK and transport errors are wrapped in ``GatewayError``.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import requests
from pydantic import BaseModel, ValidationError
from razorpay import Client as RazorpayClient
from razorpay.errors import BadRequestError, ServerError
from razorpay.errors import GatewayError as RazorpayGatewayError

from gateway_shared.models.errors import GatewayError, GatewayNotFoundError
from gateway_shared.models.processor import ProcessorOrder, ProcessorPayment, ProcessorRefund
from gateway_shared.utils.logging import log_processor_operation

if TYPE_CHECKING:
    from gateway_shared.config import GatewayConfig

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Razorpay answers unknown IDs with a BAD_REQUEST_ERROR carrying this text
NOT_FOUND_MARKER = "does not exist"

# SDK exception class -> Razorpay error code
RAZORPAY_ERROR_CODES: dict[type[Exception], str] = {
    BadRequestError: "BAD_REQUEST_ERROR",
    RazorpayGatewayError: "GATEWAY_ERROR",
    ServerError: "SERVER_ERROR",
}


def razorpay_error_code(exc: Exception) -> str:
    """Map an SDK exception to its Razorpay error code."""
    for error_type, code in RAZORPAY_ERROR_CODES.items():
        if isinstance(exc, error_type):
            return code
    return "SERVER_ERROR"


class RazorpayService:
    """Service for Razorpay payment operations.

    Handles:
    - Order creation (one per transaction initialize)
    - Payment fetch and capture
    - Refunds
    - Credential verification

    Usage:
        razorpay_svc = RazorpayService(GatewayConfig.from_environment())
        order = razorpay_svc.create_order(
            amount_minor=200,
            currency="INR",
            receipt="txn-1",
            notes={"checkout_id": "txn-1"},
        )
    """

    def __init__(self, config: "GatewayConfig") -> None:
        """Initialize with an explicit gateway configuration.

        Args:
            config: Razorpay credentials and defaults.
        """
        self._config = config
        self._client: RazorpayClient | None = None

    @property
    def config(self) -> "GatewayConfig":
        return self._config

    def _get_client(self) -> RazorpayClient:
        """Get or create the Razorpay client (lazy initialization)."""
        if self._client is None:
            self._client = RazorpayClient(
                auth=(self._config.key_id, self._config.key_secret.get_secret_value())
            )
            logger.info(
                "Razorpay client initialized for environment: %s", self._config.environment
            )
        return self._client

    def _call(self, operation: str, func: Callable[[], Any]) -> Any:
        """Run one SDK call, translating its failures into GatewayError."""
        try:
            return func()
        except tuple(RAZORPAY_ERROR_CODES) as e:
            error_code = razorpay_error_code(e)
            message = str(e) or error_code
            log_processor_operation(logger, operation, error=message, error_code=error_code)
            if isinstance(e, BadRequestError) and NOT_FOUND_MARKER in message:
                raise GatewayNotFoundError(message, processor_error_code=error_code) from e
            raise GatewayError(message, processor_error_code=error_code) from e
        except requests.RequestException as e:
            log_processor_operation(logger, operation, error=str(e), error_code="NETWORK_ERROR")
            raise GatewayError(
                f"Razorpay request failed: {e}", processor_error_code="NETWORK_ERROR"
            ) from e

    @staticmethod
    def _parse(model: type[ModelT], payload: Any, operation: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.error("Unexpected Razorpay %s response: %s", operation, e)
            raise GatewayError(f"Unexpected Razorpay response for {operation}") from e

    def create_order(
        self,
        *,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
        payment_capture: bool = True,
    ) -> ProcessorOrder:
        """Create a Razorpay order.

        Args:
            amount_minor: Amount in paise.
            currency: ISO currency code.
            receipt: Receipt (max 40 characters), see ``build_receipt``.
            notes: Order notes (e.g. the full checkout ID).
            payment_capture: Auto-capture payments made against the order.

        Returns:
            The created order.

        Raises:
            GatewayError: If Razorpay rejects the order.
        """
        client = self._get_client()
        params = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1 if payment_capture else 0,
            "notes": notes or {},
        }

        order = self._parse(
            ProcessorOrder,
            self._call("create_order", lambda: client.order.create(data=params)),
            "create_order",
        )
        log_processor_operation(
            logger,
            "create_order",
            order_id=order.id,
            amount_minor=order.amount,
            receipt=receipt,
        )
        return order

    def fetch_payment(self, payment_id: str) -> ProcessorPayment:
        """Fetch a payment by ID.

        Raises:
            GatewayNotFoundError: If the payment does not exist.
            GatewayError: For any other Razorpay failure.
        """
        client = self._get_client()
        payment = self._parse(
            ProcessorPayment,
            self._call("fetch_payment", lambda: client.payment.fetch(payment_id)),
            "fetch_payment",
        )
        log_processor_operation(
            logger,
            "fetch_payment",
            payment_id=payment.id,
            amount_minor=payment.amount,
            status=payment.status.value,
        )
        return payment

    def capture_payment(
        self,
        payment_id: str,
        amount_minor: int,
        currency: str,
    ) -> ProcessorPayment:
        """Capture an authorized payment.

        Args:
            payment_id: Razorpay payment ID.
            amount_minor: Amount to capture in paise.
            currency: ISO currency code of the payment.

        Raises:
            GatewayError: If the capture is rejected.
        """
        client = self._get_client()
        payment = self._parse(
            ProcessorPayment,
            self._call(
                "capture_payment",
                lambda: client.payment.capture(payment_id, amount_minor, {"currency": currency}),
            ),
            "capture_payment",
        )
        log_processor_operation(
            logger,
            "capture_payment",
            payment_id=payment.id,
            amount_minor=amount_minor,
            status=payment.status.value,
        )
        return payment

    def refund_payment(self, payment_id: str, amount_minor: int) -> ProcessorRefund:
        """Refund (part of) a captured payment.

        Args:
            payment_id: Razorpay payment ID.
            amount_minor: Amount to refund in paise.

        Raises:
            GatewayError: If the refund is rejected.
        """
        client = self._get_client()
        refund = self._parse(
            ProcessorRefund,
            self._call(
                "refund_payment",
                lambda: client.payment.refund(payment_id, {"amount": amount_minor}),
            ),
            "refund_payment",
        )
        log_processor_operation(
            logger,
            "refund_payment",
            payment_id=payment_id,
            amount_minor=refund.amount,
            status=refund.status,
            refund_id=refund.id,
        )
        return refund

    def verify_credentials(self) -> bool:
        """Check the configured key pair with a read-only order listing.

        Raises:
            GatewayError: If Razorpay rejects the credentials.
        """
        client = self._get_client()
        self._call("verify_credentials", lambda: client.order.all({"count": 1}))
        log_processor_operation(logger, "verify_credentials", status="ok")
        return True
