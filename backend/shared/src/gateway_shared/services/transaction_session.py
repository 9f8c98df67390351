"""Transaction session service: the five webhook stages end to end.

Each stage runs envelope check -> lenient context read -> strict parse ->
classification -> Razorpay call -> response synthesis. Any failure after the
envelope check is converted into a failure SessionResponse here, so callers
only ever see a response (or an EnvelopeError for the 400 path).
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from gateway_shared.models.enums import (
    PaymentStatus,
    ProcessorOperation,
    SessionStage,
    TransactionAction,
)
from gateway_shared.models.errors import (
    EnvelopeError,
    ErrorCode,
    GatewayError,
    InternalError,
    TransactionError,
)
from gateway_shared.models.transaction import SessionRequest, SessionResponse
from gateway_shared.services.action_classifier import ActionClassification, classify
from gateway_shared.services.error_classifier import build_failure_response, classify_error
from gateway_shared.services.payload_validator import (
    RequestContext,
    check_envelope,
    parse_session_request,
    read_request_context,
)
from gateway_shared.services.razorpay_service import RazorpayService
from gateway_shared.services.response_builder import build_external_url, build_success_response
from gateway_shared.utils.logging import get_logger, log_session_event
from gateway_shared.utils.money import is_accepted_amount, to_major_units, to_minor_units
from gateway_shared.utils.receipt import build_order_notes, build_receipt

logger = get_logger(__name__)

Operation = Callable[[SessionRequest, ActionClassification], SessionResponse]


def _check_envelope(stage: SessionStage, payload: Any) -> None:
    try:
        check_envelope(stage, payload)
    except EnvelopeError as e:
        log_session_event(
            logger, stage.value, "envelope_rejected", outcome="rejected", error=e.message
        )
        raise


def _fail(context: RequestContext, exc: TransactionError) -> SessionResponse:
    classification = classify_error(exc)
    response = build_failure_response(context, classification)

    if classification.kind == "internal":
        outcome = "exception"
    elif classification.kind == "validation":
        outcome = "rejected"
    else:
        outcome = "failure"

    log_session_event(
        logger,
        context.stage.value,
        response.result.value,
        reference=context.reference,
        outcome=outcome,
        error=classification.message,
    )
    return response


def fail_session(stage: SessionStage, payload: Any, exc: TransactionError) -> SessionResponse:
    """Answer a stage with a failure body without running it.

    Used when the gateway cannot be built at all, e.g. while Razorpay
    credentials are unavailable.

    Raises:
        EnvelopeError: Under the same conditions as
            ``TransactionSessionService.handle``.
    """
    _check_envelope(stage, payload)
    return _fail(read_request_context(stage, payload), exc)


class TransactionSessionService:
    """Translates platform transaction webhooks into Razorpay operations.

    Stateless per call: everything a stage needs arrives in its payload.

    Usage:
        sessions = TransactionSessionService(RazorpayService(config))
        response = sessions.initialize(payload)
        body = response.to_wire()
    """

    def __init__(self, razorpay_service: RazorpayService) -> None:
        self._razorpay = razorpay_service
        self._config = razorpay_service.config
        self._operations: dict[ProcessorOperation, Operation] = {
            ProcessorOperation.CREATE_ORDER: self._create_order,
            ProcessorOperation.CAPTURE_OR_FETCH: self._capture_or_fetch,
            ProcessorOperation.REFUND: self._refund,
            ProcessorOperation.CANCEL: self._cancel,
        }

    # === Stage entry points ===

    def initialize(self, payload: Any) -> SessionResponse:
        """TRANSACTION_INITIALIZE_SESSION: create the Razorpay order."""
        return self.handle(SessionStage.INITIALIZE, payload)

    def process(self, payload: Any) -> SessionResponse:
        """TRANSACTION_PROCESS_SESSION: fetch and, for charges, capture."""
        return self.handle(SessionStage.PROCESS, payload)

    def charge_requested(self, payload: Any) -> SessionResponse:
        """TRANSACTION_CHARGE_REQUESTED: capture an authorized payment."""
        return self.handle(SessionStage.CHARGE_REQUESTED, payload)

    def refund_requested(self, payload: Any) -> SessionResponse:
        """TRANSACTION_REFUND_REQUESTED: refund a captured payment."""
        return self.handle(SessionStage.REFUND_REQUESTED, payload)

    def cancel_requested(self, payload: Any) -> SessionResponse:
        """TRANSACTION_CANCELATION_REQUESTED: logical cancel, no Razorpay call."""
        return self.handle(SessionStage.CANCEL_REQUESTED, payload)

    def handle(self, stage: SessionStage, payload: Any) -> SessionResponse:
        """Run one stage and always produce a SessionResponse.

        Raises:
            EnvelopeError: Only when the body has neither a transaction
                reference nor event context.
        """
        _check_envelope(stage, payload)
        context = read_request_context(stage, payload)

        try:
            request = parse_session_request(stage, payload)
            classification = classify(request.action, stage)
            response = self._operations[classification.operation](request, classification)
        except TransactionError as e:
            return _fail(context, e)
        except Exception:  # every failure must become a failure body
            logger.exception("Unexpected error in %s session", stage.value)
            return _fail(context, InternalError())

        log_session_event(
            logger,
            stage.value,
            response.result.value,
            reference=request.transaction_id,
            outcome="success",
        )
        return response

    def gateway_initialize(self, payload: Any) -> dict[str, Any]:
        """PAYMENT_GATEWAY_INITIALIZE_SESSION: data for the checkout widget.

        Raises:
            EnvelopeError: If the body is not a JSON object or the amount
                is not a number.
        """
        if not isinstance(payload, dict):
            raise EnvelopeError("body", "Request body must be a JSON object")

        amount = payload.get("amount")
        if amount is not None:
            if isinstance(amount, bool):
                raise EnvelopeError("amount", "Amount must be a number")
            try:
                parsed = Decimal(str(amount))
            except InvalidOperation as e:
                raise EnvelopeError("amount", "Amount must be a number") from e
            if not is_accepted_amount(parsed):
                raise EnvelopeError("amount", "Amount must be a finite number in range")
            amount = float(parsed)

        currency = payload.get("currency") or self._config.default_currency
        return {
            "data": {
                "keyId": self._config.key_id,
                "amount": amount,
                "currency": str(currency).upper(),
                "name": self._config.gateway_name,
                "description": self._config.gateway_description,
                "supportedCurrencies": list(self._config.supported_currencies),
                "supportedPaymentMethods": list(self._config.supported_payment_methods),
            }
        }

    # === Operations ===

    def _create_order(
        self, request: SessionRequest, classification: ActionClassification
    ) -> SessionResponse:
        amount_minor = to_minor_units(request.amount)
        receipt = build_receipt(request.transaction_id)
        order = self._razorpay.create_order(
            amount_minor=amount_minor,
            currency=request.currency or self._config.default_currency,
            receipt=receipt,
            notes=build_order_notes(request.transaction_id, request.idempotency_key),
            # authorization flow leaves capture to a later charge request
            payment_capture=classification.action is TransactionAction.CHARGE,
        )

        return build_success_response(
            request,
            psp_reference=order.id,
            message="Razorpay order created",
            external_url=build_external_url(self._config.dashboard_url, "orders", order.id),
            data={
                "orderId": order.id,
                "amount": order.amount,
                "currency": order.currency,
                "receipt": order.receipt or receipt,
                "keyId": self._config.key_id,
            },
        )

    def _capture_or_fetch(
        self, request: SessionRequest, classification: ActionClassification
    ) -> SessionResponse:
        payment = self._razorpay.fetch_payment(request.transaction_id)

        if classification.action is TransactionAction.AUTHORIZATION:
            if payment.status not in (PaymentStatus.AUTHORIZED, PaymentStatus.CAPTURED):
                raise GatewayError(
                    f"Payment {payment.id} is not authorized (status '{payment.status.value}')",
                    code=ErrorCode.PAYMENT_NOT_CAPTURABLE,
                )
            message = "Payment authorized"
        elif payment.status is PaymentStatus.AUTHORIZED:
            amount_minor = (
                to_minor_units(request.amount) if request.amount is not None else payment.amount
            )
            payment = self._razorpay.capture_payment(
                payment.id, amount_minor, request.currency or payment.currency
            )
            message = "Payment captured successfully"
        elif payment.status is PaymentStatus.CAPTURED:
            message = "Payment already captured"
        else:
            message = f"Payment {payment.id} cannot be captured in status '{payment.status.value}'"
            if payment.error_description:
                message = f"{message}: {payment.error_description}"
            raise GatewayError(
                message,
                processor_error_code=payment.error_code,
                code=ErrorCode.PAYMENT_NOT_CAPTURABLE,
            )

        return build_success_response(
            request,
            psp_reference=payment.id,
            message=message,
            external_url=build_external_url(self._config.dashboard_url, "payments", payment.id),
            amount=to_major_units(payment.amount),
            data={
                "paymentId": payment.id,
                "orderId": payment.order_id,
                "status": payment.status,
                "method": payment.method,
                "amount": payment.amount,
                "currency": payment.currency,
                "captured": payment.captured,
            },
        )

    def _refund(
        self, request: SessionRequest, classification: ActionClassification
    ) -> SessionResponse:
        refund = self._razorpay.refund_payment(
            request.transaction_id, to_minor_units(request.amount)
        )

        return build_success_response(
            request,
            psp_reference=refund.id,
            message="Refund processed successfully",
            external_url=build_external_url(
                self._config.dashboard_url, "payments", request.transaction_id
            ),
            data={
                "refundId": refund.id,
                "paymentId": refund.payment_id or request.transaction_id,
                "status": refund.status,
                "amount": refund.amount,
                "currency": refund.currency,
            },
        )

    def _cancel(
        self, request: SessionRequest, classification: ActionClassification
    ) -> SessionResponse:
        # Razorpay cannot void authorized or captured funds; acknowledge only
        return build_success_response(
            request,
            psp_reference=request.transaction_id,
            message="Payment cancelled successfully",
            external_url=build_external_url(
                self._config.dashboard_url, "payments", request.transaction_id
            ),
            data={
                "paymentId": request.transaction_id,
                "currency": request.currency or self._config.default_currency,
                "status": "cancelled",
            },
        )
