"""Unit tests for RazorpayService.

Tests verify the service logic without making actual Razorpay API calls.
All Razorpay interactions are mocked.

Test categories:
- Initialization and lazy client creation
- create_order() parameters and parsing
- fetch_payment() / capture_payment() / refund_payment()
- Error wrapping (SDK errors, not found, network, malformed responses)
"""

from unittest.mock import MagicMock, patch

import pytest
import requests
from razorpay.errors import BadRequestError, ServerError
from razorpay.errors import GatewayError as RazorpayGatewayError

from gateway_shared.models.enums import PaymentStatus
from gateway_shared.models.errors import ErrorCode, GatewayError, GatewayNotFoundError
from gateway_shared.services.razorpay_service import RazorpayService, razorpay_error_code


# === Initialization Tests ===


class TestRazorpayServiceInitialization:
    """Test service initialization and client handling."""

    def test_client_lazy_initialized(self, gateway_config):
        """Client is not created until first use."""
        service = RazorpayService(gateway_config)
        assert service._client is None
        assert service.config is gateway_config

    def test_client_built_with_key_pair(self, gateway_config):
        with patch("gateway_shared.services.razorpay_service.RazorpayClient") as client_class:
            service = RazorpayService(gateway_config)
            service._get_client()
            service._get_client()

        client_class.assert_called_once_with(auth=("rzp_test_abc123", "secret_test_xyz789"))


# === create_order() Tests ===


class TestCreateOrder:
    """Test order creation."""

    def test_sends_minor_units_and_receipt(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock, make_order
    ):
        mock_razorpay_client.order.create.return_value = make_order()

        order = razorpay_service.create_order(
            amount_minor=200,
            currency="INR",
            receipt="txn-1",
            notes={"checkout_id": "txn-1"},
        )

        mock_razorpay_client.order.create.assert_called_once_with(
            data={
                "amount": 200,
                "currency": "INR",
                "receipt": "txn-1",
                "payment_capture": 1,
                "notes": {"checkout_id": "txn-1"},
            }
        )
        assert order.id == "order_test123"
        assert order.amount == 200

    def test_manual_capture_for_authorization(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock, make_order
    ):
        mock_razorpay_client.order.create.return_value = make_order()

        razorpay_service.create_order(
            amount_minor=200, currency="INR", receipt="txn-1", payment_capture=False
        )

        params = mock_razorpay_client.order.create.call_args.kwargs["data"]
        assert params["payment_capture"] == 0
        assert params["notes"] == {}

    def test_rejection_raises_gateway_error(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.order.create.side_effect = BadRequestError(
            "The amount must be atleast INR 1.00"
        )

        with pytest.raises(GatewayError) as exc_info:
            razorpay_service.create_order(amount_minor=50, currency="INR", receipt="txn-1")

        assert "atleast INR 1.00" in exc_info.value.message
        assert exc_info.value.processor_error_code == "BAD_REQUEST_ERROR"
        assert not isinstance(exc_info.value, GatewayNotFoundError)


# === Payment Tests ===


class TestPayments:
    """Test payment fetch, capture and refund."""

    def test_fetch_payment(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock, make_payment
    ):
        mock_razorpay_client.payment.fetch.return_value = make_payment()

        payment = razorpay_service.fetch_payment("pay_abc")

        mock_razorpay_client.payment.fetch.assert_called_once_with("pay_abc")
        assert payment.status is PaymentStatus.AUTHORIZED
        assert payment.order_id == "order_test123"
        assert payment.method == "card"

    def test_fetch_unknown_payment_raises_not_found(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.payment.fetch.side_effect = BadRequestError(
            "The id provided does not exist"
        )

        with pytest.raises(GatewayNotFoundError) as exc_info:
            razorpay_service.fetch_payment("pay_missing")

        assert exc_info.value.code is ErrorCode.PAYMENT_NOT_FOUND

    def test_capture_payment(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock, make_payment
    ):
        mock_razorpay_client.payment.capture.return_value = make_payment(
            status="captured", captured=True
        )

        payment = razorpay_service.capture_payment("pay_abc", 200, "INR")

        mock_razorpay_client.payment.capture.assert_called_once_with(
            "pay_abc", 200, {"currency": "INR"}
        )
        assert payment.status is PaymentStatus.CAPTURED
        assert payment.captured is True

    def test_refund_payment(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock, make_refund
    ):
        mock_razorpay_client.payment.refund.return_value = make_refund(amount=150)

        refund = razorpay_service.refund_payment("pay_abc", 150)

        mock_razorpay_client.payment.refund.assert_called_once_with("pay_abc", {"amount": 150})
        assert refund.id == "rfnd_test456"
        assert refund.amount == 150

    def test_verify_credentials(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.order.all.return_value = {"entity": "collection", "items": []}

        assert razorpay_service.verify_credentials() is True
        mock_razorpay_client.order.all.assert_called_once_with({"count": 1})


# === Error Handling Tests ===


class TestErrorHandling:
    """Test SDK and transport error wrapping."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (BadRequestError("bad"), "BAD_REQUEST_ERROR"),
            (RazorpayGatewayError("gateway"), "GATEWAY_ERROR"),
            (ServerError("server"), "SERVER_ERROR"),
        ],
    )
    def test_razorpay_error_code(self, error, code):
        assert razorpay_error_code(error) == code

    def test_server_error_wrapped(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.payment.refund.side_effect = ServerError("Internal server error")

        with pytest.raises(GatewayError) as exc_info:
            razorpay_service.refund_payment("pay_abc", 200)

        assert exc_info.value.processor_error_code == "SERVER_ERROR"
        assert exc_info.value.code is ErrorCode.GATEWAY_ERROR

    def test_network_error_wrapped(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.payment.fetch.side_effect = requests.ConnectionError("timed out")

        with pytest.raises(GatewayError) as exc_info:
            razorpay_service.fetch_payment("pay_abc")

        assert exc_info.value.processor_error_code == "NETWORK_ERROR"
        assert "timed out" in exc_info.value.message

    def test_malformed_response_wrapped(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.payment.fetch.return_value = {"id": "pay_abc"}

        with pytest.raises(GatewayError) as exc_info:
            razorpay_service.fetch_payment("pay_abc")

        assert "fetch_payment" in exc_info.value.message

    def test_no_retry_on_failure(
        self, razorpay_service: RazorpayService, mock_razorpay_client: MagicMock
    ):
        mock_razorpay_client.payment.capture.side_effect = RazorpayGatewayError("declined")

        with pytest.raises(GatewayError):
            razorpay_service.capture_payment("pay_abc", 200, "INR")

        assert mock_razorpay_client.payment.capture.call_count == 1
