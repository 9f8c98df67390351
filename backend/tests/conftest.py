"""Pytest configuration and fixtures for the Razorpay transaction app tests.

This module provides reusable fixtures for testing:
- Gateway configuration with test credentials
- A mocked Razorpay SDK client (no network calls)
- Sample Razorpay entities and platform webhook payloads
"""

import os
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("ENVIRONMENT", "test")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from gateway_shared.config import GatewayConfig  # noqa: E402
from gateway_shared.services.razorpay_service import RazorpayService  # noqa: E402
from gateway_shared.services.transaction_session import TransactionSessionService  # noqa: E402

TEST_KEY_ID = "rzp_test_abc123"
TEST_KEY_SECRET = "secret_test_xyz789"
TEST_DASHBOARD_URL = "https://dashboard.razorpay.com/app"


# === Service Reset ===


@pytest.fixture(autouse=True)
def reset_cached_services() -> Generator[None, None, None]:
    """Clear cached config and services before and after each test."""
    from gateway_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === Configuration Fixtures ===


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Gateway configuration with Razorpay test credentials."""
    return GatewayConfig(
        key_id=TEST_KEY_ID,
        key_secret=SecretStr(TEST_KEY_SECRET),
        environment="test",
        dashboard_url=TEST_DASHBOARD_URL,
    )


@pytest.fixture
def razorpay_env() -> Generator[None, None, None]:
    """Razorpay credentials in the environment, as the API reads them."""
    with patch.dict(
        os.environ,
        {"RAZORPAY_KEY_ID": TEST_KEY_ID, "RAZORPAY_KEY_SECRET": TEST_KEY_SECRET},
    ):
        yield


# === Razorpay Fixtures ===


@pytest.fixture
def mock_razorpay_client() -> Generator[MagicMock, None, None]:
    """Mock Razorpay SDK client for API calls."""
    with patch("gateway_shared.services.razorpay_service.RazorpayClient") as mock_client_class:
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        yield mock_client


@pytest.fixture
def razorpay_service(gateway_config: GatewayConfig, mock_razorpay_client: MagicMock) -> RazorpayService:
    """RazorpayService wired to the mocked SDK client."""
    return RazorpayService(gateway_config)


@pytest.fixture
def session_service(razorpay_service: RazorpayService) -> TransactionSessionService:
    """TransactionSessionService wired to the mocked SDK client."""
    return TransactionSessionService(razorpay_service)


# === Sample Data Fixtures ===


def _order(**overrides: Any) -> dict[str, Any]:
    order = {
        "id": "order_test123",
        "entity": "order",
        "amount": 200,
        "amount_paid": 0,
        "currency": "INR",
        "receipt": "txn-1",
        "status": "created",
        "notes": {"checkout_id": "txn-1"},
    }
    order.update(overrides)
    return order


def _payment(**overrides: Any) -> dict[str, Any]:
    payment = {
        "id": "pay_abc",
        "entity": "payment",
        "amount": 200,
        "currency": "INR",
        "status": "authorized",
        "order_id": "order_test123",
        "method": "card",
        "captured": False,
        "error_code": None,
    }
    payment.update(overrides)
    return payment


def _refund(**overrides: Any) -> dict[str, Any]:
    refund = {
        "id": "rfnd_test456",
        "entity": "refund",
        "amount": 200,
        "currency": "INR",
        "payment_id": "pay_abc",
        "status": "processed",
    }
    refund.update(overrides)
    return refund


def _event(event_type: str, include_psp_reference: bool | None = None) -> dict[str, Any]:
    """Payload ``data`` object carrying the expected event."""
    event: dict[str, Any] = {"type": event_type}
    if include_psp_reference is not None:
        event["includePspReference"] = include_psp_reference
    return {"event": event}


@pytest.fixture
def initialize_payload() -> dict[str, Any]:
    """Canonical v1 transaction-initialize-session body."""
    return {
        "action": "CHARGE",
        "amount": 2.00,
        "currency": "INR",
        "transactionId": "txn-1",
        "data": _event("CHARGE_SUCCESS"),
    }


@pytest.fixture
def process_payload() -> dict[str, Any]:
    """Canonical v1 transaction-process-session body."""
    return {
        "action": "CHARGE",
        "amount": 2.00,
        "currency": "INR",
        "paymentId": "pay_abc",
        "data": _event("CHARGE_SUCCESS"),
    }


@pytest.fixture
def refund_payload() -> dict[str, Any]:
    """Canonical v1 transaction-refund-requested body."""
    return {
        "amount": 2.00,
        "currency": "INR",
        "transactionReference": "pay_abc",
        "data": _event("REFUND_SUCCESS"),
    }


@pytest.fixture
def make_order() -> Any:
    """Factory for Razorpay orders as returned by client.order.create."""
    return _order


@pytest.fixture
def make_payment() -> Any:
    """Factory for Razorpay payments as returned by client.payment.fetch."""
    return _payment


@pytest.fixture
def make_refund() -> Any:
    """Factory for Razorpay refunds as returned by client.payment.refund."""
    return _refund


@pytest.fixture
def make_event() -> Any:
    """Factory for the payload ``data`` object carrying the expected event."""
    return _event
