"""Unit tests for structured logging helpers."""

import logging

import pytest

from gateway_shared.utils.logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_processor_operation,
    log_session_event,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def no_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


class TestCorrelationId:
    def test_generates_when_missing(self):
        cid = set_correlation_id()
        assert cid
        assert get_correlation_id() == cid

    def test_keeps_incoming(self):
        assert set_correlation_id("abc-123") == "abc-123"

    def test_formatter_prefixes_id(self):
        set_correlation_id("abc-123")
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "hello", None, None)
        assert StructuredFormatter("%(message)s").format(record) == "[abc-123] hello"


class TestLogHelpers:
    """Test log levels chosen by the helpers."""

    def test_processor_success_is_info(self, caplog):
        logger = get_logger("test.processor")
        with caplog.at_level(logging.INFO, logger="test.processor"):
            log_processor_operation(logger, "create_order", order_id="order_1", amount_minor=200)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "order_id=order_1" in record.getMessage()
        assert record.amount_minor == 200

    def test_processor_error_is_error(self, caplog):
        logger = get_logger("test.processor")
        with caplog.at_level(logging.INFO, logger="test.processor"):
            log_processor_operation(logger, "fetch_payment", error="not found")

        assert caplog.records[-1].levelno == logging.ERROR

    @pytest.mark.parametrize(
        ("outcome", "level"),
        [
            ("success", logging.INFO),
            ("rejected", logging.WARNING),
            ("failure", logging.WARNING),
            ("exception", logging.ERROR),
        ],
    )
    def test_session_outcome_levels(self, caplog, outcome, level):
        logger = get_logger("test.session")
        with caplog.at_level(logging.INFO, logger="test.session"):
            log_session_event(logger, "process", "CHARGE_SUCCESS", reference="pay_abc", outcome=outcome)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.stage == "process"
        assert "reference=pay_abc" in record.getMessage()
