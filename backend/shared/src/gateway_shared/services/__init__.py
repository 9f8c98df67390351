"""Services for Razorpay transaction sessions."""

from .action_classifier import ActionClassification, classify, failure_result_for
from .error_classifier import ErrorClassification, build_failure_response, classify_error
from .razorpay_service import RazorpayService
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .transaction_actions import get_transaction_actions
from .transaction_session import TransactionSessionService, fail_session

__all__ = [
    "ActionClassification",
    "classify",
    "failure_result_for",
    "ErrorClassification",
    "build_failure_response",
    "classify_error",
    "RazorpayService",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "get_transaction_actions",
    "TransactionSessionService",
    "fail_session",
]
