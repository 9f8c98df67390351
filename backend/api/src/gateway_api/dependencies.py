"""FastAPI dependency providers for the gateway services.

Configuration and services are built once per process with @lru_cache;
nothing in them is mutated after construction.

Usage in routes:
    from gateway_api.dependencies import get_optional_session_service

    @router.post("/transaction-initialize-session")
    async def initialize(
        sessions: Optional[TransactionSessionService] = Depends(get_optional_session_service),
    ):
        ...

Service Dependency Graph:
    GatewayConfig (env vars, SSM fallback)
        └── RazorpayService
                └── TransactionSessionService

Testing:
    Use reset_services() to clear cached instances between tests, or
    override the providers with app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from gateway_shared.config import GatewayConfig
from gateway_shared.models.errors import ConfigurationError
from gateway_shared.services.razorpay_service import RazorpayService
from gateway_shared.services.ssm_service import get_ssm_service
from gateway_shared.services.transaction_session import TransactionSessionService
from gateway_shared.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def get_gateway_config() -> GatewayConfig:
    """Get the cached gateway configuration.

    Raises:
        ConfigurationError: If Razorpay credentials cannot be found.
    """
    return GatewayConfig.from_environment()


@lru_cache
def get_razorpay_service() -> RazorpayService:
    """Get cached RazorpayService built from the gateway configuration."""
    return RazorpayService(get_gateway_config())


@lru_cache
def get_transaction_session_service() -> TransactionSessionService:
    """Get cached TransactionSessionService."""
    return TransactionSessionService(get_razorpay_service())


def get_optional_session_service() -> Optional[TransactionSessionService]:
    """Get the session service, or None while Razorpay is not configured.

    Session webhooks still owe the platform a failure body when credentials
    are missing, so the configuration error is logged here instead of raised.
    """
    try:
        return get_transaction_session_service()
    except ConfigurationError as e:
        logger.error("Gateway not configured: %s", e.message)
        return None


def reset_services() -> None:
    """Clear all cached service instances, including the SSM cache.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_gateway_config.cache_clear()
    get_razorpay_service.cache_clear()
    get_transaction_session_service.cache_clear()

    get_ssm_service().clear_cache()
    get_ssm_service.cache_clear()
