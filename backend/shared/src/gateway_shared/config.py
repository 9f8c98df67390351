"""Gateway configuration.

``GatewayConfig`` is built once at startup and passed explicitly into the
Razorpay service; nothing reads credentials from module-level state.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from gateway_shared.models.errors import ConfigurationError
from gateway_shared.services.ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "INR"
DEFAULT_DASHBOARD_URL = "https://dashboard.razorpay.com/app"


class GatewayConfig(BaseModel):
    """Razorpay credentials and adapter defaults."""

    model_config = ConfigDict(frozen=True)

    key_id: str = Field(..., min_length=1, examples=["rzp_test_abc123"])
    key_secret: SecretStr
    environment: str = "dev"
    default_currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    dashboard_url: str = DEFAULT_DASHBOARD_URL
    gateway_name: str = "Razorpay"
    gateway_description: str = "Pay securely with Razorpay"
    supported_currencies: tuple[str, ...] = ("INR", "USD", "EUR", "GBP")
    supported_payment_methods: tuple[str, ...] = ("card", "netbanking", "wallet", "upi")

    @property
    def is_test_mode(self) -> bool:
        """True for rzp_test_ keys."""
        return self.key_id.startswith("rzp_test_")

    @classmethod
    def from_environment(
        cls,
        environment: Optional[str] = None,
        ssm: Optional[SSMService] = None,
    ) -> "GatewayConfig":
        """Build the config from environment variables, falling back to SSM.

        Reads RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET first. When either is
        missing, both are read from ``/razorpay/{environment}/key_id`` and
        ``/razorpay/{environment}/key_secret``.

        Args:
            environment: Environment name. Defaults to ENVIRONMENT env var or "dev".
            ssm: SSM service to use for the fallback (defaults to the shared one).

        Raises:
            ConfigurationError: If no credentials can be found.
        """
        env = environment or os.environ.get("ENVIRONMENT", "dev")
        key_id = os.environ.get("RAZORPAY_KEY_ID")
        key_secret = os.environ.get("RAZORPAY_KEY_SECRET")

        if not key_id or not key_secret:
            ssm = ssm or get_ssm_service()
            try:
                key_id, key_secret = ssm.get_parameters(
                    [f"/razorpay/{env}/key_id", f"/razorpay/{env}/key_secret"]
                )
            except SSMServiceError as e:
                raise ConfigurationError(
                    f"Razorpay credentials not found in environment or SSM: {e}"
                ) from e
            logger.info("Razorpay credentials loaded from SSM for environment: %s", env)

        return cls(
            key_id=key_id,
            key_secret=SecretStr(key_secret),
            environment=env,
            default_currency=os.environ.get("RAZORPAY_DEFAULT_CURRENCY", DEFAULT_CURRENCY),
            dashboard_url=os.environ.get("RAZORPAY_DASHBOARD_URL", DEFAULT_DASHBOARD_URL),
        )
