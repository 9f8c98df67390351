"""Unit tests for GatewayConfig and the SSM credential fallback.

Test categories:
- Environment variable credentials
- SSM Parameter Store fallback (moto)
- Missing credentials
"""

import os
from typing import Generator
from unittest.mock import patch

import boto3
import pytest
from moto import mock_aws

from gateway_shared.config import GatewayConfig
from gateway_shared.models.errors import ConfigurationError
from gateway_shared.services.ssm_service import SSMService, SSMServiceError


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Environment without any Razorpay settings."""
    keep = {k: v for k, v in os.environ.items() if not k.startswith("RAZORPAY_")}
    with patch.dict(os.environ, keep, clear=True):
        yield


@pytest.fixture
def ssm_parameters(clean_env) -> Generator[None, None, None]:
    """Razorpay credentials stored in a mocked SSM Parameter Store."""
    with mock_aws():
        client = boto3.client("ssm", region_name="eu-west-1")
        client.put_parameter(
            Name="/razorpay/staging/key_id", Value="rzp_live_ssm", Type="SecureString"
        )
        client.put_parameter(
            Name="/razorpay/staging/key_secret", Value="ssm_secret", Type="SecureString"
        )
        SSMService._cache.clear()
        yield
        SSMService._cache.clear()


class TestFromEnvironment:
    """Test environment based configuration."""

    def test_reads_key_pair_from_environment(self, clean_env):
        with patch.dict(
            os.environ,
            {
                "RAZORPAY_KEY_ID": "rzp_test_env",
                "RAZORPAY_KEY_SECRET": "env_secret",
                "RAZORPAY_DEFAULT_CURRENCY": "USD",
                "ENVIRONMENT": "dev",
            },
        ):
            config = GatewayConfig.from_environment()

        assert config.key_id == "rzp_test_env"
        assert config.key_secret.get_secret_value() == "env_secret"
        assert config.default_currency == "USD"
        assert config.environment == "dev"
        assert config.is_test_mode is True

    def test_secret_not_in_repr(self, gateway_config):
        assert "secret_test_xyz789" not in repr(gateway_config)

    def test_is_immutable(self, gateway_config):
        with pytest.raises(Exception):
            gateway_config.key_id = "other"


class TestSSMFallback:
    """Test SSM Parameter Store fallback."""

    def test_reads_key_pair_from_ssm(self, ssm_parameters):
        config = GatewayConfig.from_environment("staging", ssm=SSMService())

        assert config.key_id == "rzp_live_ssm"
        assert config.key_secret.get_secret_value() == "ssm_secret"
        assert config.is_test_mode is False

    def test_missing_parameters_raise_configuration_error(self, ssm_parameters):
        with pytest.raises(ConfigurationError) as exc_info:
            GatewayConfig.from_environment("prod", ssm=SSMService())

        assert "/razorpay/prod/key_id" in exc_info.value.message

    def test_ssm_service_caches_values(self, ssm_parameters):
        ssm = SSMService()
        assert ssm.get_parameters(["/razorpay/staging/key_id"]) == ["rzp_live_ssm"]

        boto3.client("ssm", region_name="eu-west-1").delete_parameter(
            Name="/razorpay/staging/key_id"
        )

        assert ssm.get_parameters(["/razorpay/staging/key_id"]) == ["rzp_live_ssm"]
        with pytest.raises(SSMServiceError):
            ssm.get_parameters(["/razorpay/staging/key_id"], use_cache=False)

    def test_get_parameters_preserves_order(self, ssm_parameters):
        ssm = SSMService()

        values = ssm.get_parameters(
            ["/razorpay/staging/key_secret", "/razorpay/staging/key_id"]
        )

        assert values == ["ssm_secret", "rzp_live_ssm"]

    def test_get_parameters_reports_missing(self, ssm_parameters):
        with pytest.raises(SSMServiceError) as exc_info:
            SSMService().get_parameters(["/razorpay/staging/key_id", "/razorpay/staging/nope"])

        assert "/razorpay/staging/nope" in str(exc_info.value)
