"""SSM Parameter Store access for the Razorpay key pair.

Used only when RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET are absent from the
environment. Values are SecureStrings, decrypted on read and cached for the
life of the process.
"""

import logging
from functools import lru_cache
from typing import ClassVar

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when a parameter cannot be read from SSM."""


class SSMService:
    """Cached reader for SecureString parameters.

    Usage:
        ssm = SSMService()
        key_id, key_secret = ssm.get_parameters(
            ["/razorpay/dev/key_id", "/razorpay/dev/key_secret"]
        )
    """

    # Shared across instances so a rebuilt service keeps warm credentials
    _cache: ClassVar[dict[str, str]] = {}

    def __init__(self) -> None:
        self._client = boto3.client("ssm")

    @staticmethod
    def _to_error(name: str, error: ClientError) -> SSMServiceError:
        code = error.response.get("Error", {}).get("Code", "Unknown")
        if code == "ParameterNotFound":
            return SSMServiceError(f"SSM parameter not found: {name}")
        if code == "AccessDeniedException":
            return SSMServiceError(
                f"Access denied to SSM parameter: {name}. "
                "Check IAM permissions for ssm:GetParameters."
            )
        return SSMServiceError(f"Failed to retrieve SSM parameter {name}: {error}")

    def get_parameters(self, names: list[str], *, use_cache: bool = True) -> list[str]:
        """Read several decrypted parameters in one call, in the given order.

        Raises:
            SSMServiceError: If any parameter is missing or unreadable.
        """
        missing = [name for name in names if not (use_cache and name in self._cache)]
        if missing:
            logger.info("Fetching SSM parameters: %s", ", ".join(missing))
            try:
                response = self._client.get_parameters(Names=missing, WithDecryption=True)
            except ClientError as e:
                raise self._to_error(", ".join(missing), e) from e

            if response.get("InvalidParameters"):
                raise SSMServiceError(
                    f"SSM parameter not found: {', '.join(response['InvalidParameters'])}"
                )
            for parameter in response["Parameters"]:
                self._cache[parameter["Name"]] = parameter["Value"]

        return [self._cache[name] for name in names]

    def clear_cache(self) -> None:
        self._cache.clear()


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()
