"""HTTP client wrappers for the Secret Network LCD and contract query proxy."""

from .client import (
    ContractQueryError,
    ContractQueryUnavailableError,
    InvalidAddressError,
    NodeUnreachableError,
    NotFoundError,
    SecretApiClient,
    SecretApiError,
    default_client,
)

__all__ = [
    "SecretApiClient",
    "SecretApiError",
    "InvalidAddressError",
    "NotFoundError",
    "NodeUnreachableError",
    "ContractQueryError",
    "ContractQueryUnavailableError",
    "default_client",
]
