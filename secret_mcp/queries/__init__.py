"""Query construction for Secret Network token and NFT contracts."""

from .errors import MissingFieldError, PermitValidationError, QueryError, UnsupportedAuthError
from .permits import (
    DEFAULT_CHAIN_ID,
    NFT_PERMIT_PERMISSIONS,
    Permit,
    PermitParams,
    PermitSignature,
    PubKey,
    discarded_fields,
    has_permission,
    is_token_allowed,
    validate_and_clean,
    validate_nft_permissions,
    validate_permit,
)
from .auth import AuthenticatedQuery, AuthMethod, NoAuth, PermitAuth, QueryObject, ViewingKeyAuth
from .base import AddressQueryBuilder, QueryBuilder, SimpleQueryBuilder
from .token import (
    AllowanceQuery,
    BalanceQuery,
    ExchangeRateQuery,
    LegacyBalanceQuery,
    MintersQuery,
    TokenConfigQuery,
    TokenInfoQuery,
)
from .nft import (
    NFTOwnershipQuery,
    nft_balance_query,
    nft_info_query,
    nft_owner_of_query,
    nft_private_metadata_query,
    nft_tokens_query,
)
from .factory import QueryFactory

__all__ = [
    "QueryError",
    "PermitValidationError",
    "MissingFieldError",
    "UnsupportedAuthError",
    "DEFAULT_CHAIN_ID",
    "NFT_PERMIT_PERMISSIONS",
    "Permit",
    "PermitParams",
    "PermitSignature",
    "PubKey",
    "discarded_fields",
    "has_permission",
    "is_token_allowed",
    "validate_and_clean",
    "validate_nft_permissions",
    "validate_permit",
    "AuthMethod",
    "NoAuth",
    "PermitAuth",
    "ViewingKeyAuth",
    "QueryObject",
    "AuthenticatedQuery",
    "QueryBuilder",
    "SimpleQueryBuilder",
    "AddressQueryBuilder",
    "BalanceQuery",
    "LegacyBalanceQuery",
    "TokenInfoQuery",
    "TokenConfigQuery",
    "ExchangeRateQuery",
    "MintersQuery",
    "AllowanceQuery",
    "NFTOwnershipQuery",
    "nft_owner_of_query",
    "nft_info_query",
    "nft_private_metadata_query",
    "nft_balance_query",
    "nft_tokens_query",
    "QueryFactory",
]
