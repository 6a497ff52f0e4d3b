"""
SNIP-721 query builders and permit-scoped NFT queries.

The permit helpers take an already canonical permit, check it grants the
permission the query needs, and return the ``with_permit`` envelope.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from secret_mcp.queries.auth import AuthenticatedQuery, QueryObject
from secret_mcp.queries.base import QueryBuilder, fluent
from secret_mcp.queries.errors import MissingFieldError, PermitValidationError
from secret_mcp.queries.permits import Permit, PermitLike, as_permit, has_permission, is_token_allowed

DEFAULT_OWNERSHIP_LIMIT = 100
DEFAULT_TOKENS_LIMIT = 30


class NFTOwnershipQuery(QueryBuilder):
    """Token ids owned by an address, paginated by ``start_after``."""

    def __init__(self) -> None:
        super().__init__()
        self.owner: Optional[str] = None
        self.limit: int = DEFAULT_OWNERSHIP_LIMIT
        self.start_after_token: Optional[str] = None

    @fluent
    def for_owner(self, owner: str) -> "NFTOwnershipQuery":
        self.owner = owner
        return self

    def with_limit(self, limit: int) -> "NFTOwnershipQuery":
        self.limit = limit
        return self

    def start_after(self, token_id: str) -> "NFTOwnershipQuery":
        self.start_after_token = token_id
        return self

    def build_query(self) -> QueryObject:
        if not self.owner:
            raise MissingFieldError("Owner address is required for NFT ownership query")
        tokens: Dict[str, Any] = {"owner": self.owner, "limit": self.limit}
        if self.start_after_token:
            tokens["start_after"] = self.start_after_token
        return {"tokens": tokens}

    def get_query_type(self) -> str:
        return "nft_ownership"


def _checked_permit(permit: PermitLike, permission: str, token_id: Optional[str] = None) -> Permit:
    canonical = as_permit(permit)
    if not has_permission(canonical, permission):
        raise PermitValidationError(f"Permit does not have required permission: {permission}")
    if token_id is not None and not is_token_allowed(canonical, token_id):
        raise PermitValidationError(f"Token {token_id} is not allowed by this permit")
    return canonical


def _with_permit(query: QueryObject, permit: Permit) -> AuthenticatedQuery:
    return {"with_permit": {"query": query, "permit": permit.to_dict()}}


def nft_owner_of_query(
    token_id: str, permit: PermitLike, include_expired: Optional[bool] = None
) -> AuthenticatedQuery:
    canonical = _checked_permit(permit, "owner", token_id)
    body: Dict[str, Any] = {"token_id": token_id}
    if include_expired is not None:
        body["include_expired"] = include_expired
    return _with_permit({"owner_of": body}, canonical)


def nft_info_query(token_id: str, permit: PermitLike) -> AuthenticatedQuery:
    canonical = _checked_permit(permit, "metadata", token_id)
    return _with_permit({"nft_info": {"token_id": token_id}}, canonical)


def nft_private_metadata_query(token_id: str, permit: PermitLike) -> AuthenticatedQuery:
    canonical = _checked_permit(permit, "private_metadata", token_id)
    return _with_permit({"private_metadata": {"token_id": token_id}}, canonical)


def nft_balance_query(owner: str, permit: PermitLike) -> AuthenticatedQuery:
    canonical = _checked_permit(permit, "balance")
    return _with_permit({"balance": {"owner": owner}}, canonical)


def nft_tokens_query(
    owner: str,
    permit: PermitLike,
    start_after: Optional[str] = None,
    limit: int = DEFAULT_TOKENS_LIMIT,
) -> AuthenticatedQuery:
    canonical = _checked_permit(permit, "tokens")
    body: Dict[str, Any] = {"owner": owner}
    if start_after:
        body["start_after"] = start_after
    body["limit"] = limit
    return _with_permit({"tokens": body}, canonical)
