"""Shortcuts pairing query builders with auth methods for common cases."""

from __future__ import annotations

from typing import Any, Optional

from secret_mcp.queries.auth import AuthMethod, NoAuth, PermitAuth, ViewingKeyAuth
from secret_mcp.queries.nft import NFTOwnershipQuery
from secret_mcp.queries.token import AllowanceQuery, BalanceQuery, TokenInfoQuery


class QueryFactory:
    """
    Each helper returns a configured builder; call ``build()`` on the result.

    Raw permits are validated when the helper runs, so a malformed permit
    fails before any builder is returned.
    """

    @staticmethod
    def token_balance_with_permit(raw_permit: Any) -> BalanceQuery:
        return BalanceQuery.create().with_auth(PermitAuth(raw_permit))

    @staticmethod
    def token_balance_with_viewing_key(address: str, viewing_key: str) -> BalanceQuery:
        return BalanceQuery.create().with_auth(ViewingKeyAuth(address, viewing_key))

    @staticmethod
    def token_info() -> TokenInfoQuery:
        return TokenInfoQuery.create().with_auth(NoAuth())

    @staticmethod
    def allowance_with_permit(owner: str, spender: str, raw_permit: Any) -> AllowanceQuery:
        return AllowanceQuery.between(owner, spender).with_auth(PermitAuth(raw_permit))

    @staticmethod
    def nft_ownership_with_permit(owner: str, raw_permit: Any) -> NFTOwnershipQuery:
        return NFTOwnershipQuery.for_owner(owner).with_auth(PermitAuth(raw_permit))

    @staticmethod
    def auth_for(
        address: Optional[str] = None,
        viewing_key: Optional[str] = None,
        permit: Any = None,
    ) -> AuthMethod:
        """Pick the auth method for optional credentials, preferring a permit."""
        if permit:
            return PermitAuth(permit)
        if viewing_key:
            return ViewingKeyAuth(address or "", viewing_key)
        return NoAuth()
