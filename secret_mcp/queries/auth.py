"""
Authentication methods applied to contract queries.

The set of methods is fixed by the chain's credential standards: no auth,
viewing keys, and SNIP-24 permits. Permits wrap every query the same way;
viewing keys have to be threaded into the field each query variant expects.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping

from secret_mcp.queries.errors import MissingFieldError, UnsupportedAuthError
from secret_mcp.queries.permits import Permit, has_permission, is_token_allowed, validate_and_clean

logger = logging.getLogger(__name__)

QueryObject = Dict[str, Any]
AuthenticatedQuery = Dict[str, Any]

HISTORY_QUERIES = ("transfer_history", "transaction_history")


class AuthMethod(ABC):
    """Wraps a bare query object into an authenticated one."""

    auth_type: str = ""

    @abstractmethod
    def wrap(self, query: QueryObject) -> AuthenticatedQuery:
        raise NotImplementedError

    def get_type(self) -> str:
        return self.auth_type

    @abstractmethod
    def get_metadata(self) -> Dict[str, Any]:
        """Describe the credential without exposing secrets."""


class NoAuth(AuthMethod):
    """Public queries such as token metadata."""

    auth_type = "none"

    def wrap(self, query: QueryObject) -> AuthenticatedQuery:
        return query

    def get_metadata(self) -> Dict[str, Any]:
        return {"type": self.auth_type, "description": "Public query requiring no authentication"}


class ViewingKeyAuth(AuthMethod):
    auth_type = "viewing_key"

    def __init__(self, address: str, viewing_key: str) -> None:
        if not address:
            raise MissingFieldError("Address is required for viewing key authentication")
        if not viewing_key:
            raise MissingFieldError("Viewing key is required for viewing key authentication")
        self._address = address
        self._viewing_key = viewing_key

    @property
    def address(self) -> str:
        return self._address

    def _inner(self, query: Mapping[str, Any], key: str) -> Dict[str, Any]:
        body = query[key]
        if body is None:
            return {}
        if not isinstance(body, Mapping):
            raise UnsupportedAuthError(f"Viewing key authentication not supported for {key} body: {body!r}")
        return dict(body)

    def wrap(self, query: QueryObject) -> AuthenticatedQuery:
        """
        Inject the address and viewing key where the target query expects them.

        balance bodies are replaced by ``{address, key}``; allowance gets ``key``
        merged in; history queries get ``address`` and ``key`` merged in; any
        other query gets a top-level ``viewer`` entry alongside its content.
        """
        if not isinstance(query, Mapping):
            raise UnsupportedAuthError(
                f"Viewing key authentication not supported for query: {type(query).__name__}"
            )

        if "balance" in query:
            return {"balance": {"address": self._address, "key": self._viewing_key}}

        # An empty allowance body falls through to the viewer form.
        if query.get("allowance"):
            return {"allowance": {**self._inner(query, "allowance"), "key": self._viewing_key}}

        for history_key in HISTORY_QUERIES:
            if history_key in query:
                return {
                    history_key: {
                        **self._inner(query, history_key),
                        "address": self._address,
                        "key": self._viewing_key,
                    }
                }

        return {
            **query,
            "viewer": {"address": self._address, "viewing_key": self._viewing_key},
        }

    def get_metadata(self) -> Dict[str, Any]:
        return {"type": self.auth_type, "address": self._address, "hasKey": bool(self._viewing_key)}


class PermitAuth(AuthMethod):
    """SNIP-24 permit authentication; the raw permit is cleaned on construction."""

    auth_type = "permit"

    def __init__(self, raw_permit: Any) -> None:
        self._permit = validate_and_clean(raw_permit)

    @property
    def permit(self) -> Permit:
        return self._permit

    def wrap(self, query: QueryObject) -> AuthenticatedQuery:
        return {"with_permit": {"permit": self._permit.to_dict(), "query": query}}

    def covers_token(self, token_address: str) -> bool:
        return is_token_allowed(self._permit, token_address)

    def has_permission(self, permission: str) -> bool:
        return has_permission(self._permit, permission)

    def get_metadata(self) -> Dict[str, Any]:
        params = self._permit.params
        return {
            "type": self.auth_type,
            "permitName": params.permit_name,
            "tokenCount": len(params.allowed_tokens),
            "permissions": list(params.permissions),
            "chainId": params.chain_id,
            "pubKeyType": self._permit.signature.pub_key.type,
        }
