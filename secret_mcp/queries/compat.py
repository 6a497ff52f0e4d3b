"""
Flat query-formatting functions kept for callers that predate the builders.

Authenticated variants delegate to QueryFactory. format_token_balance_query
keeps a deprecated fallback to the old, looser permit cleaning when the
validated path rejects a permit; every use of it is logged and counted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from secret_mcp.config import default_config
from secret_mcp.metrics import default_metrics
from secret_mcp.queries.auth import AuthenticatedQuery, NoAuth
from secret_mcp.queries.errors import PermitValidationError, QueryError
from secret_mcp.queries.factory import QueryFactory
from secret_mcp.queries.permits import DEFAULT_CHAIN_ID, discarded_fields
from secret_mcp.queries.token import BalanceQuery

logger = logging.getLogger(__name__)


def format_token_balance_query(
    address: str,
    viewing_key: Optional[str] = None,
    permit: Any = None,
    *,
    allow_legacy_fallback: Optional[bool] = None,
) -> AuthenticatedQuery:
    """
    Build a token balance query from optional credentials.

    A permit wins over a viewing key. The address is only used with a viewing
    key; permit queries derive it from the signature.

    Only a QueryError from the validated permit path triggers the legacy
    fallback. Any other exception propagates unchanged.
    """
    if permit:
        try:
            return QueryFactory.token_balance_with_permit(permit).build()
        except QueryError as exc:
            fallback = (
                default_config.legacy_permit_fallback
                if allow_legacy_fallback is None
                else allow_legacy_fallback
            )
            if not fallback:
                raise
            logger.warning(
                "permit rejected (%s); using deprecated legacy permit cleaning",
                exc,
                extra={"auth": "permit", "query_type": "token_balance", "error": str(exc)},
            )
            default_metrics.incr_legacy_permit_fallback()
            return format_legacy_permit_query(permit)

    if viewing_key:
        return QueryFactory.token_balance_with_viewing_key(address, viewing_key).build()

    return BalanceQuery.create().with_auth(NoAuth()).build()


def format_legacy_permit_query(permit: Any) -> AuthenticatedQuery:
    """
    Deprecated permit cleaning: copies known fields without validating them.

    pub_key.type is passed through unchanged; missing params are dropped
    rather than rejected.
    """
    if not isinstance(permit, Mapping):
        raise PermitValidationError("Invalid permit: permit must be an object")

    raw_params = permit.get("params")
    params: Mapping[str, Any] = raw_params if isinstance(raw_params, Mapping) else {}

    signature = permit.get("signature")
    if isinstance(signature, Mapping):
        signature = dict(signature)
        pub_key = signature.get("pub_key")
        if isinstance(pub_key, Mapping) and pub_key.get("type"):
            signature["pub_key"] = dict(pub_key)

    clean_params: Dict[str, Any] = {
        "permit_name": params.get("permit_name"),
        "allowed_tokens": _copy_list(params.get("allowed_tokens")),
        "permissions": _copy_list(params.get("permissions")),
        "chain_id": params.get("chain_id") or permit.get("chain_id") or DEFAULT_CHAIN_ID,
    }
    clean_params = {key: value for key, value in clean_params.items() if value is not None}

    logger.debug(
        "legacy permit cleaned discarded=%s",
        discarded_fields(permit),
        extra={"auth": "permit"},
    )
    return {
        "with_permit": {
            "permit": {"params": clean_params, "signature": signature},
            "query": {"balance": {}},
        }
    }


def _copy_list(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def format_token_info_query() -> AuthenticatedQuery:
    return QueryFactory.token_info().build()


def format_token_config_query() -> AuthenticatedQuery:
    return {"token_config": {}}


def format_exchange_rate_query() -> AuthenticatedQuery:
    return {"exchange_rate": {}}


def format_minters_query() -> AuthenticatedQuery:
    return {"minters": {}}


def format_allowance_query(owner: str, spender: str, viewing_key: Optional[str] = None) -> AuthenticatedQuery:
    allowance: Dict[str, Any] = {"owner": owner, "spender": spender}
    if viewing_key:
        allowance["key"] = viewing_key
    return {"allowance": allowance}


def format_nft_ownership_query(
    owner: str, viewing_key: Optional[str] = None, limit: int = 30
) -> AuthenticatedQuery:
    """SNIP-721 ``tokens`` query; the owner acts as viewer when a key is given."""
    tokens: Dict[str, Any] = {"owner": owner}
    if viewing_key:
        tokens["viewer"] = owner
        tokens["viewing_key"] = viewing_key
    tokens["limit"] = limit
    return {"tokens": tokens}


def format_all_tokens_query(start_after: Optional[str] = None, limit: int = 30) -> AuthenticatedQuery:
    all_tokens: Dict[str, Any] = {"limit": limit}
    if start_after:
        all_tokens["start_after"] = start_after
    return {"all_tokens": all_tokens}


def format_nft_contract_info_query() -> AuthenticatedQuery:
    return {"contract_info": {}}


def format_num_tokens_query() -> AuthenticatedQuery:
    return {"num_tokens": {}}


def format_tokens_for_sale_query(limit: int = 30) -> AuthenticatedQuery:
    return {"tokens_for_sale": {"limit": limit}}


def format_batch_query(queries: List[Dict[str, Any]]) -> AuthenticatedQuery:
    return {"batch": {"queries": list(queries)}}
