"""SNIP-20/25 token tools backed by the known-token registry."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from secret_mcp.metrics import default_metrics
from secret_mcp.queries import PermitAuth, QueryError
from secret_mcp.queries.compat import format_token_balance_query, format_token_info_query
from secret_mcp.registry import NFTS, TOKENS, TokenInfo, find_token, list_token_symbols
from secret_mcp.secret_api import (
    ContractQueryError,
    ContractQueryUnavailableError,
    NodeUnreachableError,
    SecretApiError,
    default_client,
)
from secret_mcp.tools.formatting import format_units
from secret_mcp.tools.validators import is_valid_secret_address

logger = logging.getLogger(__name__)

AUTH_ERROR_MARKERS = ("viewing_key", "viewing key", "permit", "unauthorized")
BOTH_CREDENTIALS_ERROR = "Provide either a viewing key or a permit, not both."


def auth_type_for(viewing_key: Optional[str], permit: Any) -> str:
    if permit:
        return "permit"
    if viewing_key:
        return "viewing_key"
    return "none"


def is_auth_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in AUTH_ERROR_MARKERS)


def _token_not_found(token: str) -> Dict[str, Any]:
    return {"error": f"Token not found: {token}", "availableTokens": list_token_symbols()}


def _auth_required(token: TokenInfo, auth_type: str) -> Dict[str, Any]:
    attempted = {"permit": "permit", "viewing_key": "viewing key"}.get(auth_type, "none")
    return {
        "error": (
            f"Cannot query {token.symbol} balance: this token requires authentication. "
            "Use a SNIP-24 permit (preferred) or a viewing key."
        ),
        "authAttempted": attempted,
    }


def _permit_excludes_token(permit: Any, contract_address: str) -> bool:
    """True when a well-formed permit restricts itself to other contracts."""
    try:
        auth = PermitAuth(permit)
    except QueryError:
        return False
    return not auth.covers_token(contract_address)


async def query_token_balance(
    token: str,
    address: str,
    viewing_key: Optional[str] = None,
    permit: Optional[Dict[str, Any]] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    """
    Query a private SNIP-20/25 balance using a viewing key or a SNIP-24 permit.

    ``token`` may be a symbol, a name fragment, or an alias ("wrapped eth").
    """
    token_info = find_token(token)
    if token_info is None:
        return _token_not_found(token)
    if not is_valid_secret_address(address):
        return {"error": "Invalid Secret Network address."}
    if viewing_key and permit:
        return {"error": BOTH_CREDENTIALS_ERROR}
    address = address.strip()
    auth_type = auth_type_for(viewing_key, permit)

    if permit and _permit_excludes_token(permit, token_info.address):
        return {"error": f"Permit does not cover the {token_info.symbol} contract."}

    try:
        query = format_token_balance_query(address, viewing_key, permit)
    except QueryError as exc:
        return {"error": str(exc)}

    default_metrics.record_auth(auth_type)
    try:
        result = await client.query_contract(
            token_info.address, query, code_hash=token_info.code_hash
        )
    except ContractQueryUnavailableError as exc:
        return {"error": str(exc)}
    except ContractQueryError as exc:
        if is_auth_error(str(exc)):
            return _auth_required(token_info, auth_type)
        return {"error": f"Contract query failed: {exc}"}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception(
            "Unexpected error querying %s balance", token_info.symbol, extra={"auth": auth_type}
        )
        return {"error": "Unexpected error while querying token balance."}

    if isinstance(result, Mapping) and "viewing_key_error" in result:
        return _auth_required(token_info, auth_type)

    balance = result.get("balance") if isinstance(result, Mapping) else None
    amount = balance.get("amount", "0") if isinstance(balance, Mapping) else "0"
    return {
        "token": token_info.symbol,
        "name": token_info.name,
        "contract": token_info.address,
        "address": address,
        "amount": str(amount),
        "balance": format_units(amount, token_info.decimals),
        "decimals": token_info.decimals,
        "authMethod": auth_type,
    }


async def query_token_info(token: str, *, client=default_client) -> Dict[str, Any]:
    token_info = find_token(token)
    if token_info is None:
        return _token_not_found(token)

    default_metrics.record_auth("none")
    try:
        result = await client.query_contract(
            token_info.address, format_token_info_query(), code_hash=token_info.code_hash
        )
    except ContractQueryUnavailableError as exc:
        return {"error": str(exc)}
    except ContractQueryError as exc:
        return {"error": f"Contract query failed: {exc}"}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error querying %s token info", token_info.symbol)
        return {"error": "Unexpected error while querying token info."}

    info = result.get("token_info") if isinstance(result, Mapping) else None
    info = info if isinstance(info, Mapping) else {}
    decimals = info.get("decimals", token_info.decimals)
    total_supply = info.get("total_supply")
    return {
        "name": info.get("name") or token_info.name,
        "symbol": info.get("symbol") or token_info.symbol,
        "decimals": decimals,
        "totalSupply": format_units(total_supply, token_info.decimals, places=2)
        if total_supply is not None
        else None,
        "contract": token_info.address,
        "type": token_info.type,
        "category": token_info.category,
    }


def list_known_tokens() -> Dict[str, Any]:
    """List the registry: tokens (symbol, name, category) and NFT collections."""
    tokens = [
        {"symbol": token.symbol, "name": token.name, "category": token.category, "type": token.type}
        for token in TOKENS.values()
    ]
    nfts = [{"name": nft.name, "symbol": nft.symbol, "type": nft.type} for nft in NFTS.values()]
    return {"tokens": tokens, "nfts": nfts, "tokenCount": len(tokens), "nftCount": len(nfts)}
