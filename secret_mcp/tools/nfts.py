"""SNIP-721 collection tools."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from secret_mcp.config import SecretConfig, default_config
from secret_mcp.metrics import default_metrics
from secret_mcp.queries import QueryError, is_token_allowed, nft_tokens_query, validate_and_clean
from secret_mcp.queries.compat import format_nft_contract_info_query, format_nft_ownership_query
from secret_mcp.registry import NFTInfo, find_nft, list_nft_collections
from secret_mcp.secret_api import (
    ContractQueryError,
    ContractQueryUnavailableError,
    NodeUnreachableError,
    SecretApiError,
    default_client,
)
from secret_mcp.tools.tokens import BOTH_CREDENTIALS_ERROR, auth_type_for, is_auth_error
from secret_mcp.tools.validators import clamp_limit, is_valid_secret_address

logger = logging.getLogger(__name__)

PREVIEW_TOKEN_IDS = 10


def _collection_not_found(collection: str) -> Dict[str, Any]:
    return {
        "error": f"NFT collection not found: {collection}",
        "availableCollections": list_nft_collections(),
    }


def _extract_token_ids(result: Any) -> List[str]:
    tokens: Any = result
    if isinstance(tokens, Mapping):
        tokens = tokens.get("token_list", tokens)
    if isinstance(tokens, Mapping):
        tokens = tokens.get("tokens")
    if not isinstance(tokens, list):
        return []
    return [str(token_id) for token_id in tokens]


async def query_nft_ownership(
    collection: str,
    owner: str,
    viewing_key: Optional[str] = None,
    permit: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    start_after: Optional[str] = None,
    *,
    client=default_client,
    config: SecretConfig = default_config,
) -> Dict[str, Any]:
    """List token ids an owner holds in a known collection (viewing key or permit for private ones)."""
    nft = find_nft(collection)
    if nft is None:
        return _collection_not_found(collection)
    if not is_valid_secret_address(owner):
        return {"error": "Invalid Secret Network address."}
    if viewing_key and permit:
        return {"error": BOTH_CREDENTIALS_ERROR}
    owner = owner.strip()
    effective_limit = clamp_limit(
        limit, default=config.default_nft_results, max_value=config.max_nft_results
    )
    auth_type = auth_type_for(viewing_key, permit)

    try:
        if permit:
            # Wallet permits arrive raw; clean them before the permission checks.
            canonical = validate_and_clean(permit)
            if not is_token_allowed(canonical, nft.address):
                return {"error": f"Permit does not cover the {nft.name} contract."}
            query = nft_tokens_query(owner, canonical, start_after=start_after, limit=effective_limit)
        else:
            query = format_nft_ownership_query(owner, viewing_key, effective_limit)
            if start_after:
                query["tokens"]["start_after"] = start_after
    except QueryError as exc:
        return {"error": str(exc)}

    default_metrics.record_auth(auth_type)
    try:
        result = await client.query_contract(nft.address, query, code_hash=nft.code_hash)
    except ContractQueryUnavailableError as exc:
        return {"error": str(exc)}
    except ContractQueryError as exc:
        if is_auth_error(str(exc)):
            return _private_collection(nft, owner)
        return {"error": f"Contract query failed: {exc}"}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error querying %s ownership", nft.name, extra={"auth": auth_type})
        return {"error": "Unexpected error while querying NFT ownership."}

    if isinstance(result, Mapping) and "viewing_key_error" in result:
        return _private_collection(nft, owner)

    token_ids = _extract_token_ids(result)
    return {
        "collection": nft.name,
        "contract": nft.address,
        "owner": owner,
        "count": len(token_ids),
        "tokenIds": token_ids[:PREVIEW_TOKEN_IDS],
        "truncated": len(token_ids) > PREVIEW_TOKEN_IDS,
        "limit": effective_limit,
        "authMethod": auth_type,
    }


def _private_collection(nft: NFTInfo, owner: str) -> Dict[str, Any]:
    return {
        "error": (
            f"Cannot query NFT ownership in {nft.name}: private tokens need a viewing key or permit."
        ),
        "owner": owner,
    }


async def query_nft_info(collection: str, *, client=default_client) -> Dict[str, Any]:
    nft = find_nft(collection)
    if nft is None:
        return _collection_not_found(collection)

    default_metrics.record_auth("none")
    try:
        result = await client.query_contract(
            nft.address, format_nft_contract_info_query(), code_hash=nft.code_hash
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
        logger.exception("Unexpected error querying %s contract info", nft.name)
        return {"error": "Unexpected error while querying NFT collection info."}

    info = result.get("contract_info") if isinstance(result, Mapping) else None
    info = info if isinstance(info, Mapping) else {}
    return {
        "name": info.get("name") or nft.name,
        "symbol": info.get("symbol") or nft.symbol,
        "contract": nft.address,
        "type": nft.type,
    }
