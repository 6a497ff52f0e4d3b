"""Native chain tools: balances, blocks, accounts, transactions and raw contract queries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from secret_mcp.config import SecretConfig, default_config
from secret_mcp.secret_api import (
    ContractQueryError,
    ContractQueryUnavailableError,
    InvalidAddressError,
    NodeUnreachableError,
    NotFoundError,
    SecretApiError,
    default_client,
)
from secret_mcp.tools.formatting import SCRT_DECIMALS, format_units, to_base_units
from secret_mcp.tools.validators import (
    is_valid_contract_address,
    is_valid_secret_address,
    is_valid_tx_hash,
    parse_height,
)

logger = logging.getLogger(__name__)

MSG_SEND_TYPE = "/cosmos.bank.v1beta1.MsgSend"


def _nested(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


async def get_scrt_balance(address: str, *, client=default_client) -> Dict[str, Any]:
    """Return the native SCRT balance for an address."""
    if not is_valid_secret_address(address):
        return {"error": "Invalid Secret Network address."}
    address = address.strip()
    try:
        raw = await client.fetch_balance(address, denom="uscrt")
    except InvalidAddressError:
        return {"error": "Invalid Secret Network address."}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error fetching balance for %s", address)
        return {"error": "Unexpected error while retrieving balance."}

    amount = _nested(raw, "balance", "amount") or "0"
    return {
        "address": address,
        "denom": "uscrt",
        "amount": str(amount),
        "balance": format_units(amount, SCRT_DECIMALS),
        "symbol": "SCRT",
    }


async def get_block(height: Optional[Any] = None, *, client=default_client) -> Dict[str, Any]:
    """Return a block summary; the latest block when ``height`` is omitted."""
    parsed: Optional[int] = None
    if height is not None:
        parsed = parse_height(height)
        if parsed is None:
            return {"error": "Invalid height."}
    try:
        raw = await client.fetch_block(parsed) if parsed is not None else await client.fetch_latest_block()
    except NotFoundError:
        return {"error": "Block not found."}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error fetching block %s", height)
        return {"error": "Unexpected error while retrieving block."}

    header = _nested(raw, "block", "header") or {}
    txs = _nested(raw, "block", "data", "txs") or []
    block_height = header.get("height")
    return {
        "height": int(block_height) if block_height is not None else None,
        "time": header.get("time"),
        "chainId": header.get("chain_id"),
        "hash": _nested(raw, "block_id", "hash"),
        "proposer": header.get("proposer_address"),
        "txCount": len(txs) if isinstance(txs, list) else 0,
    }


async def get_account(address: str, *, client=default_client) -> Dict[str, Any]:
    if not is_valid_secret_address(address):
        return {"error": "Invalid Secret Network address."}
    address = address.strip()
    try:
        raw = await client.fetch_account(address)
    except InvalidAddressError:
        return {"error": "Invalid Secret Network address."}
    except NotFoundError:
        return {"error": "Account not found on chain."}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error fetching account %s", address)
        return {"error": "Unexpected error while retrieving account."}

    account = raw.get("account") if isinstance(raw, Mapping) else None
    account = account if isinstance(account, Mapping) else {}
    return {
        "address": address,
        "type": account.get("@type"),
        "accountNumber": account.get("account_number"),
        "sequence": account.get("sequence"),
        "hasPubKey": account.get("pub_key") is not None,
    }


async def get_transaction(tx_hash: str, *, client=default_client) -> Dict[str, Any]:
    if not is_valid_tx_hash(tx_hash):
        return {"error": "Invalid transaction hash."}
    normalized = tx_hash.strip().upper()
    try:
        raw = await client.fetch_transaction(normalized)
    except NotFoundError:
        return {"error": "Transaction not found."}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error fetching transaction %s", normalized)
        return {"error": "Unexpected error while retrieving transaction."}

    response = _nested(raw, "tx_response") or {}
    code = response.get("code", 0)
    events = response.get("events") or []
    height = response.get("height")
    return {
        "txHash": response.get("txhash", normalized),
        "height": int(height) if height is not None else None,
        "code": code,
        "success": code == 0,
        "gasUsed": response.get("gas_used"),
        "gasWanted": response.get("gas_wanted"),
        "timestamp": response.get("timestamp"),
        "eventCount": len(events) if isinstance(events, list) else 0,
    }


async def query_contract(
    contract_address: str,
    query: Any,
    code_hash: Optional[str] = None,
    *,
    client=default_client,
) -> Dict[str, Any]:
    """Run a raw smart-contract query; the query body is passed through untouched."""
    if not is_valid_contract_address(contract_address):
        return {"error": "Invalid contract address."}
    if not isinstance(query, Mapping) or not query:
        return {"error": "Query must be a non-empty object."}
    contract_address = contract_address.strip()
    try:
        result = await client.query_contract(contract_address, dict(query), code_hash=code_hash)
    except ContractQueryUnavailableError as exc:
        return {"error": str(exc)}
    except ContractQueryError as exc:
        return {"error": f"Contract query failed: {exc}"}
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error querying contract %s", contract_address)
        return {"error": "Unexpected error while querying contract."}
    return {"contractAddress": contract_address, "result": result}


async def get_network_status(
    *, client=default_client, config: SecretConfig = default_config
) -> Dict[str, Any]:
    try:
        raw = await client.fetch_node_info()
    except NodeUnreachableError:
        return {"error": "Node unreachable"}
    except SecretApiError:
        return {"error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error fetching node info")
        return {"error": "Unexpected error while retrieving network status."}

    return {
        "chainId": _nested(raw, "default_node_info", "network") or config.chain_id,
        "nodeVersion": _nested(raw, "default_node_info", "version"),
        "moniker": _nested(raw, "default_node_info", "moniker"),
        "appName": _nested(raw, "application_version", "name"),
        "appVersion": _nested(raw, "application_version", "version"),
        "lcdUrl": config.lcd_url,
    }


def prepare_send_tokens(
    from_address: str,
    to_address: str,
    amount: Any,
    memo: Optional[str] = None,
    *,
    config: SecretConfig = default_config,
) -> Dict[str, Any]:
    """
    Describe an unsigned SCRT transfer for a wallet extension to sign.

    ``amount`` is given in SCRT and converted to uscrt (rounded down). Nothing is
    signed or broadcast here.
    """
    if not is_valid_secret_address(from_address):
        return {"error": "Invalid sender address."}
    if not is_valid_secret_address(to_address):
        return {"error": "Invalid recipient address."}
    amount_uscrt = to_base_units(amount, SCRT_DECIMALS)
    if amount_uscrt is None:
        return {"error": "Invalid amount; must be a positive SCRT value."}
    if memo is not None and not isinstance(memo, str):
        return {"error": "Invalid memo."}

    sender = from_address.strip()
    recipient = to_address.strip()
    return {
        "chainId": config.chain_id,
        "messageType": MSG_SEND_TYPE,
        "transactionData": {
            "from": sender,
            "to": recipient,
            "amount": str(amount_uscrt),
            "denom": "uscrt",
            "memo": memo or "",
        },
        "amountScrt": format_units(amount_uscrt, SCRT_DECIMALS),
        "requiresWalletSigning": True,
    }
