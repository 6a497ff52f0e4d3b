"""
Wallet bookkeeping tools used by the web UI.

Wallets are connected by address only; signing and broadcasting stay in the
browser extension. These tools record connections, read balances, and check
the status of transactions the extension broadcast.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from secret_mcp.config import SecretConfig, default_config
from secret_mcp.secret_api import (
    InvalidAddressError,
    NodeUnreachableError,
    NotFoundError,
    SecretApiError,
    default_client,
)
from secret_mcp.tools.chain import get_scrt_balance
from secret_mcp.tools.validators import is_valid_secret_address, is_valid_tx_hash
from secret_mcp.wallets import default_wallets

logger = logging.getLogger(__name__)


async def connect_wallet(
    address: str,
    name: Optional[str] = None,
    is_hardware_wallet: bool = False,
    *,
    client=default_client,
    wallets=default_wallets,
) -> Dict[str, Any]:
    """Record a wallet connection after checking the account exists on chain."""
    if not is_valid_secret_address(address):
        return {"success": False, "error": "Invalid Secret Network address."}
    address = address.strip()
    try:
        await client.fetch_account(address)
    except (InvalidAddressError, NotFoundError):
        return {"success": False, "error": "Address not found on Secret Network."}
    except NodeUnreachableError:
        return {"success": False, "error": "Node unreachable"}
    except SecretApiError:
        return {"success": False, "error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error verifying wallet %s", address)
        return {"success": False, "error": "Unexpected error while connecting wallet."}

    connection = wallets.connect(address, name=name, is_hardware_wallet=is_hardware_wallet)
    logger.info("wallet connected", extra={"auth": "wallet"})
    return {"success": True, **connection.to_dict()}


async def get_wallet_balance(address: str, *, client=default_client) -> Dict[str, Any]:
    balance = await get_scrt_balance(address, client=client)
    if "error" in balance:
        return {"success": False, "error": balance["error"]}
    return {
        "success": True,
        "balance": balance["amount"],
        "denom": balance["denom"],
        "formatted": f"{balance['balance']} SCRT",
    }


def get_wallet_info(address: str, *, wallets=default_wallets) -> Dict[str, Any]:
    connection = wallets.get((address or "").strip())
    if connection is None:
        return {"success": False, "error": "Wallet not connected."}
    return {"success": True, "wallet": connection.to_dict()}


def disconnect_wallet(address: str, *, wallets=default_wallets) -> Dict[str, Any]:
    removed = wallets.disconnect((address or "").strip())
    return {"success": removed, "disconnected": removed}


def get_wallet_status(
    *, wallets=default_wallets, config: SecretConfig = default_config
) -> Dict[str, Any]:
    return {
        "success": True,
        "chainId": config.chain_id,
        "connectedWallets": wallets.count(),
        "serviceStatus": "operational",
        "lastUpdate": datetime.now(timezone.utc).isoformat(),
    }


async def get_transaction_status(tx_hash: str, *, client=default_client) -> Dict[str, Any]:
    """Report whether a broadcast transaction succeeded, failed, or is not indexed yet."""
    if not is_valid_tx_hash(tx_hash):
        return {"success": False, "error": "Invalid transaction hash."}
    normalized = tx_hash.strip().upper()
    try:
        raw = await client.fetch_transaction(normalized)
    except NotFoundError:
        return {"success": True, "txHash": normalized, "status": "pending"}
    except NodeUnreachableError:
        return {"success": False, "error": "Node unreachable"}
    except SecretApiError:
        return {"success": False, "error": "Secret Network API error."}
    except Exception:
        logger.exception("Unexpected error checking transaction %s", normalized)
        return {"success": False, "error": "Unexpected error while checking transaction."}

    response = raw.get("tx_response") if isinstance(raw, dict) else None
    response = response if isinstance(response, dict) else {}
    height = response.get("height")
    return {
        "success": True,
        "txHash": normalized,
        "status": "success" if response.get("code", 0) == 0 else "failed",
        "blockHeight": int(height) if height is not None else None,
    }
