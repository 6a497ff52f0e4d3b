"""
JSON-RPC surface for MCP-style tooling.

Maps tool names to the implementations in ``secret_mcp.tools`` and shapes
results into MCP content blocks. ``dispatch`` is shared by the HTTP gateway
and the stdio transport so both speak the same protocol.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from secret_mcp.config import default_config
from secret_mcp.metrics import default_metrics
from secret_mcp.queries import NFT_PERMIT_PERMISSIONS
from secret_mcp.tools import (
    connect_wallet,
    disconnect_wallet,
    get_account,
    get_block,
    get_network_status,
    get_scrt_balance,
    get_transaction,
    get_transaction_status,
    get_wallet_info,
    get_wallet_status,
    list_known_tokens,
    prepare_send_tokens,
    query_contract,
    query_nft_info,
    query_nft_ownership,
    query_token_balance,
    query_token_info,
)
from secret_mcp.tools.validators import ADDRESS_REGEX, TX_HASH_REGEX

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "secret-network-mcp"
MCP_SERVER_VERSION = APP_VERSION

ADDRESS_PATTERN = ADDRESS_REGEX.pattern
TX_HASH_PATTERN = TX_HASH_REGEX.pattern

ToolCallable = Callable[..., Awaitable[Any]] | Callable[..., Any]
RateCheck = Callable[[str], Awaitable[bool]]


def _address_schema(description: str) -> Dict[str, Any]:
    return {
        "type": "string",
        "description": description,
        "pattern": ADDRESS_PATTERN,
        "minLength": 45,
        "maxLength": 45,
    }


PERMIT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "description": "SNIP-24 query permit (preferred over a viewing key)",
    "properties": {
        "params": {
            "type": "object",
            "properties": {
                "permit_name": {"type": "string"},
                "allowed_tokens": {"type": "array", "items": {"type": "string"}},
                "permissions": {"type": "array", "items": {"type": "string"}},
                "chain_id": {"type": "string"},
            },
            "required": ["permit_name", "allowed_tokens", "permissions"],
        },
        "signature": {
            "type": "object",
            "properties": {
                "pub_key": {
                    "type": "object",
                    "properties": {"type": {"type": "string"}, "value": {"type": "string"}},
                    "required": ["type", "value"],
                },
                "signature": {"type": "string"},
            },
            "required": ["pub_key", "signature"],
        },
    },
    "required": ["params", "signature"],
}

NFT_PERMIT_SCHEMA: Dict[str, Any] = {
    **PERMIT_SCHEMA,
    "description": f"SNIP-24 permit; valid NFT permissions: {', '.join(NFT_PERMIT_PERMISSIONS)}",
}

VIEWING_KEY_SCHEMA: Dict[str, Any] = {
    "type": "string",
    "description": "Viewing key for private data (do not combine with a permit)",
}


def _object_schema(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Dict[str, Any]
    input_schema: Dict[str, Any]
    callable: ToolCallable
    # Argument names accepted from older clients, mapped to the keyword they feed.
    aliases: Dict[str, str] = field(default_factory=dict)


TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    "get_scrt_balance": ToolDefinition(
        name="get_scrt_balance",
        description="Return the native SCRT balance for a Secret Network address.",
        params={"address": "string (required)"},
        input_schema=_object_schema(
            {"address": _address_schema("Secret Network address (secret1...)")}, ["address"]
        ),
        callable=get_scrt_balance,
    ),
    "get_block": ToolDefinition(
        name="get_block",
        description="Return block height, time, hash and transaction count (latest by default).",
        params={"height": "integer (optional, defaults to latest)"},
        input_schema=_object_schema(
            {"height": {"type": "integer", "minimum": 1, "description": "Block height"}}, []
        ),
        callable=get_block,
    ),
    "get_account": ToolDefinition(
        name="get_account",
        description="Return account number, sequence and type for an address.",
        params={"address": "string (required)"},
        input_schema=_object_schema(
            {"address": _address_schema("Secret Network address (secret1...)")}, ["address"]
        ),
        callable=get_account,
    ),
    "get_transaction": ToolDefinition(
        name="get_transaction",
        description="Return height, result code, gas and event count for a transaction hash.",
        params={"tx_hash": "string (required, 64 hex chars)"},
        input_schema=_object_schema(
            {
                "tx_hash": {
                    "type": "string",
                    "description": "Transaction hash (64 character hex string)",
                    "pattern": TX_HASH_PATTERN,
                }
            },
            ["tx_hash"],
        ),
        callable=get_transaction,
        aliases={"txHash": "tx_hash"},
    ),
    "query_contract": ToolDefinition(
        name="query_contract",
        description="Run a raw query against a Secret Network smart contract.",
        params={
            "contract_address": "string (required)",
            "query": "object (required)",
            "code_hash": "string (optional, resolved when omitted)",
        },
        input_schema=_object_schema(
            {
                "contract_address": {
                    "type": "string",
                    "description": "Contract address (secret1...)",
                    "pattern": r"^secret1[02-9ac-hj-np-z]+$",
                },
                "query": {"type": "object", "description": "Query object sent to the contract"},
                "code_hash": {"type": "string", "description": "Contract code hash"},
            },
            ["contract_address", "query"],
        ),
        callable=query_contract,
        aliases={"contractAddress": "contract_address", "codeHash": "code_hash"},
    ),
    "get_network_status": ToolDefinition(
        name="get_network_status",
        description="Return chain id, node version, moniker and application version.",
        params={},
        input_schema=_object_schema({}, []),
        callable=get_network_status,
    ),
    "prepare_send_tokens": ToolDefinition(
        name="prepare_send_tokens",
        description=(
            "Prepare an unsigned SCRT transfer for a wallet extension to sign. "
            "Never signs or broadcasts."
        ),
        params={
            "from_address": "string (required)",
            "to_address": "string (required)",
            "amount": "string (required, in SCRT)",
            "memo": "string (optional)",
        },
        input_schema=_object_schema(
            {
                "from_address": _address_schema("Sender address (secret1...)"),
                "to_address": _address_schema("Recipient address (secret1...)"),
                "amount": {"type": "string", "description": "Amount in SCRT (converted to uscrt)"},
                "memo": {"type": "string", "description": "Optional transaction memo"},
            },
            ["from_address", "to_address", "amount"],
        ),
        callable=prepare_send_tokens,
    ),
    "query_token_balance": ToolDefinition(
        name="query_token_balance",
        description="Query a SNIP-20/25 token balance (e.g. saWETH, SILK, sSCRT) with a permit or viewing key.",
        params={
            "token": "string (required, symbol, name or alias)",
            "address": "string (required)",
            "viewing_key": "string (optional)",
            "permit": "object (optional, SNIP-24 permit)",
        },
        input_schema=_object_schema(
            {
                "token": {"type": "string", "description": "Token symbol (saWETH) or name (wrapped eth)"},
                "address": _address_schema("Wallet address to check"),
                "viewing_key": VIEWING_KEY_SCHEMA,
                "permit": PERMIT_SCHEMA,
            },
            ["token", "address"],
        ),
        callable=query_token_balance,
        aliases={"tokenSymbolOrName": "token", "viewingKey": "viewing_key"},
    ),
    "query_token_info": ToolDefinition(
        name="query_token_info",
        description="Return token name, symbol, decimals and total supply.",
        params={"token": "string (required)"},
        input_schema=_object_schema(
            {"token": {"type": "string", "description": "Token symbol or name"}}, ["token"]
        ),
        callable=query_token_info,
        aliases={"tokenSymbolOrName": "token"},
    ),
    "list_known_tokens": ToolDefinition(
        name="list_known_tokens",
        description="List known tokens and NFT collections.",
        params={},
        input_schema=_object_schema({}, []),
        callable=list_known_tokens,
    ),
    "query_nft_ownership": ToolDefinition(
        name="query_nft_ownership",
        description="List NFTs an address owns in a known SNIP-721 collection.",
        params={
            "collection": "string (required)",
            "owner": "string (required)",
            "viewing_key": "string (optional)",
            "permit": "object (optional, needs the 'tokens' permission)",
            "limit": f"integer (optional, default {default_config.default_nft_results})",
            "start_after": "string (optional token id)",
        },
        input_schema=_object_schema(
            {
                "collection": {"type": "string", "description": "Collection name (e.g. anons)"},
                "owner": _address_schema("Owner address"),
                "viewing_key": VIEWING_KEY_SCHEMA,
                "permit": NFT_PERMIT_SCHEMA,
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": default_config.max_nft_results,
                    "description": f"Max token ids (1-{default_config.max_nft_results})",
                },
                "start_after": {"type": "string", "description": "Paginate after this token id"},
            },
            ["collection", "owner"],
        ),
        callable=query_nft_ownership,
        aliases={
            "collectionName": "collection",
            "ownerAddress": "owner",
            "viewingKey": "viewing_key",
            "startAfter": "start_after",
        },
    ),
    "query_nft_info": ToolDefinition(
        name="query_nft_info",
        description="Return name and symbol of a known NFT collection.",
        params={"collection": "string (required)"},
        input_schema=_object_schema(
            {"collection": {"type": "string", "description": "Collection name"}}, ["collection"]
        ),
        callable=query_nft_info,
        aliases={"collectionName": "collection"},
    ),
    "connect_wallet": ToolDefinition(
        name="connect_wallet",
        description="Record a wallet connection after checking the account exists.",
        params={
            "address": "string (required)",
            "name": "string (optional)",
            "is_hardware_wallet": "boolean (optional)",
        },
        input_schema=_object_schema(
            {
                "address": _address_schema("Wallet address"),
                "name": {"type": "string"},
                "is_hardware_wallet": {"type": "boolean"},
            },
            ["address"],
        ),
        callable=connect_wallet,
        aliases={"isHardwareWallet": "is_hardware_wallet"},
    ),
    "get_wallet_info": ToolDefinition(
        name="get_wallet_info",
        description="Return the stored connection record for a wallet.",
        params={"address": "string (required)"},
        input_schema=_object_schema({"address": _address_schema("Wallet address")}, ["address"]),
        callable=get_wallet_info,
    ),
    "disconnect_wallet": ToolDefinition(
        name="disconnect_wallet",
        description="Forget a connected wallet.",
        params={"address": "string (required)"},
        input_schema=_object_schema({"address": _address_schema("Wallet address")}, ["address"]),
        callable=disconnect_wallet,
    ),
    "get_wallet_status": ToolDefinition(
        name="get_wallet_status",
        description="Return chain id and number of connected wallets.",
        params={},
        input_schema=_object_schema({}, []),
        callable=get_wallet_status,
    ),
    "get_transaction_status": ToolDefinition(
        name="get_transaction_status",
        description="Report whether a broadcast transaction succeeded, failed or is pending.",
        params={"tx_hash": "string (required)"},
        input_schema=_object_schema(
            {"tx_hash": {"type": "string", "pattern": TX_HASH_PATTERN}}, ["tx_hash"]
        ),
        callable=get_transaction_status,
        aliases={"txHash": "tx_hash"},
    ),
}

# Tool names used by earlier releases of the HTTP API.
LEGACY_TOOL_NAMES: Dict[str, str] = {
    "secret_query_balance": "get_scrt_balance",
    "secret_query_block": "get_block",
    "secret_query_account": "get_account",
    "secret_query_transaction": "get_transaction",
    "secret_query_contract": "query_contract",
    "secret_network_status": "get_network_status",
    "secret_send_tokens": "prepare_send_tokens",
    "secret_query_token_balance": "query_token_balance",
    "secret_query_token_info": "query_token_info",
    "secret_query_nft_ownership": "query_nft_ownership",
    "secret_query_nft_info": "query_nft_info",
    "secret_list_known_tokens": "list_known_tokens",
}


def list_tools() -> List[Dict[str, Any]]:
    """Return a simple list of available tools."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "params": tool.params,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


def resolve_tool_name(tool_name: str) -> str:
    return LEGACY_TOOL_NAMES.get(tool_name, tool_name)


def _apply_aliases(tool: ToolDefinition, params: Dict[str, Any]) -> Dict[str, Any]:
    if not tool.aliases:
        return params
    return {tool.aliases.get(key, key): value for key, value in params.items()}


async def call_tool(tool_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
    """Dispatch to a tool by name."""
    params = params or {}
    tool = TOOL_REGISTRY.get(resolve_tool_name(tool_name))
    if tool is None:
        return {"error": f"Unknown tool: {tool_name}"}

    # Match parameters by name; tools already handle validation and error shaping.
    try:
        result = tool.callable(**_apply_aliases(tool, params))
        if isinstance(result, Awaitable):
            return await result  # type: ignore[return-value]
        return result
    except TypeError:
        return {"error": "Invalid parameters."}
    except Exception:
        logger.exception("Unexpected error calling tool %s", tool.name, extra={"tool": tool.name})
        return {"error": "Unexpected error while calling tool."}


def log_tool_result(tool_name: str, result: Any, request_id: Optional[str] = None) -> None:
    if isinstance(result, dict) and result.get("error"):
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True)


def jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def wrap_tool_result(result: Any) -> Dict[str, Any]:
    """
    Shape tool outputs into MCP-friendly content array.
    """
    # Tool-level errors are returned in-band with isError flag.
    if isinstance(result, dict) and "error" in result:
        message = result.get("error") or "Error"
        return {
            "content": [{"type": "text", "text": str(message)}],
            "isError": True,
            "structuredContent": result,
        }

    if isinstance(result, str):
        return {"content": [{"type": "text", "text": result}]}

    try:
        text_repr = json.dumps(result, ensure_ascii=True)
    except (TypeError, ValueError):
        text_repr = str(result)
    return {"content": [{"type": "text", "text": text_repr}], "structuredContent": result}


@dataclass(slots=True)
class RpcReply:
    """Outcome of one JSON-RPC message; ``payload`` is None for notifications."""

    payload: Optional[Dict[str, Any]]
    status_code: int = 200
    method: Optional[str] = None
    tool: Optional[str] = None
    error_code: Optional[int] = None


def _error(
    rpc_id: Any, code: int, message: str, *, status_code: int = 200, method: Optional[str] = None, tool: Optional[str] = None
) -> RpcReply:
    return RpcReply(
        jsonrpc_error_payload(rpc_id, code, message),
        status_code=status_code,
        method=method,
        tool=tool,
        error_code=code,
    )


async def dispatch(
    body: Any,
    *,
    rate_check: Optional[RateCheck] = None,
    request_id: Optional[str] = None,
) -> RpcReply:
    """
    Handle one decoded JSON-RPC message.

    Supported methods:
      - initialize
      - list_tools / tools/list
      - call_tool / tools/call
      - notifications/initialized (no response)
    """
    if not isinstance(body, dict):
        return _error(None, -32600, "Invalid request", status_code=400)

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return _error(rpc_id, -32602, "Invalid params", method=method)

    if not method:
        return _error(rpc_id, -32600, "Invalid request")

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            return _error(rpc_id, -32602, "Invalid params", method=method)
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
        }
        return RpcReply(jsonrpc_success_payload(rpc_id, result), method=method)

    if method in ("list_tools", "tools/list"):
        if rate_check is not None and not await rate_check("list_tools"):
            return _error(rpc_id, 429, "Rate limit exceeded", status_code=429, method=method)
        return RpcReply(jsonrpc_success_payload(rpc_id, {"tools": list_tools()}), method=method)

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return _error(rpc_id, -32602, "Invalid params", method=method)
        if not isinstance(tool_params, dict):
            return _error(rpc_id, -32602, "Invalid params", method=method, tool=tool_name)
        tool_name = resolve_tool_name(tool_name)
        if rate_check is not None and not await rate_check(tool_name):
            return _error(rpc_id, 429, "Rate limit exceeded", status_code=429, method=method, tool=tool_name)
        result = await call_tool(tool_name, tool_params)
        log_tool_result(tool_name, result, request_id)
        return RpcReply(
            jsonrpc_success_payload(rpc_id, wrap_tool_result(result)), method=method, tool=tool_name
        )

    if method in ("notifications/initialized", "initialized"):
        return RpcReply(None, status_code=204, method=method)

    return _error(rpc_id, -32601, "Method not found", method=method)
