"""FastAPI application wiring Secret Network MCP tools to HTTP routes."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from secret_mcp import mcp
from secret_mcp.config import default_config
from secret_mcp.logging_setup import configure_logging
from secret_mcp.metrics import default_metrics
from secret_mcp.rate_limiter import PerKeyRateLimiter
from secret_mcp.secret_api import default_client
from secret_mcp.tools import (
    connect_wallet,
    disconnect_wallet,
    get_transaction_status,
    get_wallet_balance,
    get_wallet_info,
    get_wallet_status,
)

logger = logging.getLogger(__name__)
configure_logging(default_config)
rate_limiter = PerKeyRateLimiter(
    rate_per_sec=default_config.rate_limit_qps,
    per_tool=default_config.per_tool_rate_limits,
)
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = mcp.APP_VERSION
MCP_SERVER_NAME = mcp.MCP_SERVER_NAME
MCP_SERVER_VERSION = mcp.MCP_SERVER_VERSION


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    yield
    # Shutdown
    await default_client.aclose()


app = FastAPI(
    title="Secret Network MCP Server",
    description="Secret Network query tools (tokens, NFTs, chain data) for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


async def _allow(tool_name: str) -> bool:
    allowed = await rate_limiter.allow(tool_name)
    if not allowed:
        logger.warning("tool=%s outcome=rate_limited", tool_name, extra={"tool": tool_name})
        default_metrics.incr_rate_limited()
    return allowed


async def _enforce_rate_limit(tool_name: str) -> Optional[JSONResponse]:
    if await _allow(tool_name):
        return None
    # JSON-RPC style error envelope for MCP clients.
    return JSONResponse(
        status_code=429,
        content={"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}},
    )


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/api/health")
async def api_health() -> JSONResponse:
    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": MCP_SERVER_NAME,
            "version": APP_VERSION,
            "chainId": default_config.chain_id,
            "contractQueriesEnabled": bool(default_config.query_proxy_url),
        }
    )


@app.get("/api/mcp/tools/list")
async def api_tools_list() -> JSONResponse:
    return JSONResponse(content={"tools": mcp.list_tools()})


def _call_error(message: str, status_code: int = 400, error_type: str = "validation_error") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "type": error_type}},
    )


@app.post("/api/mcp/tools/call")
async def api_tools_call(request: Request) -> JSONResponse:
    """Plain (non JSON-RPC) tool call: ``{"name": ..., "arguments": {...}}``."""
    try:
        body = await request.json()
    except ValueError:
        return _call_error("Request body must be JSON.")
    if not isinstance(body, dict):
        return _call_error("Request body must be an object.")
    name = body.get("name")
    arguments = body.get("arguments") or {}
    if not isinstance(name, str) or not name.strip():
        return _call_error("Tool name is required.")
    if not isinstance(arguments, dict):
        return _call_error("Tool arguments must be an object.")

    tool_name = mcp.resolve_tool_name(name)
    limited = await _enforce_rate_limit(tool_name)
    if limited:
        return limited
    result = await mcp.call_tool(tool_name, arguments)
    mcp.log_tool_result(tool_name, result, _request_id(request))
    wrapped = mcp.wrap_tool_result(result)
    return JSONResponse(content={"success": not wrapped.get("isError", False), "result": wrapped})


@app.post("/api/wallet/connect")
async def wallet_connect(request: Request) -> JSONResponse:
    """Record a wallet connection pushed by the web UI."""
    limited = await _enforce_rate_limit("connect_wallet")
    if limited:
        return limited
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict) or not body.get("address"):
        return JSONResponse(status_code=400, content={"success": False, "error": "Address is required"})
    result = await connect_wallet(
        body["address"],
        name=body.get("name"),
        is_hardware_wallet=bool(body.get("isHardwareWallet", False)),
    )
    mcp.log_tool_result("connect_wallet", result, _request_id(request))
    return JSONResponse(status_code=200 if result.get("success") else 400, content=result)


@app.get("/api/wallet/balance/{address}")
async def wallet_balance(address: str, request: Request) -> JSONResponse:
    limited = await _enforce_rate_limit("get_wallet_balance")
    if limited:
        return limited
    result = await get_wallet_balance(address)
    mcp.log_tool_result("get_wallet_balance", result, _request_id(request))
    return JSONResponse(status_code=200 if result.get("success") else 400, content=result)


@app.get("/api/wallet/transaction/{tx_hash}")
async def wallet_transaction(tx_hash: str, request: Request) -> JSONResponse:
    limited = await _enforce_rate_limit("get_transaction_status")
    if limited:
        return limited
    result = await get_transaction_status(tx_hash)
    mcp.log_tool_result("get_transaction_status", result, _request_id(request))
    return JSONResponse(status_code=200 if result.get("success") else 400, content=result)


@app.get("/api/wallet/info/{address}")
async def wallet_info(address: str) -> JSONResponse:
    result = get_wallet_info(address)
    return JSONResponse(status_code=200 if result.get("success") else 404, content=result)


@app.delete("/api/wallet/disconnect/{address}")
async def wallet_disconnect(address: str) -> JSONResponse:
    result = disconnect_wallet(address)
    return JSONResponse(status_code=200 if result.get("success") else 404, content=result)


@app.get("/api/wallet/status")
async def wallet_status() -> JSONResponse:
    return JSONResponse(content=get_wallet_status())


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """
    JSON-RPC gateway for MCP integrations; see ``mcp.dispatch`` for methods.
    """
    request_id = _request_id(request)
    start_time = time.time()

    try:
        body = await request.json()
    except ValueError:
        reply = mcp.RpcReply(
            mcp.jsonrpc_error_payload(None, -32700, "Parse error"), status_code=400, error_code=-32700
        )
    else:
        reply = await mcp.dispatch(body, rate_check=_allow, request_id=request_id)

    duration_ms = (time.time() - start_time) * 1000
    logger.debug(
        "mcp outcome=%s method=%s tool=%s status=%s duration_ms=%.2f error_code=%s",
        "error" if reply.error_code is not None else "success",
        reply.method,
        reply.tool,
        reply.status_code,
        duration_ms,
        reply.error_code,
        extra={"request_id": request_id, "tool": reply.tool, "error": reply.error_code},
    )
    if reply.payload is None:
        # Notifications do not get a JSON-RPC response body.
        return Response(status_code=204)
    return JSONResponse(status_code=reply.status_code, content=reply.payload)


def main() -> None:
    """Run the HTTP server (``secret-mcp-http``)."""
    uvicorn.run(app, host=default_config.host, port=default_config.port, log_config=None)


if __name__ == "__main__":
    main()

