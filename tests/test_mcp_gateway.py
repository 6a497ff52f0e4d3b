import pytest
from fastapi.testclient import TestClient

from secret_mcp import server as srv
from secret_mcp.metrics import default_metrics
from secret_mcp.server import MCP_SERVER_NAME, MCP_SERVER_VERSION, app

ADDRESS = "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek"
RECIPIENT = "secret1fl449muk5yq8dlad7a22nje4p5d2pnsgymhjfd"


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    srv.rate_limiter.reset()
    yield
    srv.rate_limiter.reset()


@pytest.fixture
def client():
    return TestClient(app)


def test_mcp_list_tools(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "list_tools"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["jsonrpc"] == "2.0"
    assert data["id"] == 1
    tools = data["result"]["tools"]
    names = {tool["name"] for tool in tools}
    assert {"query_token_balance", "query_nft_ownership", "get_scrt_balance"} <= names
    balance_tool = next(t for t in tools if t["name"] == "query_token_balance")
    assert balance_tool["inputSchema"]["type"] == "object"
    assert "permit" in balance_tool["inputSchema"]["properties"]


def test_mcp_initialize(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 10,
            "method": "initialize",
            "params": {
                "protocolVersion": "2025-03-26",
                "capabilities": {},
                "clientInfo": {"name": "test-client", "version": "0.0.0"},
            },
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    assert result["capabilities"]["tools"]["listChanged"] is False


def test_mcp_initialize_requires_protocol_version(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 11, "method": "initialize", "params": {}})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_tools_call_structured_result(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/call",
            "params": {
                "name": "prepare_send_tokens",
                "arguments": {"from_address": ADDRESS, "to_address": RECIPIENT, "amount": "2"},
            },
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert "isError" not in result
    assert result["structuredContent"]["transactionData"]["amount"] == "2000000"
    assert result["content"][0]["type"] == "text"


def test_mcp_tool_error_is_in_band(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 5,
            "method": "call_tool",
            "params": {"tool": "get_scrt_balance", "params": {"address": "bad"}},
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Invalid Secret Network address."
    assert default_metrics.snapshot()["tool_error"] == {"get_scrt_balance": 1}


def test_mcp_legacy_tool_name_and_camel_case_arguments(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 6,
            "method": "tools/call",
            "params": {
                "name": "secret_query_token_balance",
                "arguments": {"tokenSymbolOrName": "DOGE", "address": ADDRESS, "viewingKey": "k"},
            },
        },
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["structuredContent"]["error"] == "Token not found: DOGE"


def test_mcp_unknown_tool_and_bad_arguments(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "nope"}},
    )
    assert resp.json()["result"]["content"][0]["text"] == "Unknown tool: nope"

    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 8,
            "method": "tools/call",
            "params": {"name": "list_known_tokens", "arguments": {"unexpected": 1}},
        },
    )
    assert resp.json()["result"]["content"][0]["text"] == "Invalid parameters."


def test_mcp_invalid_call_params(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": {"arguments": {}}},
    )
    assert resp.json()["error"]["code"] == -32602
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": [1]})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_parse_error(client):
    resp = client.post("/mcp", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32700


def test_mcp_invalid_request_and_unknown_method(client):
    resp = client.post("/mcp", json=[1, 2])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32600
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1})
    assert resp.json()["error"]["code"] == -32600
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "resources/list"})
    assert resp.json()["error"] == {"code": -32601, "message": "Method not found"}


def test_mcp_notification_has_no_body(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204
    assert resp.content == b""


def test_mcp_rate_limited(monkeypatch, client):
    class DenyLimiter:
        async def allow(self, _tool):
            return False

    monkeypatch.setattr(srv, "rate_limiter", DenyLimiter())
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 12, "method": "tools/call", "params": {"name": "list_known_tokens"}},
    )
    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == 429
    assert default_metrics.snapshot()["rate_limited"] == 1
