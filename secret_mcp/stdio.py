"""
Stdio transport: newline-delimited JSON-RPC on stdin/stdout.

Each input line is one JSON-RPC message; each response is written as one
line. Logs go to stderr so stdout carries protocol traffic only.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import IO, Optional

from secret_mcp import mcp
from secret_mcp.config import default_config
from secret_mcp.logging_setup import configure_logging
from secret_mcp.secret_api import default_client

logger = logging.getLogger(__name__)


async def handle_line(line: str) -> Optional[str]:
    """Process one input line; returns the serialized response, or None for notifications."""
    line = line.strip()
    if not line:
        return None
    try:
        body = json.loads(line)
    except ValueError:
        return json.dumps(mcp.jsonrpc_error_payload(None, -32700, "Parse error"))
    reply = await mcp.dispatch(body)
    if reply.error_code is not None:
        logger.debug(
            "mcp stdio method=%s error_code=%s", reply.method, reply.error_code, extra={"tool": reply.tool}
        )
    if reply.payload is None:
        return None
    return json.dumps(reply.payload, default=str)


async def serve(reader: IO[str], writer: IO[str]) -> None:
    """Serve until ``reader`` reaches EOF."""
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, reader.readline)
            if not line:
                break
            response = await handle_line(line)
            if response is not None:
                writer.write(response + "\n")
                writer.flush()
    finally:
        await default_client.aclose()


def main() -> None:
    """Run the stdio server (``secret-mcp-stdio``)."""
    configure_logging(default_config, stream=sys.stderr)
    logger.info("Secret Network MCP server running on stdio")
    asyncio.run(serve(sys.stdin, sys.stdout))


if __name__ == "__main__":
    main()
