"""Minimal sanity checks for the Secret Network MCP tools against a live LCD."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from secret_mcp.secret_api import default_client  # noqa: E402
from secret_mcp.tools import (  # noqa: E402
    get_account,
    get_block,
    get_network_status,
    get_scrt_balance,
    list_known_tokens,
    query_nft_info,
    query_token_info,
)

# sSCRT contract doubles as a known-good address; override via env.
SAMPLE_ADDRESS = os.getenv("SECRET_SAMPLE_ADDRESS", "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek")
# Contract queries need SECRET_QUERY_PROXY_URL; opt in explicitly.
RUN_CONTRACT_QUERIES = os.getenv("RUN_CONTRACT_SANITY", "false").lower() in {"1", "true", "yes"}


async def main() -> None:
    try:
        print("Network status:", await get_network_status())
        print("Latest block:", await get_block())
        print("Account:", await get_account(SAMPLE_ADDRESS))
        print("SCRT balance:", await get_scrt_balance(SAMPLE_ADDRESS))

        known = list_known_tokens()
        print("Known tokens:", known["tokenCount"], "NFT collections:", known["nftCount"])

        if RUN_CONTRACT_QUERIES:
            print("sSCRT token info:", await query_token_info("sSCRT"))
            print("Anons collection info:", await query_nft_info("anons"))
    finally:
        await default_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
