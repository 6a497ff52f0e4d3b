"""
Secret Network MCP server package.

This package exposes LLM-friendly tools for Secret Network: native chain
reads, SNIP-20/25 token and SNIP-721 NFT queries authenticated with viewing
keys or SNIP-24 permits, and wallet bookkeeping. See DESIGN.md for details.
"""

__all__ = ["config", "queries"]
