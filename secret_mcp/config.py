"""
Configuration helpers for the Secret Network MCP server.

This module centralizes node URL selection, default timeouts, logging and
rate-limit settings, and safety limits. Values are read from the environment
at import time; nothing secret is stored here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

# Default connection settings
DEFAULT_LCD_URL = os.getenv("SECRET_LCD_URL", "https://lcd.mainnet.secretsaturn.net")
DEFAULT_CHAIN_ID = os.getenv("SECRET_CHAIN_ID", "secret-4")
DEFAULT_QUERY_PROXY_URL = os.getenv("SECRET_QUERY_PROXY_URL") or None
DEFAULT_HOST = os.getenv("HOST", "0.0.0.0")


def _load_timeout() -> float:
    raw_timeout = os.getenv("SECRET_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return 10.0
    return 10.0


def _load_port() -> int:
    raw_port = os.getenv("PORT")
    if raw_port:
        try:
            return int(raw_port)
        except ValueError:
            return 8002
    return 8002


def _parse_rate_limits(raw: Optional[str]) -> Dict[str, float]:
    """Parse ``tool=qps,tool2=qps`` pairs, skipping malformed entries."""
    limits: Dict[str, float] = {}
    if not raw:
        return limits
    for chunk in raw.split(","):
        name, sep, value = chunk.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        try:
            limits[name] = float(value)
        except ValueError:
            continue
    return limits


def _parse_bool(raw: Optional[str], *, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_TIMEOUT = _load_timeout()
DEFAULT_PORT = _load_port()

# Safety limits
MAX_NFT_RESULTS = 100
DEFAULT_NFT_RESULTS = 30
DEFAULT_RATE_LIMIT_QPS = 5
LOG_LEVEL = os.getenv("SECRET_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("SECRET_MCP_LOG_FORMAT", "json")  # json or plain
PER_TOOL_RATE_LIMITS = _parse_rate_limits(os.getenv("SECRET_MCP_TOOL_RATE_LIMITS"))
LEGACY_PERMIT_FALLBACK = _parse_bool(os.getenv("SECRET_MCP_LEGACY_PERMIT_FALLBACK"), default=True)


@dataclass(slots=True)
class SecretConfig:
    """Runtime configuration for Secret Network access."""

    lcd_url: str = DEFAULT_LCD_URL
    chain_id: str = DEFAULT_CHAIN_ID
    query_proxy_url: Optional[str] = DEFAULT_QUERY_PROXY_URL
    timeout: float = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_nft_results: int = MAX_NFT_RESULTS
    default_nft_results: int = DEFAULT_NFT_RESULTS
    rate_limit_qps: float = DEFAULT_RATE_LIMIT_QPS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    per_tool_rate_limits: Dict[str, float] = field(default_factory=lambda: dict(PER_TOOL_RATE_LIMITS))
    legacy_permit_fallback: bool = LEGACY_PERMIT_FALLBACK


default_config = SecretConfig()
