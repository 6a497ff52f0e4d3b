"""Shared validation helpers for Secret Network MCP tools."""

from __future__ import annotations

import re
from typing import Any, Optional

# Account addresses are bech32 with the "secret" HRP: "secret1" + 38 data chars.
ADDRESS_REGEX = re.compile(r"^secret1[02-9ac-hj-np-z]{38}$")
# Contract addresses use the longer 32-byte form.
CONTRACT_ADDRESS_REGEX = re.compile(r"^secret1[02-9ac-hj-np-z]{38}([02-9ac-hj-np-z]{20})?$")
TX_HASH_REGEX = re.compile(r"^[0-9A-Fa-f]{64}$")
DENOM_REGEX = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")
AMOUNT_REGEX = re.compile(r"^[0-9]+$")


def is_valid_secret_address(address: Optional[str]) -> bool:
    """Basic format validation for Secret Network account addresses."""
    if not address or not isinstance(address, str):
        return False
    return bool(ADDRESS_REGEX.fullmatch(address.strip()))


def is_valid_contract_address(address: Optional[str]) -> bool:
    if not address or not isinstance(address, str):
        return False
    return bool(CONTRACT_ADDRESS_REGEX.fullmatch(address.strip()))


def is_valid_tx_hash(tx_hash: Optional[str]) -> bool:
    if not tx_hash or not isinstance(tx_hash, str):
        return False
    return bool(TX_HASH_REGEX.fullmatch(tx_hash.strip()))


def is_valid_denom(denom: Optional[str]) -> bool:
    if not denom or not isinstance(denom, str):
        return False
    return bool(DENOM_REGEX.fullmatch(denom))


def is_valid_amount(amount: Any) -> bool:
    """Amounts are positive integers in the smallest unit, given as int or digit string."""
    if isinstance(amount, bool):
        return False
    if isinstance(amount, int):
        return amount > 0
    if isinstance(amount, str) and AMOUNT_REGEX.fullmatch(amount):
        return int(amount) > 0
    return False


def clamp_limit(value: Optional[int], *, default: int, max_value: int) -> int:
    """Clamp limit-style integers to configured bounds."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed <= 0:
        return default
    return min(parsed, max_value)


def parse_height(value: Any) -> Optional[int]:
    """Parse a block height; returns None for anything that is not a positive integer."""
    if isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None
