"""Amount formatting shared by the chain and token tools."""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any, Optional

SCRT_DECIMALS = 6


def format_units(raw_amount: Any, decimals: int, *, places: int = 6) -> str:
    """
    Render an integer amount in the smallest unit as a fixed-point string.

    ``format_units("1500000", 6)`` -> ``"1.500000"``. Unparseable input renders as zero.
    """
    try:
        amount = Decimal(str(raw_amount))
    except (InvalidOperation, ValueError):
        amount = Decimal(0)
    if not amount.is_finite():
        amount = Decimal(0)
    scaled = amount.scaleb(-decimals)
    return str(scaled.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN))


def to_base_units(display_amount: Any, decimals: int = SCRT_DECIMALS) -> Optional[int]:
    """Convert a human amount ("1.5") to integer base units; None when invalid or not positive."""
    if isinstance(display_amount, bool):
        return None
    try:
        amount = Decimal(str(display_amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    base = int(amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))
    return base if base > 0 else None
