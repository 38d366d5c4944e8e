# cauldron_indexer/utils/amounts.py
"""
Fixed-point helpers for on-chain amounts.

Raw amounts arrive as integers scaled by 10**decimals. They are converted to
Decimal with enough precision to hold any uint256 exactly, and running totals
are combined in the same context so nothing is rounded at 28 digits.
"""

from decimal import Context, Decimal
from typing import Union

DEFAULT_DECIMALS = 18

# uint256 has 78 decimal digits; leave room for the fractional part
AMOUNT_CONTEXT = Context(prec=100)


def amount_to_int(amount: Union[str, int, None]) -> int:
    """Convert a raw amount to int, treating None and empty strings as zero"""
    if amount is None:
        return 0
    if isinstance(amount, str):
        if amount.strip() == "":
            return 0
        return int(amount, 0) if amount.startswith("0x") else int(amount)
    return int(amount)


def to_decimal(amount: Union[str, int, None], decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Scale a raw fixed-point amount down by 10**decimals"""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    return Decimal(amount_to_int(amount)).scaleb(-decimals, context=AMOUNT_CONTEXT)


def add_amounts(*amounts: Decimal) -> Decimal:
    total = Decimal(0)
    for amount in amounts:
        total = AMOUNT_CONTEXT.add(total, amount)
    return total


def subtract_amounts(amount1: Decimal, amount2: Decimal) -> Decimal:
    return AMOUNT_CONTEXT.subtract(amount1, amount2)
