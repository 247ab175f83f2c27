"""Display helpers for ingredient amounts.

``format_amount`` is used for scaled batch and total amounts, ``format_number``
for raw per-bottle recipe amounts. They round differently and are not
interchangeable.
"""

import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Any, Tuple


def to_fixed(value: float, digits: int) -> str:
    """Format ``value`` with ``digits`` decimals, rounding ties up.

    Rounds the exact binary value of the float the way JavaScript's
    ``toFixed`` does, so 0.125 gives "0.13" where Python's format gives
    "0.12". Values of any size are written out in full.
    """
    exact = Decimal(value) if value else Decimal(0)
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{digits}f}"


def format_amount(amount: float, unit: str) -> Tuple[str, str]:
    """Return (amount text, unit text) for a scaled amount.

    Millilitre amounts of one litre or more are shown in litres with the
    millilitres in brackets; the unit is then part of the amount text and the
    returned unit is empty.
    """
    if unit == "ml" and amount >= 1000:
        return f"{to_fixed(amount / 1000, 2)}L ({to_fixed(amount, 0)}ml)", ""
    return to_fixed(amount, 1), unit


def format_number(num: float) -> str:
    """Two decimals with trailing zeros and a bare decimal point removed."""
    return re.sub(r"\.?0+$", "", to_fixed(num, 2), count=1)


def recipe_title(recipe: Dict[str, Any]) -> str:
    return recipe["product_id"].replace("-", " ").title()
