"""Impact calculation for EcoLog.

Maps a logged action (category + quantity) to CO2 reduced, water saved,
waste diverted and EcoPoints earned using a fixed per-category linear formula.
This is the single source of truth for what an action is worth.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Optional

from ecolog.models.action import ImpactMetrics
from ecolog.models.constants import (
    IMPACT_FACTORS,
    DEFAULT_QUANTITY,
    IMPACT_PRECISION,
    MAX_QUANTITY_EXPONENT,
    IMPACT_CONTEXT_PRECISION,
)

# Leading decimal number, e.g. "5kg" -> "5", "2.5e3 km" -> "2.5e3"
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def read_decimal(quantity: Any) -> Optional[Decimal]:
    """Read the number a client sent, or None if there is none.

    Strings contribute their leading number ("5kg" reads as 5). The result
    may be negative or non-finite; callers decide what to do with that.
    """
    if quantity is None or isinstance(quantity, bool):
        return None
    if isinstance(quantity, str):
        match = _LEADING_NUMBER.match(quantity.strip())
        if not match:
            return None
        quantity = match.group(0)
    try:
        # str() first so floats like 0.1 keep their shortest repr
        return Decimal(str(quantity))
    except (InvalidOperation, ValueError, TypeError):
        return None


def parse_quantity(quantity: Any) -> Decimal:
    """Parse a client-supplied quantity.
    
    Missing, unparseable, non-finite, negative or astronomically large
    values fall back to DEFAULT_QUANTITY.
    
    Args:
        quantity: Number, numeric string, Decimal or None
        
    Returns:
        Non-negative Decimal quantity
    """
    value = read_decimal(quantity)
    if value is None or not value.is_finite() or value < 0:
        return DEFAULT_QUANTITY
    if value and value.adjusted() > MAX_QUANTITY_EXPONENT:
        return DEFAULT_QUANTITY
    return value


def _to_amount(value: Decimal) -> Decimal:
    return value.quantize(IMPACT_PRECISION, rounding=ROUND_HALF_UP)


def _to_points(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_impact(category: Any, quantity: Any = None) -> ImpactMetrics:
    """Calculate the impact of an action.
    
    Pure and total: an unknown category yields all-zero metrics instead of
    raising.
    
    Args:
        category: Action category (enum or string value)
        quantity: Quantity in category units; defaults to 1 if missing/invalid
        
    Returns:
        ImpactMetrics with physical values rounded to 2 places and integer points
    """
    key = getattr(category, "value", category)
    factors = IMPACT_FACTORS.get(key) if isinstance(key, str) else None
    if factors is None:
        return ImpactMetrics()
    
    qty = parse_quantity(quantity)
    co2_factor, water_factor, waste_factor, points_factor = factors
    # Wide enough to hold every digit of any accepted quantity after rounding
    with localcontext() as ctx:
        ctx.prec = IMPACT_CONTEXT_PRECISION
        return ImpactMetrics(
            co2_reduced=_to_amount(qty * co2_factor),
            water_saved=_to_amount(qty * water_factor),
            waste_diverted=_to_amount(qty * waste_factor),
            points_earned=_to_points(qty * points_factor),
        )
