import math
import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

# Share of rounds that crash instantly at 1.00x.
INSTANT_CRASH_PERCENT = 3.0
# Above this, two-decimal rounding is a no-op.
MAX_ROUNDED = 1e15


def round2(value: float) -> float:
    """Round half-up to two decimals, the way multipliers are displayed.

    Huge or non-finite values are returned unchanged; cents are meaningless there
    and quantizing would exceed the decimal context precision.
    """
    if not math.isfinite(value) or abs(value) >= MAX_ROUNDED:
        return value
    return float(Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def crash_point_from_draw(p: float) -> float:
    """Map a uniform draw ``p`` in [0, 100) to a crash multiplier.

    A draw below 3 is an instant crash. Everything else follows
    ``99 / (100 - p)``, which gives a median near 2x and an uncapped
    tail as ``p`` approaches 100.
    """
    if p < INSTANT_CRASH_PERCENT:
        return 1.00
    return round2(99 / (100 - p))


def generate_crash_point(rng: Optional[random.Random] = None) -> float:
    """Draw a fresh crash multiplier for one round."""
    source = rng or random
    return crash_point_from_draw(source.random() * 100)
