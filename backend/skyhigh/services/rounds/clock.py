"""Flight clock: elapsed time in, multiplier out.

Every sample is computed from the absolute time since flight start, so a
late or irregular frame (a backgrounded tab, a slow worker) only moves the
sample along the curve; it never accumulates rounding error.
"""
import math

from .crash_point import round2

DEFAULT_GROWTH_RATE = 0.05
# math.exp overflows a float just above this exponent.
MAX_EXPONENT = 700.0


def multiplier_at(elapsed_seconds: float, growth_rate: float = DEFAULT_GROWTH_RATE) -> float:
    if elapsed_seconds <= 0:
        return 1.00
    exponent = growth_rate * elapsed_seconds
    if exponent > MAX_EXPONENT:
        return math.inf
    return round2(math.exp(exponent))


def elapsed_seconds(started_at_ms: float, now_ms: float) -> float:
    return max(0.0, (now_ms - started_at_ms) / 1000.0)
