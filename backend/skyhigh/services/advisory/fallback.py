"""
Offline advisor. Always gives the same neutral reading.
"""
from typing import List

from .base import BaseAdvisor, Insight

NEUTRAL_INSIGHT = Insight(
    sentiment="The data is hazy.",
    recommendation="Trust your gut, pilot!",
    risk_level="Medium",
)


class FallbackAdvisor(BaseAdvisor):
    """
    Deterministic advisor used when no network provider is configured,
    and as the stand-in whenever a real provider fails.
    """

    @property
    def name(self) -> str:
        return "fallback"

    def advise(self, multipliers: List[float]) -> Insight:
        return NEUTRAL_INSIGHT
