"""
Base class for advisory-text providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from skyhigh.exceptions import AdvisoryError

RISK_LEVELS = ('Low', 'Medium', 'High')


@dataclass(frozen=True)
class Insight:
    sentiment: str
    recommendation: str
    risk_level: str

    @classmethod
    def from_dict(cls, data) -> 'Insight':
        """Validate a provider payload; raises AdvisoryError if it is unusable."""
        if not isinstance(data, dict):
            raise AdvisoryError(f"Expected an object, got {type(data).__name__}")
        try:
            sentiment = str(data['sentiment']).strip()
            recommendation = str(data['recommendation']).strip()
            risk = str(data['riskLevel']).strip().capitalize()
        except KeyError as exc:
            raise AdvisoryError(f"Missing field {exc}") from exc
        if risk not in RISK_LEVELS:
            raise AdvisoryError(f"Unknown risk level {data['riskLevel']!r}")
        if not sentiment or not recommendation:
            raise AdvisoryError("Empty sentiment or recommendation")
        return cls(sentiment=sentiment, recommendation=recommendation, risk_level=risk)

    def to_dict(self):
        return {
            'sentiment': self.sentiment,
            'recommendation': self.recommendation,
            'riskLevel': self.risk_level,
        }


class BaseAdvisor(ABC):
    """Abstract base class for advisory providers."""

    @abstractmethod
    def advise(self, multipliers: List[float]) -> Insight:
        """
        Produce display-only commentary on recent rounds.

        Args:
            multipliers: Crash multipliers, newest first

        Returns:
            An Insight

        Raises:
            AdvisoryError: on any provider failure
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging/debugging."""
        pass

    def is_available(self) -> bool:
        """Check if the provider is properly configured."""
        return True
