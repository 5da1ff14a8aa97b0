from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class RoundStatus(str, Enum):
    IDLE = 'idle'
    STARTING = 'starting'
    FLYING = 'flying'
    CRASHED = 'crashed'

    @property
    def accepts_bets(self) -> bool:
        return self in (RoundStatus.IDLE, RoundStatus.CRASHED)


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    multiplier: float
    timestamp: float

    def to_dict(self):
        return {
            'id': self.id,
            'multiplier': self.multiplier,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of the round.

    The engine never edits a snapshot in place; every transition builds a
    new one with ``dataclasses.replace`` and swaps it in, so readers on
    other threads always see a consistent round.
    """
    status: RoundStatus = RoundStatus.IDLE
    current_multiplier: float = 1.00
    crash_multiplier: float = 0.0
    is_cashed_out: bool = False
    cash_out_multiplier: float = 0.0
    flight_started_at: Optional[float] = None
    # Deadline of whichever one-shot timer is pending (start or reset).
    timer_deadline: Optional[float] = None
    history: Tuple[HistoryEntry, ...] = field(default_factory=tuple)

    def evolve(self, **changes) -> 'RoundState':
        return replace(self, **changes)

    def to_dict(self):
        crashed = self.status is RoundStatus.CRASHED
        return {
            'status': self.status.value,
            'current_multiplier': self.current_multiplier,
            # Hidden until the round has actually crashed
            'crash_multiplier': self.crash_multiplier if crashed else None,
            'is_cashed_out': self.is_cashed_out,
            'cash_out_multiplier': self.cash_out_multiplier,
            'flight_started_at': self.flight_started_at,
            'countdown_deadline': self.timer_deadline if self.status is RoundStatus.STARTING else None,
            'history': [h.to_dict() for h in self.history],
        }


def push_history(history: Tuple[HistoryEntry, ...], entry: HistoryEntry, limit: int) -> Tuple[HistoryEntry, ...]:
    """Newest first; the oldest entries fall off past ``limit``."""
    return ((entry,) + tuple(history))[:limit]
