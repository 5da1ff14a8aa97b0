import logging
import threading
from typing import Callable, List, Optional

from skyhigh.services.rounds.state import RoundState, RoundStatus
from .base import BaseAdvisor, Insight
from .fallback import FallbackAdvisor

logger = logging.getLogger(__name__)

Spawner = Callable[..., object]


def run_inline(fn, *args, **kwargs):
    return fn(*args, **kwargs)


class AdvisoryService:
    """Fetches advisory text between rounds.

    Listens to the round engine and asks the advisor for a fresh reading
    once per completed round, when the engine is back to Idle. The call runs
    through ``spawn`` (a background task in the server, inline in tests) and
    never feeds anything back into the engine. Any failure is replaced with
    the fallback insight.
    """

    def __init__(self, advisor: BaseAdvisor, spawn: Spawner = run_inline, window: int = 10,
                 fallback: Optional[BaseAdvisor] = None):
        self.advisor = advisor
        self.fallback = fallback or FallbackAdvisor()
        self.spawn = spawn
        self.window = window
        self._latest: Optional[Insight] = None
        self._last_round_id: Optional[str] = None
        self._listeners: List[Callable[[Insight], None]] = []
        self._lock = threading.Lock()

    @property
    def latest(self) -> Optional[Insight]:
        return self._latest

    def add_listener(self, callback: Callable[[Insight], None]) -> None:
        self._listeners.append(callback)

    def on_round_state(self, state: RoundState, _ledger_view=None) -> None:
        """Engine subscriber."""
        if state.status is not RoundStatus.IDLE or not state.history:
            return
        newest = state.history[0].id
        with self._lock:
            if newest == self._last_round_id:
                return
            self._last_round_id = newest
        multipliers = [h.multiplier for h in state.history[:self.window]]
        self.spawn(self.refresh, multipliers)

    def refresh(self, multipliers: List[float]) -> Insight:
        try:
            insight = self.advisor.advise(list(multipliers[:self.window]))
        except Exception as exc:
            logger.warning(f"[advice-fallback] provider={self.advisor.name} error={exc}")
            insight = self.fallback.advise(multipliers)
        self._latest = insight
        logger.info(f"[advice] provider={self.advisor.name} risk={insight.risk_level}")
        for callback in list(self._listeners):
            try:
                callback(insight)
            except Exception:
                logger.exception("[advice-listener-error]")
        return insight
