import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, List, Optional

from .clock import DEFAULT_GROWTH_RATE, elapsed_seconds, multiplier_at
from .crash_point import generate_crash_point
from .ledger import Ledger, LedgerView
from .state import HistoryEntry, RoundState, RoundStatus, push_history

logger = logging.getLogger(__name__)

PRE_START_DELAY_MS = 3000
CRASH_RESET_DELAY_MS = 4000
HISTORY_LIMIT = 20

Subscriber = Callable[[RoundState, LedgerView], None]


@dataclass
class Command:
    # Filled in by the engine when the command is processed.
    accepted: Optional[bool] = field(default=None, init=False)


@dataclass
class PlaceBet(Command):
    pass


@dataclass
class CashOut(Command):
    pass


@dataclass
class SetBet(Command):
    amount: Any = 0


class RoundEngine:
    """Owner of the round: Idle -> Starting -> Flying -> Crashed -> Idle.

    Nothing happens on its own. A driver (the frame pump, a request handler,
    a test) calls ``tick(now_ms)`` and the engine catches up to that instant.
    Player requests are queued with ``submit`` and applied during the next
    tick, in this order:

    1. due timers (start delay, reset delay)
    2. one clock sample, which either raises the multiplier or crashes
    3. queued commands, oldest first, each checked against the state as
       it stands at that moment

    So when a cash-out and the crash-determining sample land in the same
    tick the crash wins and the cash-out is refused. A cash-out processed in
    a tick whose sample did not crash is paid at that tick's multiplier.
    """

    def __init__(self, ledger: Ledger, crash_point: Callable[[], float] = generate_crash_point,
                 growth_rate: float = DEFAULT_GROWTH_RATE,
                 pre_start_delay_ms: int = PRE_START_DELAY_MS,
                 reset_delay_ms: int = CRASH_RESET_DELAY_MS,
                 history_limit: int = HISTORY_LIMIT):
        self.ledger = ledger
        self.crash_point = crash_point
        self.growth_rate = growth_rate
        self.pre_start_delay_ms = pre_start_delay_ms
        self.reset_delay_ms = reset_delay_ms
        self.history_limit = history_limit

        self._state = RoundState()
        self._queue: Deque[Command] = deque()
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []
        self._last_tick_ms: Optional[float] = None
        self._round_seq = 0
        self._closed = False

    # ---- Reads ----

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def can_bet(self) -> bool:
        return self._state.status.accepts_bets and self.ledger.can_place()

    def to_dict(self):
        with self._lock:
            state, view, can_bet = self._state, self.ledger.view, self.can_bet()
        payload = state.to_dict()
        payload.update(view.to_dict())
        payload['can_bet'] = can_bet
        return payload

    # ---- Observers ----

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, state: RoundState, view: LedgerView) -> None:
        for callback in list(self._subscribers):
            try:
                callback(state, view)
            except Exception:
                logger.exception(f"[notify-error] subscriber={callback!r}")

    # ---- Commands ----

    def submit(self, command: Command) -> Command:
        with self._lock:
            if not self._closed:
                self._queue.append(command)
            else:
                command.accepted = False
        return command

    def place_bet(self, now_ms: float) -> bool:
        return self._run(PlaceBet(), now_ms)

    def cash_out(self, now_ms: float) -> bool:
        return self._run(CashOut(), now_ms)

    def set_bet(self, amount, now_ms: float) -> bool:
        return self._run(SetBet(amount=amount), now_ms)

    def _run(self, command: Command, now_ms: float) -> bool:
        self.submit(command)
        self.tick(now_ms)
        return bool(command.accepted)

    # ---- Driver ----

    def tick(self, now_ms: float) -> RoundState:
        with self._lock:
            if self._closed:
                return self._state
            # Time never runs backwards for the engine.
            if self._last_tick_ms is not None and now_ms < self._last_tick_ms:
                now_ms = self._last_tick_ms
            self._last_tick_ms = now_ms

            before_state, before_view = self._state, self.ledger.view
            self._fire_timers(now_ms)
            self._sample(now_ms)
            self._drain(now_ms)
            state, view = self._state, self.ledger.view

        if state is not before_state or view != before_view:
            self._notify(state, view)
        return state

    def shutdown(self) -> None:
        """Cancel pending timers and queued commands; later ticks do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for command in self._queue:
                command.accepted = False
            self._queue.clear()
            self._state = self._state.evolve(timer_deadline=None)
        logger.info(f"[engine-shutdown] status={self._state.status.value}")

    # ---- Transitions ----

    def _fire_timers(self, now_ms: float) -> None:
        s = self._state
        if s.timer_deadline is None or now_ms < s.timer_deadline:
            return
        if s.status is RoundStatus.STARTING:
            # Flight starts at the deadline, not at whichever frame noticed it.
            self._state = s.evolve(
                status=RoundStatus.FLYING,
                flight_started_at=s.timer_deadline,
                timer_deadline=None,
                current_multiplier=1.00,
            )
            logger.info(f"[takeoff] round={self._round_seq} at={s.timer_deadline}")
        elif s.status is RoundStatus.CRASHED:
            self._state = RoundState(history=s.history)
            logger.info(f"[reset] round={self._round_seq}")

    def _sample(self, now_ms: float) -> None:
        s = self._state
        if s.status is not RoundStatus.FLYING:
            return
        sample = multiplier_at(elapsed_seconds(s.flight_started_at, now_ms), self.growth_rate)
        if sample >= s.crash_multiplier:
            entry = HistoryEntry(
                id=f"{int(now_ms)}-{self._round_seq}",
                multiplier=s.crash_multiplier,
                timestamp=now_ms,
            )
            self._state = s.evolve(
                status=RoundStatus.CRASHED,
                current_multiplier=s.crash_multiplier,
                timer_deadline=now_ms + self.reset_delay_ms,
                history=push_history(s.history, entry, self.history_limit),
            )
            logger.info(
                f"[crash] round={self._round_seq} multiplier={s.crash_multiplier:.2f} "
                f"cashed_out={s.is_cashed_out}"
            )
        elif sample != s.current_multiplier:
            self._state = s.evolve(current_multiplier=sample)

    def _drain(self, now_ms: float) -> None:
        while self._queue:
            command = self._queue.popleft()
            command.accepted = self._apply(command, now_ms)

    def _apply(self, command: Command, now_ms: float) -> bool:
        if isinstance(command, PlaceBet):
            return self._apply_place_bet(now_ms)
        if isinstance(command, CashOut):
            return self._apply_cash_out()
        if isinstance(command, SetBet):
            return self._apply_set_bet(command.amount)
        logger.warning(f"[command-unknown] command={command!r}")
        return False

    def _apply_place_bet(self, now_ms: float) -> bool:
        s = self._state
        if not s.status.accepts_bets or not self.ledger.can_place():
            return False
        crash_at = self.crash_point()
        bet = self.ledger.debit_bet()
        self._round_seq += 1
        # Replacing timer_deadline also drops a pending reset from the last round.
        self._state = s.evolve(
            status=RoundStatus.STARTING,
            current_multiplier=1.00,
            crash_multiplier=crash_at,
            is_cashed_out=False,
            cash_out_multiplier=0.0,
            flight_started_at=None,
            timer_deadline=now_ms + self.pre_start_delay_ms,
        )
        logger.info(f"[round-start] round={self._round_seq} bet={bet} balance={self.ledger.balance:.2f}")
        return True

    def _apply_cash_out(self) -> bool:
        s = self._state
        if s.status is not RoundStatus.FLYING or s.is_cashed_out:
            return False
        payout = self.ledger.credit_win(s.current_multiplier)
        self._state = s.evolve(is_cashed_out=True, cash_out_multiplier=s.current_multiplier)
        logger.info(
            f"[cashout] round={self._round_seq} multiplier={s.current_multiplier:.2f} "
            f"payout={payout:.2f} balance={self.ledger.balance:.2f}"
        )
        return True

    def _apply_set_bet(self, amount) -> bool:
        if not self._state.status.accepts_bets:
            return False
        self.ledger.set_bet(amount)
        return True
