import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

INITIAL_BALANCE = 1000.0
MIN_BET = 10
MAX_BET = 5000
DEFAULT_BET = 100


class BalanceStore(ABC):
    """Where the wallet balance survives restarts. One number, nothing else."""

    @abstractmethod
    def load(self, default: float) -> float:
        """Return the stored balance, or ``default`` if absent or unreadable."""

    @abstractmethod
    def save(self, balance: float) -> None:
        pass


def parse_balance(raw, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value < 0:
        return default
    return value


def clamp_bet(raw, max_bet: int = MAX_BET) -> int:
    """Coerce a user-entered bet into ``[0, max_bet]``.

    Garbage becomes 0 and fractions are truncated, like parsing an integer
    out of a text field. Never raises.
    """
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        value = 0
    return min(max_bet, max(0, value))


@dataclass(frozen=True)
class LedgerView:
    balance: float
    current_bet: int

    def to_dict(self):
        return {'balance': self.balance, 'current_bet': self.current_bet}


class Ledger:
    """Balance and bet size across rounds.

    Only the round engine calls the mutating methods; every balance change
    is written through to the store immediately.
    """

    def __init__(self, store: BalanceStore, initial_balance: float = INITIAL_BALANCE,
                 min_bet: int = MIN_BET, max_bet: int = MAX_BET, default_bet: int = DEFAULT_BET):
        self.store = store
        self.initial_balance = float(initial_balance)
        self.min_bet = int(min_bet)
        self.max_bet = int(max_bet)
        self._view = LedgerView(balance=self.initial_balance, current_bet=clamp_bet(default_bet, self.max_bet))
        self._loaded = False

    @property
    def view(self) -> LedgerView:
        return self._view

    @property
    def balance(self) -> float:
        return self._view.balance

    @property
    def current_bet(self) -> int:
        return self._view.current_bet

    def load(self) -> float:
        """Read the persisted balance. Safe to call more than once; only the first call reads."""
        if not self._loaded:
            balance = parse_balance(self.store.load(self.initial_balance), self.initial_balance)
            self._view = replace(self._view, balance=balance)
            self._loaded = True
            logger.info(f"[ledger-load] balance={balance:.2f}")
        return self._view.balance

    def can_place(self, bet=None) -> bool:
        bet = self._view.current_bet if bet is None else bet
        return self.min_bet <= bet <= self.max_bet and self._view.balance >= bet

    def set_bet(self, raw) -> int:
        self._view = replace(self._view, current_bet=clamp_bet(raw, self.max_bet))
        return self._view.current_bet

    def debit_bet(self) -> float:
        bet = self._view.current_bet
        self._commit(self._view.balance - bet)
        return bet

    def credit_win(self, multiplier: float) -> float:
        payout = self._view.current_bet * multiplier
        self._commit(self._view.balance + payout)
        return payout

    def _commit(self, balance: float) -> None:
        self._view = replace(self._view, balance=balance)
        self.store.save(balance)
