"""Round domain services: crash points, the multiplier clock, the ledger
and the round state machine.

Nothing in this package imports Flask. The web layer owns a single
``RoundEngine`` (see ``skyhigh.runtime``) and drives it with ``tick``;
tests drive the same engine with hand-picked timestamps.
"""

from .state import RoundStatus, RoundState, HistoryEntry
from .ledger import Ledger, BalanceStore, clamp_bet
from .engine import RoundEngine, PlaceBet, CashOut, SetBet

__all__ = [
    'RoundStatus', 'RoundState', 'HistoryEntry',
    'Ledger', 'BalanceStore', 'clamp_bet',
    'RoundEngine', 'PlaceBet', 'CashOut', 'SetBet',
]
