from sqlalchemy.exc import SQLAlchemyError

from skyhigh import db
from skyhigh.models import Wallet
from skyhigh.services.rounds.ledger import BalanceStore, parse_balance


class SqlBalanceStore(BalanceStore):
    """Balance persistence on top of the ``wallet`` table.

    Pushes its own app context because saves happen from the frame pump's
    background task as well as from request handlers.
    """

    def __init__(self, app, key: str = 'skyhigh_balance'):
        self.app = app
        self.key = key

    def load(self, default: float) -> float:
        with self.app.app_context():
            row = Wallet.query.filter_by(key=self.key).first()
            raw = row.value if row else None
        balance = parse_balance(raw, default)
        self.app.logger.info(f"[wallet-load] key={self.key} stored={raw!r} balance={balance:.2f}")
        return balance

    def save(self, balance: float) -> None:
        with self.app.app_context():
            try:
                row = Wallet.query.filter_by(key=self.key).first()
                if row is None:
                    row = Wallet(key=self.key)
                row.value = repr(float(balance))
                db.session.add(row)
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                self.app.logger.error(f"[wallet-save-failed] key={self.key} balance={balance:.2f} error={exc}")
