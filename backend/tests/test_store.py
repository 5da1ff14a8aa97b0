from skyhigh import db
from skyhigh.models import Wallet
from skyhigh.services.rounds import Ledger
from skyhigh.store import SqlBalanceStore


def test_missing_row_loads_default(flask_app):
    store = SqlBalanceStore(flask_app, key='fresh')
    assert store.load(1000.0) == 1000.0


def test_save_then_load(flask_app):
    store = SqlBalanceStore(flask_app, key='roundtrip')
    store.save(1234.5)
    store.save(1300.0)
    assert Wallet.query.filter_by(key='roundtrip').count() == 1
    assert SqlBalanceStore(flask_app, key='roundtrip').load(1000.0) == 1300.0


def test_malformed_row_falls_back(flask_app):
    db.session.add(Wallet(key='broken', value='not-a-number'))
    db.session.commit()
    ledger = Ledger(SqlBalanceStore(flask_app, key='broken'), initial_balance=1000)
    assert ledger.load() == 1000.0


def test_negative_row_falls_back(flask_app):
    db.session.add(Wallet(key='negative', value='-50'))
    db.session.commit()
    assert SqlBalanceStore(flask_app, key='negative').load(1000.0) == 1000.0


def test_balance_survives_restart(flask_app, client):
    client.post('/api/round/bet')
    # A second ledger on the same database sees the debit
    ledger = Ledger(SqlBalanceStore(flask_app), initial_balance=1000)
    assert ledger.load() == 900.0
