from decimal import Decimal

from moderno.utils import transactions as transaction_store


def _record_locks(monkeypatch):
    locked = []
    real_lock = transaction_store.lock_client

    def recording_lock(db, client_id):
        locked.append(client_id)
        return real_lock(db, client_id)

    monkeypatch.setattr(transaction_store, "lock_client", recording_lock)
    return locked


def test_moving_a_transaction_locks_both_clients_lowest_id_first(db, make_client, make_transaction, monkeypatch):
    low = make_client()
    high = make_client()
    transaction = make_transaction(high, "55000")
    locked = _record_locks(monkeypatch)

    transaction_store.update_transaction(db, transaction.id, {"client_id": low.id})

    assert locked == [low.id, high.id]
    db.refresh(low)
    db.refresh(high)
    assert low.total_spending == Decimal("55000")
    assert high.total_spending == Decimal("0")


def test_update_in_place_locks_the_owner_before_writing(db, make_client, make_transaction, monkeypatch):
    owner = make_client()
    transaction = make_transaction(owner, "10", status="pending")
    locked = _record_locks(monkeypatch)

    transaction_store.update_transaction(db, transaction.id, {"status": "completed"})

    assert locked == [owner.id]
    db.refresh(owner)
    assert owner.total_spending == Decimal("10")
