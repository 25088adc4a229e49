from datetime import date, timedelta

from moderno.utils import clients as client_store
from moderno.utils.warranty import effective_warranty_status, resolve_warranty_status

TODAY = date(2026, 10, 18)


def test_active_warranty_past_expiry_is_expired():
    assert effective_warranty_status("active", TODAY - timedelta(days=1), TODAY) == "expired"


def test_warranty_expiring_today_is_still_active():
    assert effective_warranty_status("active", TODAY, TODAY) == "active"


def test_active_warranty_without_expiry_stays_active():
    assert effective_warranty_status("active", None, TODAY) == "active"


def test_none_never_becomes_active_or_expired():
    assert effective_warranty_status("none", TODAY - timedelta(days=30), TODAY) == "none"


def test_resolve_persists_expired_status(db, make_client):
    client = make_client(warranty_status="active", warranty_expiry=TODAY - timedelta(days=1))

    resolve_warranty_status(db, client, today=TODAY)
    db.commit()
    db.expire_all()

    assert client.warranty_status == "expired"


def test_resolve_leaves_correct_records_untouched(db, make_client):
    client = make_client(warranty_status="active", warranty_expiry=TODAY + timedelta(days=365))

    resolve_warranty_status(db, client, today=TODAY)

    assert client.warranty_status == "active"
    assert not db.dirty


def test_get_client_heals_then_reads_without_writing(db, make_client):
    client = make_client(warranty_status="active", warranty_expiry=date.today() - timedelta(days=1))

    first = client_store.get_client(db, client.id)
    assert first.warranty_status == "expired"

    second = client_store.get_client(db, client.id)
    assert second.warranty_status == "expired"
    assert not db.dirty
