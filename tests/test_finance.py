"""Aggregation and tier rules, exercised directly against a database session."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from moderno.errors import NotFoundError
from moderno.utils import finance


def _txn(amount, type="payment", status="completed"):
    return SimpleNamespace(amount=Decimal(amount), type=type, status=status)


# ---------------------------------------------------------------------------
# aggregate_transactions
# ---------------------------------------------------------------------------


def test_aggregate_sums_each_type_separately():
    totals = finance.aggregate_transactions([
        _txn("1000.50"),
        _txn("250.25"),
        _txn("200", type="refund"),
        _txn("30", type="commission"),
        _txn("20", type="commission"),
    ])

    assert totals["total_spending"] == Decimal("1250.75")
    assert totals["order_count"] == 2
    assert totals["refund_amount"] == Decimal("200")
    assert totals["commission"] == Decimal("50")
    assert totals["referral_revenue"] == Decimal("50")
    assert totals["referral_count"] == 2


def test_aggregate_ignores_pending_and_cancelled():
    totals = finance.aggregate_transactions([
        _txn("500", status="pending"),
        _txn("700", type="refund", status="cancelled"),
        _txn("10", type="commission", status="pending"),
        _txn("100"),
    ])

    assert totals["total_spending"] == Decimal("100")
    assert totals["order_count"] == 1
    assert totals["refund_amount"] == Decimal("0")
    assert totals["commission"] == Decimal("0")
    assert totals["referral_count"] == 0


def test_aggregate_of_nothing_is_zero():
    totals = finance.aggregate_transactions([])
    assert totals == {
        "total_spending": Decimal("0"),
        "refund_amount": Decimal("0"),
        "commission": Decimal("0"),
        "order_count": 0,
        "referral_revenue": Decimal("0"),
        "referral_count": 0,
    }


def test_aggregate_uses_exact_decimal_arithmetic():
    # 0.1 + 0.2 drifts in binary floating point
    totals = finance.aggregate_transactions([_txn("0.10"), _txn("0.20")])
    assert totals["total_spending"] == Decimal("0.30")


def test_to_decimal_does_not_round_trip_through_float():
    assert finance.to_decimal("49999.99") == Decimal("49999.99")
    assert finance.to_decimal(None) == Decimal("0")
    assert finance.to_decimal(5) == Decimal("5")


# ---------------------------------------------------------------------------
# classify_tier
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("spending, expected", [
    ("0", "silver"),
    ("49999.99", "silver"),
    ("50000", "gold"),
    ("99999.99", "gold"),
    ("100000", "platinum"),
    ("2500000", "platinum"),
])
def test_tier_thresholds_are_inclusive(spending, expected):
    assert finance.classify_tier(Decimal(spending), 0, "silver") == expected


def test_five_referrals_make_vip_regardless_of_spending():
    assert finance.classify_tier(Decimal("0"), 5, "silver") == "vip"
    assert finance.classify_tier(Decimal("0"), 4, "silver") == "silver"


def test_vip_is_sticky():
    assert finance.classify_tier(Decimal("0"), 0, "vip") == "vip"


def test_other_stored_tiers_are_not_sticky():
    assert finance.classify_tier(Decimal("10"), 0, "platinum") == "silver"


# ---------------------------------------------------------------------------
# recalculate_client_financials
# ---------------------------------------------------------------------------


def test_recalculate_persists_totals_and_tier(db, make_client, make_transaction):
    client = make_client()
    make_transaction(client, "60000")
    make_transaction(client, "1500", type="refund")
    make_transaction(client, "99999", status="pending")

    finance.recalculate_client_financials(db, client.id)
    db.commit()
    db.refresh(client)

    assert client.total_spending == Decimal("60000")
    assert client.refund_amount == Decimal("1500")
    assert client.order_count == 1
    assert client.tier == "gold"


def test_recalculate_is_idempotent(db, make_client, make_transaction):
    client = make_client()
    make_transaction(client, "1234.56")
    make_transaction(client, "7", type="commission")

    def snapshot():
        finance.recalculate_client_financials(db, client.id)
        db.commit()
        db.refresh(client)
        return {field: getattr(client, field) for field in finance.FINANCIAL_FIELDS + ("tier",)}

    assert snapshot() == snapshot()


def test_recalculate_overwrites_hand_edited_totals(db, make_client, make_transaction):
    client = make_client(total_spending=Decimal("999999"), order_count=42, tier="platinum")
    make_transaction(client, "10")

    finance.recalculate_client_financials(db, client.id)
    db.commit()
    db.refresh(client)

    assert client.total_spending == Decimal("10")
    assert client.order_count == 1
    assert client.tier == "silver"


def test_recalculate_only_reads_the_clients_own_transactions(db, make_client, make_transaction):
    client = make_client()
    other = make_client()
    make_transaction(client, "100")
    make_transaction(other, "50000")

    finance.recalculate_client_financials(db, client.id)
    db.commit()
    db.refresh(client)

    assert client.total_spending == Decimal("100")


def test_recalculate_unknown_client_raises(db):
    with pytest.raises(NotFoundError):
        finance.recalculate_client_financials(db, 9999)


def test_recalculate_quietly_swallows_missing_client(db, caplog):
    assert finance.recalculate_quietly(db, 9999) is None
    assert "no longer exists" in caplog.text


def test_assign_tier_uses_stored_totals(db, make_client):
    client = make_client(total_spending=Decimal("100000"))

    finance.assign_client_tier(db, client.id)
    db.commit()
    db.refresh(client)

    assert client.tier == "platinum"
