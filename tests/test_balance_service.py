from datetime import date
from decimal import Decimal

import pytest

from services.balance_service import (
    collection_rate,
    lease_balance,
    lease_position,
    portfolio_metrics,
    tenant_position,
)
from models.payment import PaymentStatus
from services.reconciliation_service import reconcile_lease, reconcile_many
from services.types import EntryStatus, ZERO
from tests.helpers import make_lease, make_payment


def test_rent_paid_one_day_early_settles_first_period():
    recon = reconcile_lease(make_lease(), [make_payment(1, "500000", paid=date(2024, 1, 4))], date(2024, 1, 10))
    position = lease_position(recon)

    assert recon.entries[0].status == EntryStatus.PAID
    assert position.outstanding_balance == ZERO
    assert position.advance_credit == ZERO


def test_prepayment_is_reported_as_advance_credit():
    payments = [
        make_payment(1, "600000", paid=date(2023, 12, 20)),
        make_payment(2, "600000", paid=date(2024, 1, 2)),
    ]

    recon = reconcile_lease(make_lease(), payments, date(2024, 2, 10))
    position = lease_position(recon)

    assert [e.status for e in recon.entries[:2]] == [EntryStatus.PAID, EntryStatus.PAID]
    assert position.outstanding_balance == ZERO
    assert position.advance_credit == Decimal("200000.00")
    assert position.months_ahead == 0


def test_single_month_lease_unpaid_after_45_days():
    lease = make_lease(end=date(2024, 2, 4))

    position = lease_position(reconcile_lease(lease, [], date(2024, 2, 19)))

    assert position.outstanding_balance == Decimal("500000.00")
    assert position.days_overdue == 45


def test_open_ended_lease_unpaid_after_45_days_owes_both_due_periods():
    recon = reconcile_lease(make_lease(), [], date(2024, 2, 19))
    balance = lease_balance(recon)

    assert balance.total_owed == Decimal("1000000.00")
    assert balance.current_balance == Decimal("1000000.00")
    assert balance.overdue_amount == Decimal("1000000.00")
    assert balance.advance_credit == ZERO
    assert balance.next_payment_due.due_date == date(2024, 3, 5)


@pytest.mark.parametrize("amount", ["0", "250000", "500000", "900000", "1500000", "2600000"])
def test_outstanding_and_advance_never_overlap(amount):
    payments = [make_payment(1, amount, paid=date(2024, 1, 4))] if amount != "0" else []

    recon = reconcile_lease(make_lease(), payments, date(2024, 3, 10))
    position = lease_position(recon)

    assert not (position.outstanding_balance > ZERO and position.advance_credit > ZERO)
    due_paid = sum((e.paid_amount for e in recon.entries if e.due_date <= recon.now), ZERO)
    assert due_paid + position.advance_credit + recon.unapplied == recon.total_completed


def test_reconciliation_is_deterministic():
    payments = [make_payment(1, "700000", paid=date(2024, 1, 4))]

    assert reconcile_lease(make_lease(), payments, date(2024, 3, 10)) == \
        reconcile_lease(make_lease(), list(reversed(payments)), date(2024, 3, 10))


def test_tenant_position_sums_leases_and_skips_flagged_ones():
    leases = [
        make_lease(lease_id=1),
        make_lease(lease_id=2),
        make_lease(lease_id=3, payment_day=0),
    ]
    payments = [
        make_payment(1, "600000", paid=date(2023, 12, 20), lease_id=2),
        make_payment(2, "600000", paid=date(2024, 1, 2), lease_id=2),
        make_payment(3, "999999", paid=date(2024, 1, 2), lease_id=3),
    ]

    recons = reconcile_many(leases, payments, date(2024, 2, 19))
    position = tenant_position(10, recons)

    assert position.outstanding_balance == Decimal("1000000.00")
    assert position.advance_credit == Decimal("200000.00")
    assert position.payment_status == "overdue"
    assert position.lease_ids == (1, 2, 3)
    assert [f.lease_id for f in position.flagged_leases] == [3]
    assert position.flagged_leases[0].kind == "invalid_lease_terms"
    assert recons[2].entries == ()


def test_flagged_lease_payments_stay_out_of_collected_figures():
    leases = [make_lease(lease_id=1, property_id=100), make_lease(lease_id=2, property_id=200, payment_day=0)]
    payments = [
        make_payment(1, "700000", paid=date(2024, 3, 1), lease_id=2),
        make_payment(2, "50000", status=PaymentStatus.PENDING, created=date(2024, 3, 2), lease_id=2),
        make_payment(3, "25000", status=PaymentStatus.FAILED, created=date(2024, 3, 3), lease_id=2),
    ]

    metrics = portfolio_metrics(leases, payments, date(2024, 3, 10), property_names={100: "A", 200: "B"})

    assert [f.lease_id for f in metrics.flagged_leases] == [2]
    assert metrics.revenue_in_window == ZERO
    assert metrics.pending_amount == ZERO
    assert metrics.failed_amount == ZERO
    assert (metrics.completed_payments, metrics.pending_payments, metrics.failed_payments) == (0, 0, 0)
    assert [(r.property_id, r.completed_amount, r.pending_amount) for r in metrics.revenue_by_property] == [
        (100, ZERO, ZERO), (200, ZERO, ZERO),
    ]
    assert all(b.amount == ZERO for b in metrics.monthly_trend)


def test_completed_payment_without_paid_date_counts_as_collected():
    payments = [make_payment(1, "500000", status=PaymentStatus.COMPLETED, created=date(2024, 1, 4))]
    assert payments[0].paid_date is None

    recon = reconcile_lease(make_lease(), payments, date(2024, 3, 10))
    metrics = portfolio_metrics([make_lease()], payments, date(2024, 3, 10))
    january = portfolio_metrics(
        [make_lease()], payments, date(2024, 3, 10), from_date=date(2024, 1, 1), to_date=date(2024, 1, 31)
    )

    assert sum((e.paid_amount for e in recon.entries), ZERO) == Decimal("500000.00")
    assert metrics.revenue_in_window == Decimal("500000.00")
    assert january.revenue_in_window == Decimal("500000.00")
    assert {b.month: b.amount for b in metrics.monthly_trend}["2024-01"] == Decimal("500000.00")


def test_date_window_does_not_change_outstanding_balance():
    leases = [make_lease()]
    payments = [make_payment(1, "500000", paid=date(2024, 1, 4))]
    now = date(2024, 3, 10)

    filtered = portfolio_metrics(leases, payments, now, from_date=date(2024, 2, 1), to_date=date(2024, 2, 29))
    unfiltered = portfolio_metrics(leases, payments, now)

    assert filtered.revenue_in_window == ZERO
    assert unfiltered.revenue_in_window == Decimal("500000.00")
    assert filtered.total_outstanding == Decimal("1000000.00")
    assert filtered.total_outstanding == unfiltered.total_outstanding
    assert filtered.collection_rate == Decimal("33.33")


def test_property_scope_narrows_leases():
    leases = [make_lease(lease_id=1, property_id=100), make_lease(lease_id=2, property_id=200)]

    metrics = portfolio_metrics(leases, [], date(2024, 2, 19), property_id=200, property_names={100: "A", 200: "B"})

    assert metrics.total_outstanding == Decimal("1000000.00")
    assert [r.property_id for r in metrics.revenue_by_property] == [200]


def test_collection_rate_with_nothing_due_is_full():
    recons = reconcile_many([make_lease(start=date(2024, 6, 1))], [], date(2024, 3, 10))

    assert collection_rate(recons) == Decimal("100.00")
