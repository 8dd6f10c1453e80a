from datetime import date, datetime
from decimal import Decimal

from models.lease import LeaseStatus
from models.payment import PaymentStatus
from services.analytics_service import (
    average_payment_days,
    in_window,
    monthly_trend,
    payments_by_method,
    payments_by_status,
    revenue_by_property,
    revenue_forecast,
    trailing_months,
    upcoming_payments,
    window_date,
)
from services.reconciliation_service import reconcile_many
from services.types import ZERO
from tests.helpers import make_lease, make_payment

NOW = date(2024, 3, 10)


def _payments():
    return [
        make_payment(1, "500000", paid=date(2024, 1, 4), created=date(2023, 12, 28)),
        make_payment(2, "450000", paid=date(2024, 3, 1)),
        make_payment(3, "200000", status=PaymentStatus.PENDING, created=date(2024, 3, 2)),
        make_payment(4, "100000", status=PaymentStatus.FAILED, created=date(2024, 2, 12)),
    ]


def test_trailing_months_end_with_current_month():
    months = trailing_months(NOW)

    assert len(months) == 12
    assert months[0] == "2023-04"
    assert months[-1] == "2024-03"


def test_trend_buckets_by_paid_date_and_keeps_empty_months():
    trend = {b.month: b for b in monthly_trend(_payments(), NOW)}

    assert len(trend) == 12
    assert trend["2024-01"].amount == Decimal("500000.00")
    assert trend["2024-01"].count == 1
    assert trend["2023-12"].amount == ZERO
    assert trend["2024-02"].count == 0
    assert trend["2024-03"].amount == Decimal("450000.00")


def test_trend_window_filters_payments_not_months():
    trend = monthly_trend(_payments(), NOW, from_date=date(2024, 2, 1), to_date=date(2024, 2, 29))

    assert len(trend) == 12
    assert all(b.amount == ZERO for b in trend)


def test_revenue_by_property_lists_quiet_properties():
    rows = revenue_by_property(_payments(), {1: 100}, property_names={100: "Sunset Court", 200: "Lakeview"})

    assert [(r.property_id, r.property_name) for r in rows] == [(100, "Sunset Court"), (200, "Lakeview")]
    assert rows[0].completed_amount == Decimal("950000.00")
    assert rows[0].pending_amount == Decimal("200000.00")
    assert rows[1].completed_amount == ZERO
    assert rows[1].pending_count == 0


def test_revenue_by_property_keys_pending_on_creation_date():
    rows = revenue_by_property(_payments(), {1: 100}, from_date=date(2024, 3, 1), to_date=date(2024, 3, 31))

    assert rows[0].completed_amount == Decimal("450000.00")
    assert rows[0].pending_amount == Decimal("200000.00")


def test_payments_by_status_covers_every_status():
    buckets = {b.status: b for b in payments_by_status(_payments())}

    assert set(buckets) == {s.value for s in PaymentStatus}
    assert buckets["completed"].count == 2
    assert buckets["failed"].amount == Decimal("100000.00")
    assert buckets["refunded"].count == 0


def test_forecast_counts_billing_leases_only():
    leases = [
        make_lease(lease_id=1),
        make_lease(lease_id=2, status=LeaseStatus.EXPIRING, rent="300000"),
        make_lease(lease_id=3, status=LeaseStatus.DRAFT),
        make_lease(lease_id=4, status=LeaseStatus.TERMINATED),
    ]

    forecast = revenue_forecast(leases)

    assert forecast["billing_leases"] == 2
    assert forecast["monthly_forecast"] == Decimal("800000.00")
    assert forecast["annual_forecast"] == Decimal("9600000.00")


def test_in_window_is_inclusive():
    assert in_window(datetime(2024, 2, 29, 23, 59), date(2024, 2, 1), date(2024, 2, 29))
    assert in_window(date(2024, 2, 1), date(2024, 2, 1), None)
    assert not in_window(date(2024, 3, 1), None, date(2024, 2, 29))
    assert not in_window(None, None, None)


def test_completed_payment_without_paid_date_is_dated_by_creation():
    payment = make_payment(1, "500000", created=date(2024, 1, 4))

    assert window_date(payment) == datetime(2024, 1, 4, 9, 0)
    assert {b.month: b.amount for b in monthly_trend([payment], NOW)}["2024-01"] == Decimal("500000.00")


def test_payments_by_method_lists_every_method_seen():
    payments = [
        make_payment(1, "500000", paid=date(2024, 1, 4), method="mpesa"),
        make_payment(2, "200000", status=PaymentStatus.PENDING, created=date(2024, 3, 2), method="mpesa"),
        make_payment(3, "100000", status=PaymentStatus.FAILED, created=date(2024, 2, 12), method="card"),
        make_payment(4, "40000", paid=date(2024, 2, 4)),
    ]

    buckets = payments_by_method(payments)

    assert [(b.method, b.count, b.completed_count, b.amount) for b in buckets] == [
        ("card", 1, 0, ZERO),
        ("mpesa", 2, 1, Decimal("500000.00")),
        ("unspecified", 1, 1, Decimal("40000.00")),
    ]


def test_average_payment_days_from_applications():
    payments = [
        make_payment(1, "600000", paid=date(2023, 12, 20)),
        make_payment(2, "600000", paid=date(2024, 1, 2)),
    ]
    recons = reconcile_many([make_lease()], payments, date(2024, 2, 10))

    # Applied against Jan 5, Feb 5, Feb 5 and Mar 5: -16, -47, -34, -63 days
    assert average_payment_days(recons, payments) == Decimal("-40.00")


def test_average_payment_days_without_applications():
    recons = reconcile_many([make_lease()], [], NOW)

    assert average_payment_days(recons, []) is None


def test_average_payment_days_skips_flagged_leases():
    payments = [
        make_payment(1, "500000", paid=date(2024, 1, 15)),
        make_payment(2, "500000", paid=date(2023, 1, 1), lease_id=2),
    ]
    recons = reconcile_many([make_lease(), make_lease(lease_id=2, payment_day=0)], payments, NOW)

    assert average_payment_days(recons, payments) == Decimal("10.00")


def test_upcoming_payments_across_portfolio():
    leases = [
        make_lease(lease_id=1),
        make_lease(lease_id=2, tenant_id=20, start=date(2024, 2, 1), payment_day=1),
        make_lease(lease_id=3, payment_day=0),
    ]
    recons = reconcile_many(leases, [], date(2024, 2, 19))

    upcoming = upcoming_payments(recons)

    assert [(u.lease_id, u.due_date) for u in upcoming] == [(2, date(2024, 3, 1)), (1, date(2024, 3, 5))]
    assert upcoming[0].remaining == Decimal("500000.00")
    assert [u.lease_id for u in upcoming_payments(recons, limit=1)] == [2]
