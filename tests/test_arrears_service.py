from datetime import date
from decimal import Decimal

import pytest

from services.arrears_service import (
    advance_payments,
    compliance_report,
    compliance_status,
    tenants_in_arrears,
)
from services.balance_service import build_positions
from services.reconciliation_service import reconcile_many
from tests.helpers import make_lease, make_payment

NOW = date(2024, 2, 19)


@pytest.fixture
def recons():
    leases = [
        make_lease(lease_id=1, tenant_id=10),
        make_lease(lease_id=2, tenant_id=20),
        make_lease(lease_id=3, tenant_id=30),
        make_lease(lease_id=4, tenant_id=40, end=date(2023, 1, 1)),
    ]
    payments = [
        make_payment(1, "500000", paid=date(2024, 1, 4), lease_id=2),
        make_payment(2, "600000", paid=date(2023, 12, 20), lease_id=3),
        make_payment(3, "600000", paid=date(2024, 1, 2), lease_id=3),
    ]
    return reconcile_many(leases, payments, NOW)


def test_arrears_are_sorted_largest_first(recons):
    report = tenants_in_arrears(recons)

    assert [p.tenant_id for p in report.tenants] == [10, 20]
    assert [p.outstanding_balance for p in report.tenants] == [Decimal("1000000.00"), Decimal("500000.00")]
    assert report.summary.tenant_count == 2
    assert report.summary.total_outstanding == Decimal("1500000.00")
    assert report.summary.average_days_overdue == Decimal("29.50")


def test_limit_trims_list_but_not_summary(recons):
    report = tenants_in_arrears(recons, limit=1)

    assert [p.tenant_id for p in report.tenants] == [10]
    assert report.summary.tenant_count == 2


def test_advance_list_matches_shared_positions(recons):
    positions = build_positions(recons)

    ahead = advance_payments(recons, positions=positions)

    assert [p.tenant_id for p in ahead] == [30]
    assert ahead[0] is positions[30]
    assert ahead[0].advance_credit == Decimal("200000.00")
    assert ahead[0].outstanding_balance == Decimal("0.00")


def test_flagged_lease_is_left_out_of_both_lists(recons):
    assert 40 not in [p.tenant_id for p in tenants_in_arrears(recons).tenants]
    assert 40 not in [p.tenant_id for p in advance_payments(recons)]


@pytest.mark.parametrize("value, expected", [
    ("100", "on-track"),
    ("90", "on-track"),
    ("89.99", "at-risk"),
    ("70", "at-risk"),
    ("69.99", "off-track"),
    ("0", "off-track"),
])
def test_compliance_thresholds(value, expected):
    assert compliance_status(Decimal(value)) == expected


def test_compliance_report_weakest_first(recons):
    rows = compliance_report(recons)

    assert [(r.lease_id, r.due_entries, r.paid_entries) for r in rows] == [(1, 2, 0), (2, 2, 1), (3, 2, 2)]
    assert [r.compliance for r in rows] == [Decimal("0.00"), Decimal("50.00"), Decimal("100.00")]
    assert [r.status for r in rows] == ["off-track", "off-track", "on-track"]
