from calendar import monthrange
from datetime import date
from decimal import Decimal

import pytest

from models.lease import LeaseStatus
from services.exceptions import InvalidLeaseTerms, MissingReferenceClock
from services.schedule_service import due_date_for, generate_schedule, is_contiguous
from tests.helpers import make_lease


def test_open_ended_lease_runs_one_period_past_now():
    entries = generate_schedule(make_lease(), date(2024, 3, 10))

    assert [e.period_start for e in entries] == [
        date(2024, 1, 5), date(2024, 2, 5), date(2024, 3, 5), date(2024, 4, 5),
    ]
    assert [e.payment_number for e in entries] == [1, 2, 3, 4]
    assert entries[0].period_end == date(2024, 2, 4)
    assert all(e.amount_due == Decimal("500000.00") for e in entries)


def test_lease_starting_after_now_has_a_single_period():
    entries = generate_schedule(make_lease(start=date(2024, 6, 1), payment_day=1), date(2024, 3, 10))

    assert len(entries) == 1
    assert entries[0].due_date == date(2024, 6, 1)


def test_prepayments_extend_open_ended_schedule():
    entries = generate_schedule(make_lease(), date(2024, 1, 10), min_coverage=Decimal("2000000"))

    assert len(entries) == 4
    assert entries[-1].period_start == date(2024, 4, 5)


def test_bounded_lease_is_never_extended_by_prepayments():
    lease = make_lease(start=date(2024, 1, 1), end=date(2024, 2, 29), rent="1000", payment_day=1)

    entries = generate_schedule(lease, date(2024, 1, 10), min_coverage=Decimal("5000"))

    assert len(entries) == 2
    assert entries[-1].period_end == date(2024, 2, 29)


def test_payment_day_is_clamped_to_short_months():
    lease = make_lease(start=date(2024, 1, 31), end=date(2024, 4, 29), payment_day=31)

    entries = generate_schedule(lease, date(2024, 1, 31))

    assert [e.due_date for e in entries] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    assert [e.period_end for e in entries] == [date(2024, 2, 28), date(2024, 3, 30), date(2024, 4, 29)]
    assert not any(e.is_prorated for e in entries)


def test_due_date_for_february_in_common_year():
    assert due_date_for(date(2023, 2, 10), 30) == date(2023, 2, 28)
    assert due_date_for(date(2023, 3, 10), 30) == date(2023, 3, 30)


def test_last_period_cut_short_by_end_date_is_prorated():
    lease = make_lease(start=date(2024, 1, 1), end=date(2024, 3, 15), rent="3100", payment_day=1)

    entries = generate_schedule(lease, date(2024, 1, 1))

    assert [e.amount_due for e in entries] == [Decimal("3100.00"), Decimal("3100.00"), Decimal("1500.00")]
    assert entries[-1].is_prorated
    assert entries[-1].period_end == date(2024, 3, 15)


def test_long_schedule_is_contiguous_and_covers_the_lease():
    lease = make_lease(start=date(2023, 1, 31), end=date(2025, 6, 30), payment_day=31)

    entries = generate_schedule(lease, date(2024, 1, 1))

    assert is_contiguous(entries)
    assert entries[0].period_start == lease.start_date
    assert entries[-1].period_end == lease.end_date
    for entry in entries:
        last_day = monthrange(entry.period_start.year, entry.period_start.month)[1]
        assert entry.due_date.day == min(31, last_day)


def test_draft_lease_has_no_schedule():
    assert generate_schedule(make_lease(status=LeaseStatus.DRAFT), date(2024, 3, 10)) == ()


def test_expired_lease_without_end_date_still_bills_up_to_now():
    entries = generate_schedule(make_lease(status=LeaseStatus.EXPIRED), date(2024, 2, 10))

    assert len(entries) == 3


@pytest.mark.parametrize("overrides", [
    {"end": date(2024, 1, 5)},
    {"end": date(2023, 12, 31)},
    {"payment_day": 0},
    {"payment_day": 32},
    {"rent": "-1"},
])
def test_invalid_terms_are_rejected(overrides):
    with pytest.raises(InvalidLeaseTerms) as exc:
        generate_schedule(make_lease(**overrides), date(2024, 3, 10))

    assert exc.value.lease_id == 1
    assert exc.value.kind == "invalid_lease_terms"


def test_reference_instant_is_required():
    with pytest.raises(MissingReferenceClock):
        generate_schedule(make_lease(), None)
