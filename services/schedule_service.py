# services/schedule_service.py
"""
Schedule Generator - turns lease terms into billing periods.

Periods are anchored on the lease start date: period k starts exactly
k-1 calendar months after start_date (relativedelta clamps day 29-31 to
short months and recovers in long ones) and ends the day before period
k+1 starts, so the schedule is contiguous by construction.

Due date of a period is the lease's payment day in the calendar month the
period starts in, clamped to that month's last day.

Pro-ration: only a period cut short by end_date is pro-rated, charging
monthly_rent * covered_days / full_period_days, where full_period_days is
the length of the untruncated calendar-month period. The first period
always starts on start_date, so it is never partial.
"""
import logging
from calendar import monthrange
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from models.lease import LeaseStatus
from services.exceptions import InvalidLeaseTerms
from services.types import LeaseTerms, ScheduleEntry, ZERO, to_money, reference_date


logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def validate_terms(lease: LeaseTerms) -> None:
     """
     Check the lease terms can produce a schedule.

     Raises:
          InvalidLeaseTerms: bad dates, payment day outside 1-31, or negative rent.
     """
     if lease.start_date is None:
          raise InvalidLeaseTerms(f"Lease {lease.id} has no start date", lease_id=lease.id)
     if lease.end_date is not None and lease.end_date <= lease.start_date:
          raise InvalidLeaseTerms(
               f"Lease {lease.id}: end date {lease.end_date} must be after start date {lease.start_date}",
               lease_id=lease.id
          )
     if lease.payment_day is None or not 1 <= int(lease.payment_day) <= 31:
          raise InvalidLeaseTerms(
               f"Lease {lease.id}: payment day {lease.payment_day} is outside 1-31",
               lease_id=lease.id
          )
     if lease.monthly_rent is None or to_money(lease.monthly_rent) < ZERO:
          raise InvalidLeaseTerms(f"Lease {lease.id}: monthly rent must not be negative", lease_id=lease.id)


def due_date_for(period_start: date, payment_day: int) -> date:
     """Payment day of the month containing period_start, clamped to month end."""
     last_day = monthrange(period_start.year, period_start.month)[1]
     return date(period_start.year, period_start.month, min(payment_day, last_day))


def period_start_for(start_date: date, payment_number: int) -> date:
     return start_date + relativedelta(months=payment_number - 1)


def prorate(monthly_rent: Decimal, covered_days: int, full_days: int) -> Decimal:
     if covered_days >= full_days:
          return to_money(monthly_rent)
     return to_money(Decimal(monthly_rent) * Decimal(covered_days) / Decimal(full_days))


def build_entry(lease: LeaseTerms, payment_number: int) -> ScheduleEntry:
     """Build period ``payment_number`` of the lease (amounts not yet allocated)."""
     start = period_start_for(lease.start_date, payment_number)
     natural_end = period_start_for(lease.start_date, payment_number + 1) - ONE_DAY
     end = natural_end
     if lease.end_date is not None and lease.end_date < natural_end:
          end = lease.end_date

     full_days = (natural_end - start).days + 1
     covered_days = (end - start).days + 1
     rent = to_money(lease.monthly_rent)

     return ScheduleEntry(
          lease_id=lease.id,
          payment_number=payment_number,
          period_start=start,
          period_end=end,
          due_date=due_date_for(start, int(lease.payment_day)),
          amount_due=prorate(rent, covered_days, full_days),
          is_prorated=covered_days < full_days,
     )


def generate_schedule(
     lease: LeaseTerms,
     now: Union[date, datetime],
     min_coverage: Optional[Decimal] = None
) -> Tuple[ScheduleEntry, ...]:
     """
     Generate the ordered billing periods for a lease.

     Args:
          lease: Lease terms
          now: Reference instant; bounds open-ended leases
          min_coverage: Completed-payment total the schedule must be able to
               absorb. Open-ended leases get extra future periods until it
               is covered; bounded leases are never extended past end_date.

     Returns:
          Tuple of ScheduleEntry ordered by payment_number. Draft leases
          have no schedule and return an empty tuple.

     Raises:
          InvalidLeaseTerms: if the lease terms are invalid
          MissingReferenceClock: if now is None
     """
     today = reference_date(now)
     validate_terms(lease)

     if lease.status == LeaseStatus.DRAFT:
          return ()

     coverage = to_money(min_coverage) if min_coverage is not None else ZERO
     rent = to_money(lease.monthly_rent)
     entries = []
     scheduled = ZERO
     payment_number = 1

     while True:
          start = period_start_for(lease.start_date, payment_number)

          if lease.end_date is not None:
               if start > lease.end_date:
                    break
          elif start > today:
               # One period beyond now, plus whatever prepayments need
               already_ahead = bool(entries) and entries[-1].period_start > today
               if already_ahead and (scheduled >= coverage or rent <= ZERO):
                    break

          entry = build_entry(lease, payment_number)
          entries.append(entry)
          scheduled += entry.amount_due
          payment_number += 1

     logger.debug(
          "Lease %s: generated %d periods as of %s (open-ended=%s)",
          lease.id, len(entries), today, lease.is_open_ended
     )
     return tuple(entries)


def is_contiguous(entries) -> bool:
     """True when every period starts the day after the previous one ends."""
     for previous, current in zip(entries, entries[1:]):
          if previous.period_end + ONE_DAY != current.period_start:
               return False
          if current.payment_number != previous.payment_number + 1:
               return False
     return True
