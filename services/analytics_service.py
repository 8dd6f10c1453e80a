# services/analytics_service.py
"""
Analytics Rollup - month and property buckets for trend and performance views.

Completed money is bucketed by paid_date; a completed row without one
falls back to created_at, the same instant the allocator orders it by.
Pending and failed payments have no settlement date, so windows for them
are keyed by created_at. Every bucket in range is emitted, zero or not, so chart axes
stay continuous.
"""
from collections import OrderedDict
from decimal import Decimal
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from models.lease import LeaseStatus
from models.payment import PaymentStatus
from services.types import (
     EntryStatus,
     LeaseReconciliation,
     LeaseTerms,
     MethodBucket,
     MonthlyBucket,
     PaymentRecord,
     PropertyRevenue,
     StatusBucket,
     UpcomingPayment,
     ZERO,
     as_date,
     reference_date,
     to_money,
)


TREND_MONTHS = 12
OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PROCESSING)
BILLING_STATUSES = (LeaseStatus.ACTIVE, LeaseStatus.EXPIRING)


def month_key(value: Union[date, datetime]) -> str:
     return value.strftime("%Y-%m")


def in_window(value, from_date: Optional[date], to_date: Optional[date]) -> bool:
     """Inclusive date-window test; a missing bound is open."""
     day = as_date(value)
     if day is None:
          return False
     if from_date is not None and day < from_date:
          return False
     if to_date is not None and day > to_date:
          return False
     return True


def window_date(payment: PaymentRecord):
     """Date a payment is filtered and bucketed by."""
     settled = payment.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)
     if settled and payment.paid_date is not None:
          return payment.paid_date
     return payment.created_at


def trailing_months(now: Union[date, datetime], months: int = TREND_MONTHS) -> List[str]:
     """Month keys for the trailing window ending with the month of ``now``, oldest first."""
     today = reference_date(now)
     first = date(today.year, today.month, 1)
     return [month_key(first - relativedelta(months=offset)) for offset in range(months - 1, -1, -1)]


def monthly_trend(
     payments: Iterable[PaymentRecord],
     now: Union[date, datetime],
     months: int = TREND_MONTHS,
     from_date: Optional[date] = None,
     to_date: Optional[date] = None
) -> List[MonthlyBucket]:
     """
     Completed amounts per calendar month of paid_date over the trailing window.

     Payments outside the optional date window are left out, but every
     month of the trailing window is still emitted.
     """
     buckets = OrderedDict((key, [ZERO, 0]) for key in trailing_months(now, months))
     for payment in payments:
          if not payment.is_completed:
               continue
          settled = window_date(payment)
          if not in_window(settled, from_date, to_date):
               continue
          key = month_key(settled)
          if key in buckets:
               buckets[key][0] += to_money(payment.amount)
               buckets[key][1] += 1
     return [MonthlyBucket(month=key, amount=amount, count=count) for key, (amount, count) in buckets.items()]


def revenue_by_property(
     payments: Iterable[PaymentRecord],
     lease_property: Mapping[int, Optional[int]],
     property_names: Optional[Mapping[int, str]] = None,
     from_date: Optional[date] = None,
     to_date: Optional[date] = None
) -> List[PropertyRevenue]:
     """
     Completed vs pending totals per property.

     Args:
          payments: Payment records
          lease_property: lease_id -> property_id for the leases in scope
          property_names: property_id -> display name; every property listed
               here is emitted even without activity
          from_date, to_date: Optional window (paid_date for completed,
               created_at for pending)
     """
     property_names = property_names or {}
     property_ids = list(property_names.keys())
     for property_id in lease_property.values():
          if property_id not in property_ids:
               property_ids.append(property_id)

     totals: Dict[Optional[int], list] = OrderedDict((pid, [ZERO, ZERO, 0, 0]) for pid in property_ids)
     for payment in payments:
          if payment.lease_id not in lease_property:
               continue
          if not in_window(window_date(payment), from_date, to_date):
               continue
          row = totals[lease_property[payment.lease_id]]
          if payment.is_completed:
               row[0] += to_money(payment.amount)
               row[2] += 1
          elif payment.status in OPEN_STATUSES:
               row[1] += to_money(payment.amount)
               row[3] += 1

     return [
          PropertyRevenue(
               property_id=pid,
               property_name=property_names.get(pid),
               completed_amount=completed,
               pending_amount=pending,
               completed_count=completed_count,
               pending_count=pending_count,
          )
          for pid, (completed, pending, completed_count, pending_count) in totals.items()
     ]


def payments_by_status(payments: Iterable[PaymentRecord]) -> List[StatusBucket]:
     totals = OrderedDict((status.value, [0, ZERO]) for status in PaymentStatus)
     for payment in payments:
          row = totals[PaymentStatus(payment.status).value]
          row[0] += 1
          row[1] += to_money(payment.amount)
     return [StatusBucket(status=s, count=c, amount=a) for s, (c, a) in totals.items()]


UNSPECIFIED_METHOD = "unspecified"


def payments_by_method(payments: Iterable[PaymentRecord]) -> List[MethodBucket]:
     """
     Payment counts and completed money per payment method.

     Every method that appears on any payment gets a bucket, so a method
     seen only on pending or failed rows shows up with a zero amount.
     """
     totals = OrderedDict()
     for payment in sorted(payments, key=lambda p: p.id):
          row = totals.setdefault(payment.method or UNSPECIFIED_METHOD, [0, 0, ZERO])
          row[0] += 1
          if payment.is_completed:
               row[1] += 1
               row[2] += to_money(payment.amount)
     return [
          MethodBucket(method=method, count=count, completed_count=completed, amount=amount)
          for method, (count, completed, amount) in sorted(totals.items())
     ]


def average_payment_days(
     recons: Iterable[LeaseReconciliation],
     payments: Iterable[PaymentRecord]
) -> Optional[Decimal]:
     """
     Mean days between a period's due date and the settlement of the money
     applied to it, one sample per allocation application.

     Negative means paid ahead of the due date. None when nothing has been
     applied yet.
     """
     settled_on = {p.id: as_date(window_date(p)) for p in payments}
     samples = []
     for recon in recons:
          if not recon.ok:
               continue
          due_dates = {e.payment_number: e.due_date for e in recon.entries}
          for application in recon.applications:
               settled = settled_on.get(application.payment_id)
               if settled is None:
                    continue
               samples.append((settled - due_dates[application.payment_number]).days)
     if not samples:
          return None
     return to_money(Decimal(sum(samples)) / Decimal(len(samples)))


def upcoming_payments(
     recons: Iterable[LeaseReconciliation],
     limit: Optional[int] = None
) -> List[UpcomingPayment]:
     """Pending entries across the portfolio, soonest due first."""
     rows = [
          UpcomingPayment(
               lease_id=recon.lease_id,
               tenant_id=recon.tenant_id,
               property_id=recon.lease.property_id,
               payment_number=entry.payment_number,
               due_date=entry.due_date,
               amount_due=entry.amount_due,
               paid_amount=entry.paid_amount,
               remaining=entry.remaining,
          )
          for recon in recons if recon.ok
          for entry in recon.entries if entry.status == EntryStatus.PENDING
     ]
     rows.sort(key=lambda u: (u.due_date, u.lease_id, u.payment_number))
     return rows[:limit] if limit is not None else rows


def revenue_forecast(leases: Sequence[LeaseTerms]) -> dict:
     """Expected rent from leases that are currently billing."""
     billing = [lease for lease in leases if lease.status in BILLING_STATUSES]
     monthly = sum((to_money(lease.monthly_rent) for lease in billing), ZERO)
     return {
          "billing_leases": len(billing),
          "monthly_forecast": monthly,
          "annual_forecast": monthly * 12,
     }
