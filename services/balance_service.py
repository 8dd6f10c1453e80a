# services/balance_service.py
"""
Balance Aggregator - lease, tenant and portfolio positions.

Outstanding balance and advance credit are kept apart everywhere:

     outstanding = sum of deficits on entries due on or before now
     advance     = money applied to entries due after now

An entry is either due or not due, so it can feed only one of the two.

Portfolio scope: property_id narrows which leases are included. The
from/to date range narrows only which payments count as collected,
pending or failed in the window. It never narrows the schedule, so
arrears and advance credit are always the as-of-now figures.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from models.payment import PaymentStatus
from services import analytics_service
from services.reconciliation_service import flags_of, reconcile_lease, reconcile_many, reconciled_payments
from services.status_service import is_in_arrears
from services.types import (
     LeaseBalance,
     LeasePosition,
     LeaseReconciliation,
     LeaseTerms,
     PaymentRecord,
     PortfolioMetrics,
     TenantLedgerPosition,
     ZERO,
     reference_date,
     to_money,
)


HUNDRED = Decimal("100")


def _due(recon: LeaseReconciliation):
     return [e for e in recon.entries if e.due_date <= recon.now]


def _not_due(recon: LeaseReconciliation):
     return [e for e in recon.entries if e.due_date > recon.now]


def outstanding_balance(recon: LeaseReconciliation) -> Decimal:
     return sum((e.amount_due - e.paid_amount for e in _due(recon) if e.paid_amount < e.amount_due), ZERO)


def advance_credit(recon: LeaseReconciliation) -> Decimal:
     return sum((e.paid_amount for e in _not_due(recon)), ZERO)


def lease_position(recon: LeaseReconciliation) -> LeasePosition:
     """Position of one lease; a flagged lease contributes zeros."""
     arrears = [e for e in recon.entries if is_in_arrears(e)]
     return LeasePosition(
          lease_id=recon.lease_id,
          tenant_id=recon.tenant_id,
          property_id=recon.lease.property_id,
          outstanding_balance=outstanding_balance(recon),
          advance_credit=advance_credit(recon),
          days_overdue=max((e.days_overdue for e in arrears), default=0),
          overdue_count=len(arrears),
          months_ahead=sum(1 for e in _not_due(recon) if e.is_paid),
          unapplied_credit=recon.unapplied,
     )


def lease_balance(recon: LeaseReconciliation) -> LeaseBalance:
     """Summary used by the lease detail and lease-balance routes."""
     due = _due(recon)
     upcoming = [e for e in recon.entries if not e.is_paid and e.due_date >= recon.now]
     return LeaseBalance(
          lease_id=recon.lease_id,
          total_owed=sum((e.amount_due for e in due), ZERO),
          total_paid=recon.total_completed,
          current_balance=outstanding_balance(recon),
          overdue_amount=sum((e.remaining for e in recon.entries if is_in_arrears(e)), ZERO),
          advance_credit=advance_credit(recon),
          unapplied_credit=recon.unapplied,
          next_payment_due=upcoming[0] if upcoming else None,
     )


def payment_status_label(outstanding: Decimal, advance: Decimal) -> str:
     if outstanding > ZERO:
          return "overdue"
     if advance > ZERO:
          return "advance"
     return "current"


def tenant_position(tenant_id: int, recons: Iterable[LeaseReconciliation]) -> TenantLedgerPosition:
     """Sum per-lease positions for one tenant; flagged leases count as zero."""
     mine = [r for r in recons if r.tenant_id == tenant_id]
     positions = [lease_position(r) for r in mine if r.ok]
     outstanding = sum((p.outstanding_balance for p in positions), ZERO)
     advance = sum((p.advance_credit for p in positions), ZERO)
     return TenantLedgerPosition(
          tenant_id=tenant_id,
          outstanding_balance=outstanding,
          advance_credit=advance,
          days_overdue=max((p.days_overdue for p in positions), default=0),
          overdue_count=sum(p.overdue_count for p in positions),
          months_ahead=sum(p.months_ahead for p in positions),
          unapplied_credit=sum((p.unapplied_credit for p in positions), ZERO),
          payment_status=payment_status_label(outstanding, advance),
          lease_ids=tuple(r.lease_id for r in mine),
          flagged_leases=tuple(flags_of(mine)),
     )


def build_positions(recons: Sequence[LeaseReconciliation]) -> Dict[int, TenantLedgerPosition]:
     """Tenant positions for every tenant in the batch, from one shared pass."""
     tenant_ids = []
     for recon in recons:
          if recon.tenant_id not in tenant_ids:
               tenant_ids.append(recon.tenant_id)
     return {tenant_id: tenant_position(tenant_id, recons) for tenant_id in tenant_ids}


def collection_rate(recons: Iterable[LeaseReconciliation]) -> Decimal:
     """Percentage of money due to date that has been collected (100 when nothing is due)."""
     expected = ZERO
     collected = ZERO
     for recon in recons:
          if not recon.ok:
               continue
          for entry in _due(recon):
               expected += entry.amount_due
               collected += entry.paid_amount
     if expected <= ZERO:
          return to_money(HUNDRED)
     return to_money(collected * HUNDRED / expected)


def scope_leases(leases: Sequence[LeaseTerms], property_id: Optional[int] = None) -> List[LeaseTerms]:
     if property_id is None:
          return list(leases)
     return [lease for lease in leases if lease.property_id == property_id]


def portfolio_metrics(
     leases: Sequence[LeaseTerms],
     payments: Sequence[PaymentRecord],
     now: Union[date, datetime],
     property_id: Optional[int] = None,
     from_date: Optional[date] = None,
     to_date: Optional[date] = None,
     property_names: Optional[Mapping[int, str]] = None,
     reconcile: Callable = reconcile_lease
) -> PortfolioMetrics:
     """
     Portfolio figures, optionally scoped by property and a payment date window.

     Args:
          leases: Every lease the caller may see
          payments: Payment records for those leases
          now: Reference instant for arrears and advance credit
          property_id: Restrict to leases on this property
          from_date, to_date: Window for revenue_in_window, pending_amount
               and failed_amount only
          property_names: property_id -> name for the per-property breakdown
          reconcile: Single-lease reconciliation (a cache may stand in)

     Returns:
          PortfolioMetrics; leases that failed reconciliation are listed in
          flagged_leases and contribute nothing.
     """
     today = reference_date(now)
     scoped = scope_leases(leases, property_id)
     lease_ids = {lease.id for lease in scoped}
     scoped_payments = [p for p in payments if p.lease_id in lease_ids]

     recons = reconcile_many(scoped, scoped_payments, today, reconcile=reconcile)
     positions = [lease_position(r) for r in recons if r.ok]
     counted = reconciled_payments(recons, scoped_payments)
     counted_leases = {r.lease_id: r.lease.property_id for r in recons if r.ok}

     revenue = ZERO
     pending = ZERO
     failed = ZERO
     counts = {"completed": 0, "pending": 0, "failed": 0}
     for payment in counted:
          if not analytics_service.in_window(analytics_service.window_date(payment), from_date, to_date):
               continue
          amount = to_money(payment.amount)
          if payment.status == PaymentStatus.COMPLETED:
               revenue += amount
               counts["completed"] += 1
          elif payment.status in analytics_service.OPEN_STATUSES:
               pending += amount
               counts["pending"] += 1
          elif payment.status == PaymentStatus.FAILED:
               failed += amount
               counts["failed"] += 1

     names = dict(property_names or {})
     if property_id is not None:
          names = {pid: name for pid, name in names.items() if pid == property_id}

     return PortfolioMetrics(
          property_id=property_id,
          from_date=from_date,
          to_date=to_date,
          total_outstanding=sum((p.outstanding_balance for p in positions), ZERO),
          total_advance_credit=sum((p.advance_credit for p in positions), ZERO),
          revenue_in_window=revenue,
          pending_amount=pending,
          failed_amount=failed,
          completed_payments=counts["completed"],
          pending_payments=counts["pending"],
          failed_payments=counts["failed"],
          collection_rate=collection_rate(recons),
          revenue_by_property=analytics_service.revenue_by_property(
               counted,
               counted_leases,
               property_names=names,
               from_date=from_date,
               to_date=to_date,
          ),
          monthly_trend=analytics_service.monthly_trend(
               counted, today, from_date=from_date, to_date=to_date
          ),
          flagged_leases=flags_of(recons),
     )
