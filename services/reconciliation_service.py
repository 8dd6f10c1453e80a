# services/reconciliation_service.py
"""
Reconciliation pass - the single source of truth every view reads.

For each lease: generate the schedule, allocate the lease's completed
payments, classify every entry as of ``now``. The result is one immutable
LeaseReconciliation; balances, arrears lists, advance-credit lists and
analytics are projections over it and never re-run allocation or
classification themselves.

Batch reconciliation is partial-failure tolerant: a lease with invalid
terms or a conservation breach comes back flagged with no entries and
contributes nothing to aggregates.
"""
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Sequence, Union

from services.allocation_service import allocate_payments, completed_payments
from services.exceptions import AllocationConservationViolation, InvalidLeaseTerms
from services.schedule_service import generate_schedule
from services.status_service import classify_entries
from services.types import (
     LeaseReconciliation,
     LeaseTerms,
     PaymentRecord,
     ReconciliationFlag,
     ZERO,
     to_money,
     reference_date,
)


logger = logging.getLogger(__name__)


def reconcile_lease(
     lease: LeaseTerms,
     payments: Iterable[PaymentRecord],
     now: Union[date, datetime]
) -> LeaseReconciliation:
     """
     Run the full pass for one lease.

     Args:
          lease: Lease terms
          payments: Payment records; only this lease's completed ones count
          now: Reference instant

     Returns:
          LeaseReconciliation with classified entries

     Raises:
          InvalidLeaseTerms, AllocationConservationViolation, MissingReferenceClock
     """
     today = reference_date(now)
     eligible = completed_payments(payments, lease_id=lease.id)
     coverage = sum((to_money(p.amount) for p in eligible), ZERO)

     entries = generate_schedule(lease, today, min_coverage=coverage)
     allocation = allocate_payments(entries, eligible)
     classified = classify_entries(allocation.entries, today)

     return LeaseReconciliation(
          lease=lease,
          now=today,
          entries=classified,
          applications=allocation.applications,
          total_completed=allocation.total_completed,
          unapplied=allocation.unapplied,
     )


def flagged(lease: LeaseTerms, today: date, error: Exception) -> LeaseReconciliation:
     kind = getattr(error, "kind", type(error).__name__)
     logger.warning("Lease %s excluded from aggregates (%s): %s", lease.id, kind, error)
     return LeaseReconciliation(
          lease=lease,
          now=today,
          flag=ReconciliationFlag(
               lease_id=lease.id,
               tenant_id=lease.tenant_id,
               kind=kind,
               reason=str(error),
          ),
     )


def group_payments(payments: Iterable[PaymentRecord]) -> Dict[int, List[PaymentRecord]]:
     grouped = defaultdict(list)
     for payment in payments:
          grouped[payment.lease_id].append(payment)
     return grouped


def reconcile_many(
     leases: Sequence[LeaseTerms],
     payments: Iterable[PaymentRecord],
     now: Union[date, datetime],
     reconcile=reconcile_lease
) -> List[LeaseReconciliation]:
     """
     Reconcile a batch of leases; failures become flags instead of aborting.

     ``reconcile`` lets a caching layer stand in for reconcile_lease.
     MissingReferenceClock is not caught: a batch without a clock is a
     caller error, not a lease error.
     """
     today = reference_date(now)
     by_lease = group_payments(payments)
     results = []
     for lease in leases:
          try:
               results.append(reconcile(lease, by_lease.get(lease.id, []), today))
          except (InvalidLeaseTerms, AllocationConservationViolation) as e:
               results.append(flagged(lease, today, e))
     return results


def flags_of(recons: Iterable[LeaseReconciliation]) -> List[ReconciliationFlag]:
     return [r.flag for r in recons if not r.ok]


def reconciled_payments(
     recons: Iterable[LeaseReconciliation],
     payments: Iterable[PaymentRecord]
) -> List[PaymentRecord]:
     """Payments of leases that reconciled cleanly; a flagged lease's payments count nowhere."""
     ok_ids = {r.lease_id for r in recons if r.ok}
     return [p for p in payments if p.lease_id in ok_ids]
