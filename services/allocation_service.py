# services/allocation_service.py
"""
Payment Allocator - applies completed payments to schedule entries.

Payments are walked in settlement order (paid date, then creation time,
then id). Each one fills the earliest entry that still has a remaining
balance and spills into the following entries when it is larger than that
remainder, so once every past period is satisfied the money prepays
future periods. Nothing is mutated: the result carries new entries.
"""
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, List, Sequence

from services.exceptions import AllocationConservationViolation
from services.types import (
     AllocationResult,
     PaymentApplication,
     PaymentRecord,
     ScheduleEntry,
     ZERO,
     to_money,
)


logger = logging.getLogger(__name__)


def completed_payments(payments: Iterable[PaymentRecord], lease_id=None) -> List[PaymentRecord]:
     """Completed payments (optionally for one lease) in allocation order."""
     eligible = [
          p for p in payments
          if p.is_completed and (lease_id is None or p.lease_id == lease_id)
     ]
     return sorted(eligible, key=lambda p: p.settlement_key)


def allocate_payments(
     entries: Sequence[ScheduleEntry],
     payments: Iterable[PaymentRecord]
) -> AllocationResult:
     """
     Allocate completed payments oldest-period-first.

     Args:
          entries: Schedule entries ordered by payment_number
          payments: Payment records; anything not completed is ignored

     Returns:
          AllocationResult with new entries, per-payment applications and
          the amount left over once every entry is fully paid.

     Raises:
          AllocationConservationViolation: if allocated + unapplied does not
               equal the completed-payment total.
     """
     ordered = completed_payments(payments)
     paid = [ZERO for _ in entries]
     applications = []
     total_completed = ZERO
     unapplied = ZERO
     cursor = 0

     for payment in ordered:
          amount = to_money(payment.amount)
          total_completed += amount
          left = amount

          while left > ZERO and cursor < len(entries):
               room = entries[cursor].amount_due - paid[cursor]
               if room <= ZERO:
                    cursor += 1
                    continue
               applied = min(left, room)
               paid[cursor] += applied
               left -= applied
               applications.append(PaymentApplication(
                    payment_id=payment.id,
                    payment_number=entries[cursor].payment_number,
                    amount_applied=applied,
               ))

          if left > ZERO:
               unapplied += left

     allocated = [
          replace(entry, paid_amount=paid[i], is_paid=paid[i] >= entry.amount_due)
          for i, entry in enumerate(entries)
     ]
     result = AllocationResult(
          entries=tuple(allocated),
          applications=tuple(applications),
          total_completed=total_completed,
          unapplied=unapplied,
     )
     check_conservation(result, lease_id=entries[0].lease_id if entries else None)

     if unapplied > ZERO:
          logger.info(
               "Lease %s: %s of completed payments exceeds the whole schedule",
               entries[0].lease_id if entries else None, unapplied
          )
     return result


def check_conservation(result: AllocationResult, lease_id=None) -> None:
     """Allocated plus unapplied money must equal the completed total, exactly."""
     allocated = result.total_allocated
     if allocated + result.unapplied != result.total_completed or allocated > result.total_completed:
          raise AllocationConservationViolation(
               f"Lease {lease_id}: allocated {allocated} + unapplied {result.unapplied} "
               f"!= completed {result.total_completed}",
               lease_id=lease_id
          )
     for entry in result.entries:
          if entry.paid_amount < ZERO or entry.paid_amount > entry.amount_due:
               raise AllocationConservationViolation(
                    f"Lease {lease_id}: entry {entry.payment_number} holds {entry.paid_amount} "
                    f"against {entry.amount_due} due",
                    lease_id=lease_id
               )


def applications_for_payment(result: AllocationResult, payment_id) -> List[PaymentApplication]:
     return [a for a in result.applications if a.payment_id == payment_id]


def total_applied(applications: Iterable[PaymentApplication]) -> Decimal:
     return sum((a.amount_applied for a in applications), ZERO)
