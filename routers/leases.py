# routers/leases.py
"""
Lease reconciliation routes.

GET /api/leases/{lease_id}/schedule: billing periods with allocation and status.
GET /api/leases/{lease_id}/balance: outstanding / advance / overdue summary.

Both read one reconciliation pass of the lease; nothing is persisted.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from routers.common import (
     get_reconciliation_cache,
     get_reference_instant,
     raise_for_reconciliation_error,
)
from schemas.schedule import LeaseBalanceResponse, PaymentScheduleResponse, ScheduleEntryResponse
from services.balance_service import lease_balance
from services.exceptions import AllocationConservationViolation, InvalidLeaseTerms
from services.reconciliation_cache import ReconciliationCache
from services.row_loader import load_leases, load_payments
from services.status_service import count_by_status

router = APIRouter(prefix="/api/leases", tags=["leases"])


def _reconcile(db: Session, lease_id: int, now: datetime, cache: ReconciliationCache):
     leases = load_leases(db, lease_id=lease_id)
     if not leases:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Lease with ID {lease_id} not found"
          )
     lease = leases[0]
     payments = load_payments(db, [lease.id])
     try:
          return cache.reconcile(lease, payments, now)
     except (InvalidLeaseTerms, AllocationConservationViolation) as e:
          raise_for_reconciliation_error(e)


@router.get(
     "/{lease_id}/schedule",
     response_model=PaymentScheduleResponse,
     summary="Get the payment schedule of a lease"
)
def get_payment_schedule(
     lease_id: int,
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """
     Billing periods of a lease as of ``as_of``.

     - **paid_amount** comes from completed payments, oldest period first
     - **status** is one of paid, partial, overdue, pending, upcoming
     """
     recon = _reconcile(db, lease_id, now, cache)
     return PaymentScheduleResponse(
          lease_id=recon.lease_id,
          as_of=recon.now,
          entries=[ScheduleEntryResponse.model_validate(e) for e in recon.entries],
          status_counts=count_by_status(recon.entries),
          total_entries=len(recon.entries),
     )


@router.get(
     "/{lease_id}/balance",
     response_model=LeaseBalanceResponse,
     summary="Get the balance of a lease"
)
def get_lease_balance(
     lease_id: int,
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """
     Balance summary of a lease.

     **current_balance** is the outstanding amount on periods already due;
     **advance_credit** is reported separately and never offsets it.
     """
     recon = _reconcile(db, lease_id, now, cache)
     balance = lease_balance(recon)
     return LeaseBalanceResponse(
          lease_id=balance.lease_id,
          as_of=recon.now,
          total_owed=balance.total_owed,
          total_paid=balance.total_paid,
          current_balance=balance.current_balance,
          overdue_amount=balance.overdue_amount,
          advance_credit=balance.advance_credit,
          unapplied_credit=balance.unapplied_credit,
          next_payment_due=(
               ScheduleEntryResponse.model_validate(balance.next_payment_due)
               if balance.next_payment_due is not None else None
          ),
     )
