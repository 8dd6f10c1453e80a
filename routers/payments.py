# routers/payments.py
"""
Payment status API.

PATCH /api/payments/{payment_id}/status: move a payment through its state
machine (pending -> processing -> completed | failed, completed -> refunded).

A move into or out of completed changes which money is allocated. The
lease's cached reconciliation is dropped and the next read recomputes the
whole lease from its payment rows instead of patching entries in place.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from models import Payment
from models.payment import PaymentStatus
from routers.common import get_reconciliation_cache
from schemas.payment import PaymentResponse, PaymentStatusUpdate
from services.exceptions import InvalidPaymentTransition
from services.payment_lifecycle import affects_allocation
from services.reconciliation_cache import ReconciliationCache

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.patch(
     "/{payment_id}/status",
     response_model=PaymentResponse,
     summary="Change payment status",
)
def update_payment_status(
     payment_id: int,
     body: PaymentStatusUpdate,
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache),
):
     """
     Apply a payment status transition.

     1. Validates the transition against the payment state machine.
     2. Stamps paid_date when completing (body.paid_date or now).
     3. Drops the lease's cached reconciliation when allocation is affected.
     """
     payment = db.query(Payment).filter(Payment.id == payment_id).first()
     if not payment:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Payment with ID {payment_id} not found",
          )

     previous = PaymentStatus(payment.status)
     new_status = PaymentStatus(body.status.value)

     # Settlement time used only when completing a row that has no paid_date
     settled_at = body.paid_date if body.paid_date is not None else datetime.utcnow()

     try:
          payment.transition_to(new_status, at=settled_at)
     except InvalidPaymentTransition as e:
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail=str(e),
          )

     db.commit()
     db.refresh(payment)

     recomputed = affects_allocation(previous, new_status)
     if recomputed:
          cache.invalidate(payment.lease_id)

     return PaymentResponse(
          id=payment.id,
          lease_id=payment.lease_id,
          amount=payment.amount,
          status=payment.status.value,
          paid_date=payment.paid_date,
          created_at=payment.created_at,
          recomputed=recomputed,
     )
