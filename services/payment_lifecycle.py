# services/payment_lifecycle.py
"""
Payment state machine.

     pending -> processing -> completed | failed
     pending -> completed | failed          (provider settles directly)
     completed -> refunded

failed and refunded are terminal. Only completed payments are allocated,
so any transition into or out of completed changes the lease's payment
set version and forces the next reconciliation to start from scratch.
"""
import logging
from datetime import datetime
from typing import Optional, Tuple

from models.payment import PaymentStatus
from services.exceptions import InvalidPaymentTransition


logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
     PaymentStatus.PENDING: {PaymentStatus.PROCESSING, PaymentStatus.COMPLETED, PaymentStatus.FAILED},
     PaymentStatus.PROCESSING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
     PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
     PaymentStatus.FAILED: set(),
     PaymentStatus.REFUNDED: set(),
}


def can_transition(current: PaymentStatus, new: PaymentStatus) -> bool:
     return PaymentStatus(new) in ALLOWED_TRANSITIONS[PaymentStatus(current)]


def affects_allocation(current: PaymentStatus, new: PaymentStatus) -> bool:
     """True when the change moves money onto or off the lease schedule."""
     return PaymentStatus.COMPLETED in (PaymentStatus(current), PaymentStatus(new))


def apply_transition(
     current: PaymentStatus,
     new: PaymentStatus,
     paid_date: Optional[datetime],
     at: Optional[datetime] = None,
     payment_id=None
) -> Tuple[PaymentStatus, Optional[datetime]]:
     """
     Validate a status change and return the resulting (status, paid_date).

     Entering COMPLETED stamps paid_date with ``at`` when the row has none.
     A refund keeps the original paid_date; the payment simply stops
     counting toward allocation.

     Raises:
          InvalidPaymentTransition: if the state machine forbids the change.
     """
     current = PaymentStatus(current)
     new = PaymentStatus(new)

     if not can_transition(current, new):
          raise InvalidPaymentTransition(
               f"Payment {payment_id}: cannot move from {current.value} to {new.value}"
          )

     if new == PaymentStatus.COMPLETED and paid_date is None:
          if at is None:
               raise InvalidPaymentTransition(
                    f"Payment {payment_id}: completing a payment requires a settlement time"
               )
          paid_date = at

     if affects_allocation(current, new):
          logger.info(
               "Payment %s moved %s -> %s; lease allocation will be recomputed",
               payment_id, current.value, new.value
          )
     else:
          logger.debug("Payment %s moved %s -> %s", payment_id, current.value, new.value)

     return new, paid_date
