# models/payment.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PaymentStatus(str, enum.Enum):
     """Payment processing states; only COMPLETED moves money onto a schedule."""
     PENDING = "pending"
     PROCESSING = "processing"
     COMPLETED = "completed"
     FAILED = "failed"
     REFUNDED = "refunded"


class Payment(TimestampMixin, Base):
     """
     Payment model - the sole record of cash movement against a lease.

     Rows are written by the payment collaborator (mobile money callbacks,
     manual registration). Status changes go through ``transition_to`` so
     the state machine is enforced in one place.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          Enum(PaymentStatus, name="payment_status", create_constraint=True,
               values_callable=lambda e: [m.value for m in e]),
          default=PaymentStatus.PENDING,
          nullable=False,
          index=True
     )
     paid_date = Column(DateTime, nullable=True, index=True)
     payment_method = Column(String(50), nullable=True)
     transaction_id = Column(String(255), nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, lease_id={self.lease_id}, amount={self.amount}, status='{self.status}')>"

     def transition_to(self, new_status: PaymentStatus, at=None) -> None:
          """Move to ``new_status``; raises InvalidPaymentTransition if not allowed."""
          from services.payment_lifecycle import apply_transition
          self.status, self.paid_date = apply_transition(
               self.status, new_status, self.paid_date, at=at, payment_id=self.id
          )
