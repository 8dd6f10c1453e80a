# models/lease.py
import enum
from sqlalchemy import Column, Integer, Numeric, Date, Text, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class LeaseStatus(str, enum.Enum):
     """Lifecycle states of a lease."""
     DRAFT = "draft"
     ACTIVE = "active"
     EXPIRING = "expiring"
     EXPIRED = "expired"
     TERMINATED = "terminated"


class Lease(TimestampMixin, Base):
     """
     Lease model - rental agreement between a tenant and a unit.

     The billing schedule is never stored; it is derived from these
     columns every time the lease is reconciled.
     """
     __tablename__ = "leases"
     __table_args__ = (
          CheckConstraint("payment_day BETWEEN 1 AND 31", name="ck_leases_payment_day"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("property_units.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.tenant_id"), nullable=False, index=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     deposit = Column(Numeric(12, 2), nullable=False, default=0)

     # Lease period; end_date NULL means open-ended
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=True)
     payment_day = Column(Integer, nullable=False, default=1)

     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True,
               values_callable=lambda e: [m.value for m in e]),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True
     )
     terms = Column(Text, nullable=True)

     # Relationships
     unit = relationship("PropertyUnit", back_populates="leases")
     tenant = relationship("Tenant", back_populates="leases")
     payments = relationship("Payment", back_populates="lease", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, unit_id={self.unit_id}, status='{self.status}')>"

     @property
     def property_id(self):
          return self.unit.property_id if self.unit is not None else None
