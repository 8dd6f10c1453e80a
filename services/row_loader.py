# services/row_loader.py
"""
Row Loader - storage side of the reconciliation engine.

Reads Lease / Payment / Property rows through SQLAlchemy and converts
them into the immutable engine inputs. All blocking I/O happens here;
once the rows are converted the engine runs without touching the
session.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from models import Lease, Payment, Property, PropertyUnit
from services.types import LeaseTerms, PaymentRecord, to_money


def to_lease_terms(lease: Lease) -> LeaseTerms:
     """Convert a Lease row (unit relationship loaded) into LeaseTerms."""
     return LeaseTerms(
          id=lease.id,
          tenant_id=lease.tenant_id,
          unit_id=lease.unit_id,
          property_id=lease.property_id,
          start_date=lease.start_date,
          end_date=lease.end_date,
          monthly_rent=to_money(lease.monthly_rent),
          deposit=to_money(lease.deposit),
          payment_day=lease.payment_day,
          status=lease.status,
          version=lease.row_version,
     )


def to_payment_record(payment: Payment) -> PaymentRecord:
     return PaymentRecord(
          id=payment.id,
          lease_id=payment.lease_id,
          amount=to_money(payment.amount),
          status=payment.status,
          paid_date=payment.paid_date,
          created_at=payment.created_at,
          version=payment.row_version,
          method=payment.payment_method,
     )


def load_leases(
     db: Session,
     property_id: Optional[int] = None,
     tenant_id: Optional[int] = None,
     lease_id: Optional[int] = None,
     landlord_id: Optional[int] = None
) -> List[LeaseTerms]:
     """Load leases (optionally filtered) as LeaseTerms, ordered by id."""
     query = db.query(Lease).options(joinedload(Lease.unit))

     if property_id is not None or landlord_id is not None:
          query = query.join(PropertyUnit, Lease.unit_id == PropertyUnit.id)
     if property_id is not None:
          query = query.filter(PropertyUnit.property_id == property_id)
     if landlord_id is not None:
          query = query.join(Property, PropertyUnit.property_id == Property.id)
          query = query.filter(Property.landlord_id == landlord_id)
     if tenant_id is not None:
          query = query.filter(Lease.tenant_id == tenant_id)
     if lease_id is not None:
          query = query.filter(Lease.id == lease_id)

     return [to_lease_terms(lease) for lease in query.order_by(Lease.id).all()]


def load_payments(db: Session, lease_ids: Iterable[int]) -> List[PaymentRecord]:
     """Every payment row (any status) for the given leases."""
     lease_ids = list(lease_ids)
     if not lease_ids:
          return []
     rows = (
          db.query(Payment)
          .filter(Payment.lease_id.in_(lease_ids))
          .order_by(Payment.id)
          .all()
     )
     return [to_payment_record(p) for p in rows]


def load_property_names(db: Session, landlord_id: Optional[int] = None) -> Dict[int, str]:
     query = db.query(Property)
     if landlord_id is not None:
          query = query.filter(Property.landlord_id == landlord_id)
     return {p.id: p.name for p in query.order_by(Property.id).all()}


def load_portfolio(
     db: Session,
     property_id: Optional[int] = None,
     tenant_id: Optional[int] = None,
     landlord_id: Optional[int] = None
) -> Tuple[List[LeaseTerms], List[PaymentRecord]]:
     """Leases in scope plus all of their payments, in two queries."""
     leases = load_leases(db, property_id=property_id, tenant_id=tenant_id, landlord_id=landlord_id)
     payments = load_payments(db, [lease.id for lease in leases])
     return leases, payments
