"""Builders for engine inputs used across the test modules."""
from datetime import date, datetime
from decimal import Decimal

from models.lease import LeaseStatus
from models.payment import PaymentStatus
from services.types import LeaseTerms, PaymentRecord

RENT = Decimal("500000.00")


def make_lease(
    lease_id=1,
    tenant_id=10,
    start=date(2024, 1, 5),
    end=None,
    rent=RENT,
    payment_day=5,
    status=LeaseStatus.ACTIVE,
    property_id=100,
):
    return LeaseTerms(
        id=lease_id,
        tenant_id=tenant_id,
        start_date=start,
        end_date=end,
        monthly_rent=Decimal(rent),
        payment_day=payment_day,
        status=status,
        property_id=property_id,
        version="v1",
    )


def make_payment(
    payment_id,
    amount,
    paid=None,
    status=PaymentStatus.COMPLETED,
    lease_id=1,
    created=None,
    method=None,
):
    """Payment record; created_at defaults to the paid date (or 2024-01-01)."""
    if paid is not None and not isinstance(paid, datetime):
        paid = datetime(paid.year, paid.month, paid.day, 12, 0)
    if created is None:
        created = paid if paid is not None else datetime(2024, 1, 1, 9, 0)
    elif not isinstance(created, datetime):
        created = datetime(created.year, created.month, created.day, 9, 0)
    return PaymentRecord(
        id=payment_id,
        lease_id=lease_id,
        amount=Decimal(amount),
        status=status,
        created_at=created,
        paid_date=paid if status != PaymentStatus.PENDING else None,
        method=method,
    )
