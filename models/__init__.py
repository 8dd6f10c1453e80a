# models/__init__.py
from .base import Base
from .tenant import Tenant
from .property import Property
from .property_unit import PropertyUnit
from .lease import Lease, LeaseStatus
from .payment import Payment, PaymentStatus

__all__ = [
     "Base",
     "Tenant",
     "Property",
     "PropertyUnit",
     "Lease",
     "LeaseStatus",
     "Payment",
     "PaymentStatus",
]
