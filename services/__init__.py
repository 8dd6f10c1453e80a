# services/__init__.py
from .exceptions import (
     ReconciliationError,
     InvalidLeaseTerms,
     AllocationConservationViolation,
     MissingReferenceClock,
     InvalidPaymentTransition,
)
from .schedule_service import generate_schedule, validate_terms
from .allocation_service import allocate_payments
from .status_service import classify_entry, classify_entries, count_by_status
from .reconciliation_service import reconcile_lease, reconcile_many, reconciled_payments
from .balance_service import (
     lease_position,
     lease_balance,
     tenant_position,
     build_positions,
     portfolio_metrics,
)
from .arrears_service import tenants_in_arrears, advance_payments, compliance_report
from .analytics_service import (
     monthly_trend,
     revenue_by_property,
     payments_by_status,
     payments_by_method,
     average_payment_days,
     upcoming_payments,
)
from .reconciliation_cache import ReconciliationCache

__all__ = [
     "ReconciliationError",
     "InvalidLeaseTerms",
     "AllocationConservationViolation",
     "MissingReferenceClock",
     "InvalidPaymentTransition",
     "generate_schedule",
     "validate_terms",
     "allocate_payments",
     "classify_entry",
     "classify_entries",
     "count_by_status",
     "reconcile_lease",
     "reconcile_many",
     "reconciled_payments",
     "lease_position",
     "lease_balance",
     "tenant_position",
     "build_positions",
     "portfolio_metrics",
     "tenants_in_arrears",
     "advance_payments",
     "compliance_report",
     "monthly_trend",
     "revenue_by_property",
     "payments_by_status",
     "payments_by_method",
     "average_payment_days",
     "upcoming_payments",
     "ReconciliationCache",
]
