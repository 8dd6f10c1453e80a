# services/exceptions.py
"""
Error kinds raised by the reconciliation engine.

InvalidLeaseTerms and InvalidPaymentTransition also subclass ValueError so
callers that already guard service calls with ``except ValueError`` keep
working.
"""


class ReconciliationError(Exception):
     """Base class for every reconciliation failure."""

     kind = "reconciliation_error"

     def __init__(self, message: str, lease_id=None):
          super().__init__(message)
          self.lease_id = lease_id


class InvalidLeaseTerms(ReconciliationError, ValueError):
     """Lease dates, rent or payment day cannot produce a schedule."""

     kind = "invalid_lease_terms"


class AllocationConservationViolation(ReconciliationError):
     """Allocated total disagrees with the completed-payment total."""

     kind = "allocation_conservation_violation"


class MissingReferenceClock(ReconciliationError):
     """A computation was asked to run without an explicit ``now``."""

     kind = "missing_reference_clock"


class InvalidPaymentTransition(ReconciliationError, ValueError):
     """Payment status change not allowed by the payment state machine."""

     kind = "invalid_payment_transition"
