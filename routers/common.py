# routers/common.py
"""
Helpers shared by the reconciliation routes.

Routes own the clock: each request resolves one reference instant (the
``as_of`` query parameter, or the current UTC time) and passes it to the
engine explicitly.
"""
from datetime import datetime
from typing import Dict, Iterable, Optional

from fastapi import HTTPException, Query, status
from sqlalchemy.orm import Session

from models import Tenant
from services.exceptions import AllocationConservationViolation, InvalidLeaseTerms
from services.reconciliation_cache import ReconciliationCache

# Process-wide cache; keys carry lease and payment-set versions
reconciliation_cache = ReconciliationCache()


def get_reference_instant(
     as_of: Optional[datetime] = Query(None, description="Reference instant (defaults to now, UTC)")
) -> datetime:
     return as_of if as_of is not None else datetime.utcnow()


def get_reconciliation_cache() -> ReconciliationCache:
     return reconciliation_cache


def raise_for_reconciliation_error(error: Exception):
     """Map engine errors on single-lease routes to HTTP errors."""
     if isinstance(error, InvalidLeaseTerms):
          raise HTTPException(
               status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
               detail=str(error)
          )
     if isinstance(error, AllocationConservationViolation):
          raise HTTPException(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               detail=f"Lease {error.lease_id} could not be reconciled"
          )
     raise error


def tenant_names(db: Session, tenant_ids: Iterable[int]) -> Dict[int, str]:
     tenant_ids = list(tenant_ids)
     if not tenant_ids:
          return {}
     rows = db.query(Tenant).filter(Tenant.tenant_id.in_(tenant_ids)).all()
     return {t.tenant_id: t.full_name for t in rows}
