# routers/tenants.py
"""
Tenant ledger route.

GET /api/tenants/{tenant_id}/ledger: the tenant's combined position and the
reconciled schedule of each of their leases.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from models import Tenant
from routers.common import get_reconciliation_cache, get_reference_instant
from schemas.ledger import (
     LeaseLedgerResponse,
     ReconciliationFlagResponse,
     TenantLedgerResponse,
     TenantPositionResponse,
)
from schemas.schedule import ScheduleEntryResponse
from services.balance_service import tenant_position
from services.reconciliation_cache import ReconciliationCache
from services.reconciliation_service import reconcile_many
from services.row_loader import load_portfolio
from services.types import reference_date

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


@router.get(
     "/{tenant_id}/ledger",
     response_model=TenantLedgerResponse,
     summary="Get a tenant's ledger position"
)
def get_tenant_ledger(
     tenant_id: int,
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """
     Outstanding balance, advance credit and aging for one tenant across
     all of their leases. A lease that cannot be reconciled is listed under
     **flagged_leases** and contributes nothing.
     """
     tenant = db.query(Tenant).filter(Tenant.tenant_id == tenant_id).first()
     if not tenant:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenant with ID {tenant_id} not found"
          )

     leases, payments = load_portfolio(db, tenant_id=tenant_id)
     recons = reconcile_many(leases, payments, now, reconcile=cache.reconcile)
     position = tenant_position(tenant_id, recons)

     position_response = TenantPositionResponse.model_validate(position)
     position_response.tenant_name = tenant.full_name

     return TenantLedgerResponse(
          as_of=reference_date(now),
          position=position_response,
          leases=[
               LeaseLedgerResponse(
                    lease_id=r.lease_id,
                    entries=[ScheduleEntryResponse.model_validate(e) for e in r.entries],
               )
               for r in recons if r.ok
          ],
          flagged_leases=[ReconciliationFlagResponse.model_validate(f) for f in position.flagged_leases],
     )
