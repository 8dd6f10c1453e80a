# routers/landlords.py
"""
Landlord portfolio routes.

Every route loads the leases in scope, reconciles them once and projects
the result; no route re-derives allocation or status on its own.

- GET /api/landlords/payments/overview: portfolio metrics (date window
  applies to collected / pending / failed figures only)
- GET /api/landlords/tenants/outstanding: tenants in arrears
- GET /api/landlords/payments/advance: tenants holding advance credit
- GET /api/landlords/analytics: monthly trend, per-property revenue,
  payments by status and method, average days to pay, upcoming periods,
  rent forecast
- GET /api/landlords/compliance: per-lease schedule compliance
"""
from dataclasses import asdict
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from routers.common import get_reconciliation_cache, get_reference_instant, tenant_names
from schemas.ledger import TenantPositionResponse
from schemas.portfolio import (
     AdvancePaymentsResponse,
     AnalyticsResponse,
     ArrearsSummaryResponse,
     ComplianceResponse,
     ForecastResponse,
     LeaseComplianceResponse,
     MethodBucketResponse,
     MonthlyBucketResponse,
     OutstandingBalancesResponse,
     PortfolioOverviewResponse,
     PropertyRevenueResponse,
     StatusBucketResponse,
     UpcomingPaymentResponse,
)
from services import analytics_service
from services.arrears_service import advance_payments, compliance_report, tenants_in_arrears
from services.balance_service import build_positions, portfolio_metrics
from services.reconciliation_cache import ReconciliationCache
from services.reconciliation_service import reconcile_many, reconciled_payments
from services.row_loader import load_portfolio, load_property_names
from services.types import ZERO, reference_date

router = APIRouter(prefix="/api/landlords", tags=["landlords"])


def _check_window(from_date: Optional[date], to_date: Optional[date]) -> None:
     if from_date is not None and to_date is not None and from_date > to_date:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="from_date must not be after to_date"
          )


def _position_responses(positions, names):
     responses = []
     for position in positions:
          response = TenantPositionResponse.model_validate(position)
          response.tenant_name = names.get(position.tenant_id)
          responses.append(response)
     return responses


@router.get(
     "/payments/overview",
     response_model=PortfolioOverviewResponse,
     summary="Portfolio payment overview"
)
def get_payment_overview(
     landlord_id: Optional[int] = Query(None, description="Restrict to one landlord's properties"),
     property_id: Optional[int] = Query(None, description="Restrict to one property"),
     from_date: Optional[date] = Query(None, description="Window start for collected figures"),
     to_date: Optional[date] = Query(None, description="Window end for collected figures"),
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """
     Portfolio metrics.

     - **from_date / to_date** narrow revenue_in_window, pending_amount and
       failed_amount only
     - **total_outstanding / total_advance_credit** are always as of now
     """
     _check_window(from_date, to_date)
     leases, payments = load_portfolio(db, property_id=property_id, landlord_id=landlord_id)
     metrics = portfolio_metrics(
          leases,
          payments,
          now,
          property_id=property_id,
          from_date=from_date,
          to_date=to_date,
          property_names=load_property_names(db, landlord_id=landlord_id),
          reconcile=cache.reconcile,
     )
     return PortfolioOverviewResponse.model_validate(
          {**asdict(metrics), "as_of": reference_date(now)}
     )


@router.get(
     "/tenants/outstanding",
     response_model=OutstandingBalancesResponse,
     summary="Tenants with outstanding balances"
)
def get_tenants_with_outstanding_balance(
     limit: Optional[int] = Query(None, ge=1, le=500, description="Maximum tenants listed"),
     landlord_id: Optional[int] = Query(None),
     property_id: Optional[int] = Query(None),
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """Tenants in arrears sorted by outstanding balance, largest first."""
     leases, payments = load_portfolio(db, property_id=property_id, landlord_id=landlord_id)
     recons = reconcile_many(leases, payments, now, reconcile=cache.reconcile)
     report = tenants_in_arrears(recons, limit=limit, positions=build_positions(recons))
     names = tenant_names(db, [p.tenant_id for p in report.tenants])
     return OutstandingBalancesResponse(
          as_of=reference_date(now),
          tenants=_position_responses(report.tenants, names),
          summary=ArrearsSummaryResponse.model_validate(report.summary),
     )


@router.get(
     "/payments/advance",
     response_model=AdvancePaymentsResponse,
     summary="Tenants with advance credit"
)
def get_advance_payments(
     landlord_id: Optional[int] = Query(None),
     property_id: Optional[int] = Query(None),
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """Tenants who have paid ahead, with months_ahead per tenant."""
     leases, payments = load_portfolio(db, property_id=property_id, landlord_id=landlord_id)
     recons = reconcile_many(leases, payments, now, reconcile=cache.reconcile)
     ahead = advance_payments(recons, positions=build_positions(recons))
     names = tenant_names(db, [p.tenant_id for p in ahead])
     return AdvancePaymentsResponse(
          as_of=reference_date(now),
          tenants=_position_responses(ahead, names),
          total_advance_credit=sum((p.advance_credit for p in ahead), ZERO),
     )


@router.get(
     "/analytics",
     response_model=AnalyticsResponse,
     summary="Payment analytics"
)
def get_financial_analytics(
     landlord_id: Optional[int] = Query(None),
     property_id: Optional[int] = Query(None),
     from_date: Optional[date] = Query(None),
     to_date: Optional[date] = Query(None),
     upcoming_limit: Optional[int] = Query(None, ge=1, le=500, description="Maximum upcoming payments listed"),
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """
     Trailing 12-month trend, per-property completed vs pending, payments
     by status and method, average days to pay, upcoming periods, forecast.

     Payments of leases that cannot be reconciled are left out of every figure.
     """
     _check_window(from_date, to_date)
     leases, payments = load_portfolio(db, property_id=property_id, landlord_id=landlord_id)
     recons = reconcile_many(leases, payments, now, reconcile=cache.reconcile)
     payments = reconciled_payments(recons, payments)
     names = load_property_names(db, landlord_id=landlord_id)
     if property_id is not None:
          names = {pid: name for pid, name in names.items() if pid == property_id}

     trend = analytics_service.monthly_trend(payments, now, from_date=from_date, to_date=to_date)
     by_property = analytics_service.revenue_by_property(
          payments,
          {r.lease_id: r.lease.property_id for r in recons if r.ok},
          property_names=names,
          from_date=from_date,
          to_date=to_date,
     )
     return AnalyticsResponse(
          as_of=reference_date(now),
          monthly_trend=[MonthlyBucketResponse.model_validate(b) for b in trend],
          revenue_by_property=[PropertyRevenueResponse.model_validate(r) for r in by_property],
          payments_by_status=[
               StatusBucketResponse.model_validate(b)
               for b in analytics_service.payments_by_status(payments)
          ],
          payments_by_method=[
               MethodBucketResponse.model_validate(b)
               for b in analytics_service.payments_by_method(payments)
          ],
          average_payment_days=analytics_service.average_payment_days(recons, payments),
          upcoming_payments=[
               UpcomingPaymentResponse.model_validate(u)
               for u in analytics_service.upcoming_payments(recons, limit=upcoming_limit)
          ],
          forecast=ForecastResponse(**analytics_service.revenue_forecast([r.lease for r in recons if r.ok])),
     )


@router.get(
     "/compliance",
     response_model=ComplianceResponse,
     summary="Payment schedule compliance"
)
def get_payment_compliance(
     landlord_id: Optional[int] = Query(None),
     property_id: Optional[int] = Query(None),
     now: datetime = Depends(get_reference_instant),
     db: Session = Depends(get_session),
     cache: ReconciliationCache = Depends(get_reconciliation_cache)
):
     """Share of due periods fully paid per lease: on-track, at-risk or off-track."""
     leases, payments = load_portfolio(db, property_id=property_id, landlord_id=landlord_id)
     recons = reconcile_many(leases, payments, now, reconcile=cache.reconcile)
     return ComplianceResponse(
          as_of=reference_date(now),
          leases=[LeaseComplianceResponse.model_validate(c) for c in compliance_report(recons)],
     )
