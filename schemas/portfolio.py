# schemas/portfolio.py
"""
Pydantic schemas for landlord portfolio views.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .ledger import ReconciliationFlagResponse, TenantPositionResponse


class MonthlyBucketResponse(BaseModel):
     month: str
     amount: Decimal
     count: int

     model_config = ConfigDict(from_attributes=True)


class PropertyRevenueResponse(BaseModel):
     property_id: Optional[int] = None
     property_name: Optional[str] = None
     completed_amount: Decimal
     pending_amount: Decimal
     completed_count: int = 0
     pending_count: int = 0

     model_config = ConfigDict(from_attributes=True)


class StatusBucketResponse(BaseModel):
     status: str
     count: int
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class MethodBucketResponse(BaseModel):
     method: str
     count: int
     completed_count: int
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class UpcomingPaymentResponse(BaseModel):
     """A pending billing period: due today or within the next cycle."""
     lease_id: int
     tenant_id: int
     property_id: Optional[int] = None
     payment_number: int
     due_date: date
     amount_due: Decimal
     paid_amount: Decimal
     remaining: Decimal

     model_config = ConfigDict(from_attributes=True)


class PortfolioOverviewResponse(BaseModel):
     """
     Portfolio metrics. The date window applies to revenue_in_window,
     pending_amount and failed_amount only; outstanding and advance credit
     are always as of ``as_of``.
     """
     as_of: date
     property_id: Optional[int] = None
     from_date: Optional[date] = None
     to_date: Optional[date] = None
     total_outstanding: Decimal
     total_advance_credit: Decimal
     revenue_in_window: Decimal
     pending_amount: Decimal
     failed_amount: Decimal
     completed_payments: int
     pending_payments: int
     failed_payments: int
     collection_rate: Decimal
     revenue_by_property: List[PropertyRevenueResponse]
     monthly_trend: List[MonthlyBucketResponse]
     flagged_leases: List[ReconciliationFlagResponse]

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "as_of": "2024-03-10",
                    "property_id": None,
                    "from_date": "2024-02-01",
                    "to_date": "2024-02-29",
                    "total_outstanding": 500000.00,
                    "total_advance_credit": 0,
                    "revenue_in_window": 0,
                    "pending_amount": 0,
                    "failed_amount": 0,
                    "completed_payments": 0,
                    "pending_payments": 0,
                    "failed_payments": 0,
                    "collection_rate": 66.67,
                    "revenue_by_property": [],
                    "monthly_trend": [],
                    "flagged_leases": []
               }
          }
     )


class ArrearsSummaryResponse(BaseModel):
     tenant_count: int
     total_outstanding: Decimal
     average_days_overdue: Decimal

     model_config = ConfigDict(from_attributes=True)


class OutstandingBalancesResponse(BaseModel):
     """Tenants in arrears, largest balance first."""
     as_of: date
     tenants: List[TenantPositionResponse]
     summary: ArrearsSummaryResponse


class AdvancePaymentsResponse(BaseModel):
     """Tenants holding advance credit."""
     as_of: date
     tenants: List[TenantPositionResponse]
     total_advance_credit: Decimal


class ForecastResponse(BaseModel):
     billing_leases: int
     monthly_forecast: Decimal
     annual_forecast: Decimal


class AnalyticsResponse(BaseModel):
     as_of: date
     monthly_trend: List[MonthlyBucketResponse]
     revenue_by_property: List[PropertyRevenueResponse]
     payments_by_status: List[StatusBucketResponse]
     payments_by_method: List[MethodBucketResponse]
     average_payment_days: Optional[Decimal] = Field(
          None, description="Mean days from due date to settlement; negative when paid early"
     )
     upcoming_payments: List[UpcomingPaymentResponse]
     forecast: ForecastResponse


class LeaseComplianceResponse(BaseModel):
     lease_id: int
     tenant_id: int
     property_id: Optional[int] = None
     due_entries: int
     paid_entries: int
     compliance: Decimal
     status: str

     model_config = ConfigDict(from_attributes=True)


class ComplianceResponse(BaseModel):
     as_of: date
     leases: List[LeaseComplianceResponse]
