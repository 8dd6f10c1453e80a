# schemas/ledger.py
"""
Pydantic schemas for per-tenant ledger positions.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from .schedule import ScheduleEntryResponse


class ReconciliationFlagResponse(BaseModel):
     """A lease left out of aggregates and why."""
     lease_id: int
     tenant_id: Optional[int] = None
     kind: str
     reason: str

     model_config = ConfigDict(from_attributes=True)


class TenantPositionResponse(BaseModel):
     """Outstanding and advance figures of one tenant, kept separate."""
     tenant_id: int
     tenant_name: Optional[str] = None
     outstanding_balance: Decimal
     advance_credit: Decimal
     days_overdue: int
     overdue_count: int
     months_ahead: int = 0
     unapplied_credit: Decimal = Decimal("0")
     payment_status: str

     model_config = ConfigDict(from_attributes=True)


class LeaseLedgerResponse(BaseModel):
     lease_id: int
     entries: List[ScheduleEntryResponse]


class TenantLedgerResponse(BaseModel):
     """Tenant position plus the schedule of every lease behind it."""
     as_of: date
     position: TenantPositionResponse
     leases: List[LeaseLedgerResponse]
     flagged_leases: List[ReconciliationFlagResponse] = []
