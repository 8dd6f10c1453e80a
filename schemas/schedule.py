# schemas/schedule.py
"""
Pydantic schemas for lease schedule and balance responses.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from enum import Enum


class EntryStatusEnum(str, Enum):
     """Schedule entry settlement status."""
     PAID = "paid"
     PARTIAL = "partial"
     OVERDUE = "overdue"
     PENDING = "pending"
     UPCOMING = "upcoming"


class ScheduleEntryResponse(BaseModel):
     """One billing period of a lease."""
     payment_number: int
     period_start: date
     period_end: date
     due_date: date
     amount_due: Decimal
     paid_amount: Decimal
     is_paid: bool
     status: EntryStatusEnum
     days_overdue: int = 0
     is_prorated: bool = False

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "payment_number": 1,
                    "period_start": "2024-01-05",
                    "period_end": "2024-02-04",
                    "due_date": "2024-01-05",
                    "amount_due": 500000.00,
                    "paid_amount": 500000.00,
                    "is_paid": True,
                    "status": "paid",
                    "days_overdue": 0,
                    "is_prorated": False
               }
          }
     )


class PaymentScheduleResponse(BaseModel):
     """Full schedule of a lease as of a reference date."""
     lease_id: int
     as_of: date
     entries: List[ScheduleEntryResponse]
     status_counts: Dict[str, int]
     total_entries: int


class LeaseBalanceResponse(BaseModel):
     """Balance summary of a lease. current_balance never nets advance credit."""
     lease_id: int
     as_of: date
     total_owed: Decimal
     total_paid: Decimal
     current_balance: Decimal
     overdue_amount: Decimal
     advance_credit: Decimal
     unapplied_credit: Decimal
     next_payment_due: Optional[ScheduleEntryResponse] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "lease_id": 1,
                    "as_of": "2024-02-19",
                    "total_owed": 1000000.00,
                    "total_paid": 500000.00,
                    "current_balance": 500000.00,
                    "overdue_amount": 500000.00,
                    "advance_credit": 0,
                    "unapplied_credit": 0,
                    "next_payment_due": None
               }
          }
     )
