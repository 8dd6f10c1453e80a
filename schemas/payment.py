# schemas/payment.py
"""
Pydantic schemas for payment status changes.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum


class PaymentStatusEnum(str, Enum):
     """Payment processing states."""
     PENDING = "pending"
     PROCESSING = "processing"
     COMPLETED = "completed"
     FAILED = "failed"
     REFUNDED = "refunded"


class PaymentStatusUpdate(BaseModel):
     """Request body for PATCH /payments/{payment_id}/status."""
     status: PaymentStatusEnum = Field(..., description="Target status")
     paid_date: Optional[datetime] = Field(
          None,
          description="Settlement time when completing; defaults to the request time",
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "status": "completed",
                    "paid_date": "2024-01-04T09:30:00"
               }
          }
     )


class PaymentResponse(BaseModel):
     """Payment row after a status change."""
     id: int
     lease_id: int
     amount: Decimal
     status: PaymentStatusEnum
     paid_date: Optional[datetime] = None
     created_at: Optional[datetime] = None
     recomputed: bool = Field(False, description="True when the lease allocation had to be rebuilt")

     model_config = ConfigDict(from_attributes=True)
