# schemas/__init__.py
from .schedule import (
     ScheduleEntryResponse,
     PaymentScheduleResponse,
     LeaseBalanceResponse,
)
from .ledger import TenantLedgerResponse, TenantPositionResponse
from .portfolio import (
     PortfolioOverviewResponse,
     OutstandingBalancesResponse,
     AdvancePaymentsResponse,
     AnalyticsResponse,
     ComplianceResponse,
)
from .payment import PaymentStatusUpdate, PaymentResponse

__all__ = [
     "ScheduleEntryResponse",
     "PaymentScheduleResponse",
     "LeaseBalanceResponse",
     "TenantLedgerResponse",
     "TenantPositionResponse",
     "PortfolioOverviewResponse",
     "OutstandingBalancesResponse",
     "AdvancePaymentsResponse",
     "AnalyticsResponse",
     "ComplianceResponse",
     "PaymentStatusUpdate",
     "PaymentResponse",
]
