# services/types.py
"""
Value types shared by the reconciliation engine.

Everything here is immutable. Lease and payment rows are converted into
LeaseTerms / PaymentRecord by the row loader before any computation runs,
and every derived figure (schedule entries, positions, metrics) is a
fresh frozen dataclass built from them.
"""
import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple, List, Union

from models.lease import LeaseStatus
from models.payment import PaymentStatus
from services.exceptions import MissingReferenceClock


CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
     """Quantize any numeric value to two decimal places (half-up)."""
     if value is None:
          return ZERO
     if not isinstance(value, Decimal):
          value = Decimal(str(value))
     return value.quantize(CENT, rounding=ROUND_HALF_UP)


def as_date(value: Union[date, datetime, None]) -> Optional[date]:
     """Reduce a datetime to its calendar date; dates pass through."""
     if value is None:
          return None
     if isinstance(value, datetime):
          return value.date()
     return value


class EntryStatus(str, enum.Enum):
     """Settlement state of one schedule entry relative to ``now``."""
     PAID = "paid"
     PARTIAL = "partial"
     OVERDUE = "overdue"
     PENDING = "pending"
     UPCOMING = "upcoming"


@dataclass(frozen=True)
class LeaseTerms:
     id: int
     tenant_id: int
     start_date: date
     end_date: Optional[date]
     monthly_rent: Decimal
     payment_day: int
     status: LeaseStatus = LeaseStatus.ACTIVE
     unit_id: Optional[int] = None
     property_id: Optional[int] = None
     deposit: Decimal = ZERO
     version: Optional[str] = None

     @property
     def is_open_ended(self) -> bool:
          return self.end_date is None


@dataclass(frozen=True)
class PaymentRecord:
     id: int
     lease_id: int
     amount: Decimal
     status: PaymentStatus
     created_at: datetime
     paid_date: Optional[datetime] = None
     version: Optional[str] = None
     method: Optional[str] = None

     @property
     def is_completed(self) -> bool:
          return self.status == PaymentStatus.COMPLETED

     @property
     def settlement_key(self):
          """Ordering used by the allocator: paid date, then creation time, then id."""
          settled = self.paid_date if self.paid_date is not None else self.created_at
          return (_as_datetime(settled), _as_datetime(self.created_at), self.id)


def _as_datetime(value: Union[date, datetime]) -> datetime:
     if isinstance(value, datetime):
          return value.replace(tzinfo=None)
     return datetime(value.year, value.month, value.day)


@dataclass(frozen=True)
class ScheduleEntry:
     lease_id: int
     payment_number: int
     period_start: date
     period_end: date
     due_date: date
     amount_due: Decimal
     paid_amount: Decimal = ZERO
     is_paid: bool = False
     status: Optional[EntryStatus] = None
     days_overdue: int = 0
     is_prorated: bool = False

     @property
     def remaining(self) -> Decimal:
          return max(self.amount_due - self.paid_amount, ZERO)


@dataclass(frozen=True)
class PaymentApplication:
     """Portion of one payment applied to one schedule entry."""
     payment_id: int
     payment_number: int
     amount_applied: Decimal


@dataclass(frozen=True)
class AllocationResult:
     entries: Tuple[ScheduleEntry, ...]
     applications: Tuple[PaymentApplication, ...]
     total_completed: Decimal
     unapplied: Decimal

     @property
     def total_allocated(self) -> Decimal:
          return sum((e.paid_amount for e in self.entries), ZERO)


@dataclass(frozen=True)
class ReconciliationFlag:
     lease_id: int
     tenant_id: Optional[int]
     kind: str
     reason: str


@dataclass(frozen=True)
class LeaseReconciliation:
     """One canonical reconciliation pass over a single lease."""
     lease: LeaseTerms
     now: date
     entries: Tuple[ScheduleEntry, ...] = ()
     applications: Tuple[PaymentApplication, ...] = ()
     total_completed: Decimal = ZERO
     unapplied: Decimal = ZERO
     flag: Optional[ReconciliationFlag] = None

     @property
     def ok(self) -> bool:
          return self.flag is None

     @property
     def lease_id(self) -> int:
          return self.lease.id

     @property
     def tenant_id(self) -> int:
          return self.lease.tenant_id


@dataclass(frozen=True)
class LeasePosition:
     lease_id: int
     tenant_id: int
     property_id: Optional[int]
     outstanding_balance: Decimal
     advance_credit: Decimal
     days_overdue: int
     overdue_count: int
     months_ahead: int
     unapplied_credit: Decimal = ZERO


@dataclass(frozen=True)
class LeaseBalance:
     lease_id: int
     total_owed: Decimal
     total_paid: Decimal
     current_balance: Decimal
     overdue_amount: Decimal
     advance_credit: Decimal
     unapplied_credit: Decimal
     next_payment_due: Optional[ScheduleEntry] = None


@dataclass(frozen=True)
class TenantLedgerPosition:
     tenant_id: int
     outstanding_balance: Decimal
     advance_credit: Decimal
     days_overdue: int
     overdue_count: int
     months_ahead: int = 0
     unapplied_credit: Decimal = ZERO
     payment_status: str = "current"
     lease_ids: Tuple[int, ...] = ()
     flagged_leases: Tuple[ReconciliationFlag, ...] = ()


@dataclass(frozen=True)
class MonthlyBucket:
     month: str
     amount: Decimal
     count: int


@dataclass(frozen=True)
class PropertyRevenue:
     property_id: Optional[int]
     property_name: Optional[str]
     completed_amount: Decimal
     pending_amount: Decimal
     completed_count: int = 0
     pending_count: int = 0


@dataclass(frozen=True)
class StatusBucket:
     status: str
     count: int
     amount: Decimal


@dataclass(frozen=True)
class MethodBucket:
     """Payments recorded through one payment method; amount counts completed money only."""
     method: str
     count: int
     completed_count: int
     amount: Decimal


@dataclass(frozen=True)
class UpcomingPayment:
     lease_id: int
     tenant_id: int
     property_id: Optional[int]
     payment_number: int
     due_date: date
     amount_due: Decimal
     paid_amount: Decimal
     remaining: Decimal


@dataclass(frozen=True)
class PortfolioMetrics:
     property_id: Optional[int]
     from_date: Optional[date]
     to_date: Optional[date]
     total_outstanding: Decimal
     total_advance_credit: Decimal
     revenue_in_window: Decimal
     pending_amount: Decimal
     failed_amount: Decimal
     completed_payments: int
     pending_payments: int
     failed_payments: int
     collection_rate: Decimal
     revenue_by_property: List[PropertyRevenue] = field(default_factory=list)
     monthly_trend: List[MonthlyBucket] = field(default_factory=list)
     flagged_leases: List[ReconciliationFlag] = field(default_factory=list)


def reference_date(now: Union[date, datetime, None]) -> date:
     """Resolve the explicit reference instant every computation is evaluated at."""
     if now is None:
          raise MissingReferenceClock("A reference instant ('now') is required")
     return as_date(now)
