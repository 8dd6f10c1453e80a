# services/arrears_service.py
"""
Arrears & Advance Reporter - ranked tenant lists for collections.

Both lists come from build_positions over the same reconciliation batch,
so a tenant's outstanding balance and advance credit shown on the two
lists are always the same figures.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from services.balance_service import build_positions
from services.types import EntryStatus, LeaseReconciliation, TenantLedgerPosition, ZERO, to_money


ON_TRACK_THRESHOLD = Decimal("90")
AT_RISK_THRESHOLD = Decimal("70")


@dataclass(frozen=True)
class ArrearsSummary:
     tenant_count: int
     total_outstanding: Decimal
     average_days_overdue: Decimal


@dataclass(frozen=True)
class ArrearsReport:
     tenants: List[TenantLedgerPosition]
     summary: ArrearsSummary


@dataclass(frozen=True)
class LeaseCompliance:
     lease_id: int
     tenant_id: int
     property_id: Optional[int]
     due_entries: int
     paid_entries: int
     compliance: Decimal
     status: str


def tenants_in_arrears(
     recons: Sequence[LeaseReconciliation],
     limit: Optional[int] = None,
     positions: Optional[Dict[int, TenantLedgerPosition]] = None
) -> ArrearsReport:
     """
     Tenants with an outstanding balance, largest first.

     The summary covers every tenant in arrears even when ``limit`` trims
     the list.
     """
     positions = positions if positions is not None else build_positions(recons)
     owing = [p for p in positions.values() if p.outstanding_balance > ZERO]
     owing.sort(key=lambda p: (-p.outstanding_balance, p.tenant_id))

     total = sum((p.outstanding_balance for p in owing), ZERO)
     average = (
          to_money(Decimal(sum(p.days_overdue for p in owing)) / Decimal(len(owing)))
          if owing else ZERO
     )
     listed = owing[:limit] if limit is not None else owing
     return ArrearsReport(
          tenants=listed,
          summary=ArrearsSummary(
               tenant_count=len(owing),
               total_outstanding=total,
               average_days_overdue=average,
          ),
     )


def advance_payments(
     recons: Sequence[LeaseReconciliation],
     positions: Optional[Dict[int, TenantLedgerPosition]] = None
) -> List[TenantLedgerPosition]:
     """Tenants holding advance credit, largest credit first."""
     positions = positions if positions is not None else build_positions(recons)
     ahead = [p for p in positions.values() if p.advance_credit > ZERO]
     ahead.sort(key=lambda p: (-p.advance_credit, p.tenant_id))
     return ahead


def compliance_status(compliance: Decimal) -> str:
     if compliance >= ON_TRACK_THRESHOLD:
          return "on-track"
     if compliance >= AT_RISK_THRESHOLD:
          return "at-risk"
     return "off-track"


def lease_compliance(recon: LeaseReconciliation) -> LeaseCompliance:
     """Share of entries due so far that are fully paid."""
     due = [e for e in recon.entries if e.due_date <= recon.now]
     paid = [e for e in due if e.status == EntryStatus.PAID]
     compliance = to_money(Decimal(len(paid)) * 100 / Decimal(len(due))) if due else to_money(100)
     return LeaseCompliance(
          lease_id=recon.lease_id,
          tenant_id=recon.tenant_id,
          property_id=recon.lease.property_id,
          due_entries=len(due),
          paid_entries=len(paid),
          compliance=compliance,
          status=compliance_status(compliance),
     )


def compliance_report(recons: Sequence[LeaseReconciliation]) -> List[LeaseCompliance]:
     """Compliance per reconciled lease, weakest first; flagged leases are skipped."""
     rows = [lease_compliance(r) for r in recons if r.ok]
     rows.sort(key=lambda c: (c.compliance, c.lease_id))
     return rows
