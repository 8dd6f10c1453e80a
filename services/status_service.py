# services/status_service.py
"""
Status Classifier - one status per allocated entry relative to ``now``.

     paid      paid_amount >= amount_due
     partial   some money received, due date reached
     overdue   nothing received, due date passed
     pending   not settled, due within the current or next billing cycle
     upcoming  due beyond the next cycle

The next cycle ends one calendar month after the reference date.
"""
from collections import OrderedDict
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta

from services.types import EntryStatus, ScheduleEntry, ZERO, reference_date


def next_cycle_end(today: date) -> date:
     return today + relativedelta(months=1)


def status_for(entry: ScheduleEntry, today: date) -> EntryStatus:
     if entry.paid_amount >= entry.amount_due:
          return EntryStatus.PAID
     if entry.paid_amount > ZERO and entry.due_date <= today:
          return EntryStatus.PARTIAL
     if entry.due_date < today:
          return EntryStatus.OVERDUE
     if entry.due_date <= next_cycle_end(today):
          return EntryStatus.PENDING
     return EntryStatus.UPCOMING


def days_past_due(entry: ScheduleEntry, today: date) -> int:
     """Whole days since the due date for an unsettled entry; 0 otherwise."""
     if entry.paid_amount >= entry.amount_due:
          return 0
     return max(0, (today - entry.due_date).days)


def classify_entry(entry: ScheduleEntry, now: Union[date, datetime]) -> ScheduleEntry:
     """
     Return a copy of ``entry`` with status and days_overdue set.

     days_overdue is only filled for overdue entries and for partial
     entries whose due date has passed.
     """
     today = reference_date(now)
     status = status_for(entry, today)
     days = days_past_due(entry, today) if status in (EntryStatus.OVERDUE, EntryStatus.PARTIAL) else 0
     return replace(entry, status=status, days_overdue=days)


def classify_entries(entries: Sequence[ScheduleEntry], now: Union[date, datetime]) -> Tuple[ScheduleEntry, ...]:
     today = reference_date(now)
     return tuple(classify_entry(entry, today) for entry in entries)


def count_by_status(entries: Iterable[ScheduleEntry]) -> Dict[str, int]:
     """Entry counts keyed by status value; every status is present."""
     counts = OrderedDict((status.value, 0) for status in EntryStatus)
     for entry in entries:
          counts[EntryStatus(entry.status).value] += 1
     return dict(counts)


def is_in_arrears(entry: ScheduleEntry) -> bool:
     return entry.status in (EntryStatus.OVERDUE, EntryStatus.PARTIAL)
