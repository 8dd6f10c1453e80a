# services/reconciliation_cache.py
"""
Reconciliation cache - optional memo on top of the pure engine.

Key: lease id + the lease terms themselves (dates, rent, payment day,
status and row version, so an edit inside one timestamp tick still misses)
+ payment-set version + reference date.
The payment-set version is a SHA-256 digest over a canonical dump of the
lease's payment rows (id|status|amount|paid_date|version), so a backdated
payment, a refund or a deleted row changes the key. A changed key is a
miss and the fresh result replaces the old one; cached schedules are
never patched.
"""
import hashlib
import logging
import os
import threading
from collections import OrderedDict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from services.reconciliation_service import reconcile_lease
from services.types import LeaseReconciliation, LeaseTerms, PaymentRecord, reference_date, to_money


logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = int(os.getenv("RECONCILIATION_CACHE_SIZE", "512"))


def _normalize_timestamp(ts) -> str:
     return ts.isoformat() if ts is not None else ""


def payment_set_version(payments: Iterable[PaymentRecord]) -> str:
     """
     Deterministic digest of a lease's payment rows.

     Input lines: id|status|amount|paid_date|version, sorted by id.
     Returns 64-char hex string.
     """
     lines = sorted(
          "|".join([
               str(p.id),
               getattr(p.status, "value", str(p.status)),
               f"{to_money(p.amount):.2f}",
               _normalize_timestamp(p.paid_date),
               p.version or "",
          ])
          for p in payments
     )
     return hashlib.sha256("\n".join(lines).encode("utf-8")).hexdigest()


class ReconciliationCache:
     """Bounded LRU of LeaseReconciliation results."""

     def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
          self.max_size = max_size
          self._entries = OrderedDict()
          self._lock = threading.Lock()
          self.hits = 0
          self.misses = 0

     def key_for(self, lease: LeaseTerms, payments: Iterable[PaymentRecord], today: date):
          mine = [p for p in payments if p.lease_id == lease.id]
          return (lease.id, lease, payment_set_version(mine), today.isoformat())

     def reconcile(
          self,
          lease: LeaseTerms,
          payments: Iterable[PaymentRecord],
          now: Union[date, datetime]
     ) -> LeaseReconciliation:
          """Drop-in replacement for reconcile_lease that memoizes by version."""
          today = reference_date(now)
          payments = list(payments)
          key = self.key_for(lease, payments, today)

          with self._lock:
               cached = self._entries.get(key)
               if cached is not None:
                    self._entries.move_to_end(key)
                    self.hits += 1
                    logger.debug("Reconciliation cache hit for lease %s", lease.id)
                    return cached

          result = reconcile_lease(lease, payments, today)

          with self._lock:
               self.misses += 1
               self._drop_lease(lease.id)
               self._entries[key] = result
               while len(self._entries) > self.max_size:
                    self._entries.popitem(last=False)
          logger.debug("Reconciliation cache miss for lease %s", lease.id)
          return result

     def _drop_lease(self, lease_id) -> None:
          for key in [k for k in self._entries if k[0] == lease_id]:
               del self._entries[key]

     def invalidate(self, lease_id: Optional[int] = None) -> None:
          """Forget one lease, or everything when lease_id is None."""
          with self._lock:
               if lease_id is None:
                    self._entries.clear()
               else:
                    self._drop_lease(lease_id)

     def __len__(self):
          return len(self._entries)
