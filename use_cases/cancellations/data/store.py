"""
In-memory store for issued cancellations.

Keeps cancellation records for status lookups for the lifetime of the
process. Nothing is written to disk.
"""

import threading
from typing import Dict, List, Optional

from core.data import QueryOptions, QueryResult, Repository, paginate

from ..domain.models import CancellationRecord


class InMemoryCancellationStore(Repository[CancellationRecord]):
    """Thread-safe dictionary-backed repository of cancellation records."""

    def __init__(self):
        self._records: Dict[str, CancellationRecord] = {}
        self._lock = threading.Lock()

    def get_by_id(self, id: str) -> Optional[CancellationRecord]:
        with self._lock:
            return self._records.get(id)

    def find(self, options: Optional[QueryOptions] = None) -> QueryResult[CancellationRecord]:
        options = options or QueryOptions()
        with self._lock:
            records: List[CancellationRecord] = list(self._records.values())

        for attr, expected in options.filters.items():
            records = [r for r in records if getattr(r, attr, None) == expected]

        order_by = options.order_by or "created_at"
        records.sort(key=lambda r: getattr(r, order_by), reverse=options.order_desc)
        return paginate(records, options)

    def save(self, entity: CancellationRecord) -> CancellationRecord:
        with self._lock:
            self._records[entity.cancellation_id] = entity
        return entity

    def delete(self, id: str) -> bool:
        with self._lock:
            return self._records.pop(id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
