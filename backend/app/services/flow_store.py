"""
In-memory flow outcome store for single-process deployments.

Records are lost on restart and are not shared between processes.
"""

from datetime import datetime
from threading import Lock

from app.models import OAuthFlowRecord


class MemoryFlowStore:
    """Thread-safe in-memory implementation of FlowStoreProtocol."""

    def __init__(self) -> None:
        self._records: dict[str, OAuthFlowRecord] = {}
        self._lock = Lock()

    def put(self, record: OAuthFlowRecord) -> None:
        with self._lock:
            self._records[record.state] = record

    def get(self, state: str) -> OAuthFlowRecord | None:
        with self._lock:
            return self._records.get(state)

    def evict_expired(self, *, older_than: datetime) -> int:
        with self._lock:
            expired = [
                state
                for state, record in self._records.items()
                if record.written_before(older_than)
            ]
            for state in expired:
                del self._records[state]
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
