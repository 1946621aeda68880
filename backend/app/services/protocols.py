"""
Protocol definitions for the relay's storage backend.

This module defines Protocol classes (PEP 544) so the relay depends only on
the storage interface, enabling type-safe dependency injection and easy
substitution of an external key-value store.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from app.models import OAuthFlowRecord


@runtime_checkable
class FlowStoreProtocol(Protocol):
    """
    Protocol defining the interface for flow outcome stores.

    MemoryFlowStore implements this protocol. Any replacement (for example a
    Redis-backed store) must keep the same full-replacement semantics for put.

    Example:
        relay = FlowRelay(store=MemoryFlowStore())
    """

    def put(self, record: OAuthFlowRecord) -> None:
        """
        Store a record, replacing any existing record with the same state.

        Args:
            record: The flow outcome to store
        """
        ...

    def get(self, state: str) -> OAuthFlowRecord | None:
        """
        Look up the record for a correlation token.

        Args:
            state: The correlation token

        Returns:
            The stored record, or None if no outcome has been reported
        """
        ...

    def evict_expired(self, *, older_than: datetime) -> int:
        """
        Remove every record written before the given instant.

        Args:
            older_than: Records with a timestamp before this are removed

        Returns:
            Number of records removed
        """
        ...

    def count(self) -> int:
        """Number of records currently held."""
        ...

    def clear(self) -> None:
        """Remove all records."""
        ...
