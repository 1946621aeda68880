"""
Services package for the flow relay.

Usage:
    from app.services import FlowRelay, MemoryFlowStore

    relay = FlowRelay(store=MemoryFlowStore())
    relay.report("abc", code="xyz")
    relay.query("abc")

Available services:
    - flow_store: in-memory record storage
    - flow_relay: report/query/sweep of OAuth flow outcomes
    - flow_cleanup: background sweep task
"""

from .protocols import FlowStoreProtocol
from .flow_store import MemoryFlowStore
from .flow_relay import FlowRelay
from .flow_cleanup import FlowCleanupTask, run_cleanup_task, sweep_in_thread

__all__ = [
    # Protocols
    "FlowStoreProtocol",
    # Store
    "MemoryFlowStore",
    # Relay
    "FlowRelay",
    # Cleanup
    "FlowCleanupTask",
    "run_cleanup_task",
    "sweep_in_thread",
]
