"""
Flow relay service for handing OAuth flow outcomes between two parties.

The party that receives the provider redirect reports the outcome under the
flow's correlation token; the party that started the flow polls with the same
token until the outcome appears. An unknown token is reported as pending.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from app.core.errors import InvalidRequestError
from app.models import (
    FLOW_RETENTION_MINUTES,
    FlowStatusResponse,
    OAuthFlowRecord,
)
from app.services.protocols import FlowStoreProtocol

logger = logging.getLogger(__name__)

MISSING_STATE_MESSAGE = "Missing state parameter"


class FlowRelay:
    """
    Report, query and sweep OAuth flow outcomes held in a FlowStoreProtocol.

    Args:
        store: Backing store for flow records
        retention: How long a reported outcome stays readable
        sweep_on_request: Sweep expired records before each report/query
        now_fn: Clock returning timezone-aware UTC datetimes
    """

    def __init__(
        self,
        *,
        store: FlowStoreProtocol,
        retention: timedelta = timedelta(minutes=FLOW_RETENTION_MINUTES),
        sweep_on_request: bool = True,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        if retention <= timedelta(0):
            raise ValueError("Flow retention must be positive")
        self.store = store
        self.retention = retention
        self.sweep_on_request = sweep_on_request
        self._now = now_fn or (lambda: datetime.now(timezone.utc))

    def report(
        self,
        state: str | None,
        **outcome: Any,
    ) -> OAuthFlowRecord:
        """
        Record the outcome of a flow, replacing any earlier outcome.

        Args:
            state: Correlation token for the flow
            **outcome: code and/or error from the provider callback. Only
                the fields given are stored, so an explicit None reads back
                as null while an omitted field stays absent. Any truthy
                error marks the flow as failed.

        Returns:
            The stored record

        Raises:
            InvalidRequestError: If state is missing or empty
        """
        if not state:
            raise InvalidRequestError(MISSING_STATE_MESSAGE)

        if self.sweep_on_request:
            self.sweep()

        record = OAuthFlowRecord.from_outcome(
            state=state,
            timestamp=self._now(),
            **outcome,
        )
        self.store.put(record)
        logger.info("Stored OAuth flow outcome (state=%s, status=%s)", state, record.status.value)
        return record

    def query(self, state: str | None) -> FlowStatusResponse:
        """
        Look up the outcome of a flow.

        Args:
            state: Correlation token for the flow

        Returns:
            The stored outcome, or a pending response if none was reported

        Raises:
            InvalidRequestError: If state is missing or empty
        """
        if not state:
            raise InvalidRequestError(MISSING_STATE_MESSAGE)

        if self.sweep_on_request:
            self.sweep()

        record = self.store.get(state)
        if record is None:
            logger.debug("No outcome yet for OAuth flow (state=%s)", state)
            return FlowStatusResponse.pending()

        return FlowStatusResponse.from_record(record)

    def sweep(self, now: datetime | None = None) -> int:
        """
        Remove every outcome older than the retention window.

        Args:
            now: Reference instant (defaults to the relay clock)

        Returns:
            Number of outcomes removed
        """
        now = now or self._now()
        count = self.store.evict_expired(older_than=now - self.retention)
        if count > 0:
            logger.info("Swept %d expired OAuth flow outcomes", count)
        return count
