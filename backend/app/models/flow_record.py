"""
OAuthFlowRecord model for relaying OAuth flow outcomes.

A record is written when the party handling the provider redirect reports the
outcome, and read by the party polling with the same correlation token.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Flow outcome retention time (10 minutes)
FLOW_RETENTION_MINUTES = 10

# Outcome fields a reporter may send
OUTCOME_FIELDS = frozenset({"code", "error"})


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class FlowStatus(str, Enum):
    """Outcome of an OAuth flow as seen by a polling client."""

    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class OAuthFlowRecord(BaseModel):
    """
    Stored outcome of one OAuth authorization attempt.

    Only terminal outcomes are stored; a flow with no record is pending.
    code and error count as reported only when passed explicitly, so an
    explicit None is kept apart from an omitted field (see reported_outcome).

    Attributes:
        state: Caller-chosen correlation token (unique key)
        status: completed or error
        code: Authorization code reported by the callback, if any
        error: Error reported by the callback, if any
        timestamp: When this outcome was written, always UTC
    """

    model_config = ConfigDict(extra="forbid")

    state: str
    status: FlowStatus
    code: Any = None
    error: Any = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("timestamp")
    @classmethod
    def _timestamp_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def from_outcome(
        cls,
        *,
        state: str,
        timestamp: datetime | None = None,
        **outcome: Any,
    ) -> "OAuthFlowRecord":
        """
        Build a record from a reported outcome.

        Any truthy error marks the flow as failed; otherwise it is completed,
        whether or not a code was supplied.

        Args:
            state: Correlation token
            timestamp: Write time (defaults to now)
            **outcome: code and/or error, exactly as reported
        """
        return cls(
            state=state,
            status=FlowStatus.ERROR if outcome.get("error") else FlowStatus.COMPLETED,
            timestamp=timestamp or datetime.now(timezone.utc),
            **outcome,
        )

    @property
    def reported_outcome(self) -> dict[str, Any]:
        """The code/error fields the reporter actually sent."""
        return {
            name: getattr(self, name)
            for name in OUTCOME_FIELDS & self.model_fields_set
        }

    def written_before(self, cutoff: datetime) -> bool:
        return self.timestamp < as_utc(cutoff)

    def is_expired(
        self,
        now: datetime | None = None,
        retention: timedelta = timedelta(minutes=FLOW_RETENTION_MINUTES),
    ) -> bool:
        """
        Check if this record is older than the retention window.

        Returns:
            True if the record was written before now - retention.
        """
        now = now or datetime.now(timezone.utc)
        return self.written_before(now - retention)
