"""
Request and response schemas for the relay API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from app.models.flow_record import FlowStatus, OAuthFlowRecord


class FlowOutcomeReport(BaseModel):
    """Body of a POST reporting an OAuth flow outcome."""

    model_config = ConfigDict(extra="ignore")

    state: str | None = None
    code: Any = None
    error: Any = None


class FlowStatusResponse(BaseModel):
    """
    Answer to a status poll.

    Fields that were never set are dropped from the JSON, so a pending flow
    serializes as {"status": "pending"} while an explicitly reported null
    code or error is echoed as null.
    """

    status: FlowStatus
    code: Any = None
    state: str | None = None
    error: Any = None

    @classmethod
    def pending(cls) -> "FlowStatusResponse":
        return cls(status=FlowStatus.PENDING)

    @classmethod
    def from_record(cls, record: OAuthFlowRecord) -> "FlowStatusResponse":
        return cls(
            status=record.status,
            state=record.state,
            **record.reported_outcome,
        )


class ReportAcceptedResponse(BaseModel):
    """Response for a stored outcome."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests."""

    error: str
