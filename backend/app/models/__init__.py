"""
Models package for relay records and API schemas.

This package contains:
- OAuthFlowRecord, the stored outcome of an OAuth flow
- Request/response schemas for the relay API

All models are re-exported here for convenience:

    from app.models import OAuthFlowRecord, FlowStatus, FlowStatusResponse
"""

# Flow record model
from app.models.flow_record import (
    FLOW_RETENTION_MINUTES,
    FlowStatus,
    OAuthFlowRecord,
)

# API schemas
from app.models.schemas import (
    ErrorResponse,
    FlowOutcomeReport,
    FlowStatusResponse,
    ReportAcceptedResponse,
)

__all__ = [
    # Flow record
    "FLOW_RETENTION_MINUTES",
    "FlowStatus",
    "OAuthFlowRecord",
    # Schemas
    "ErrorResponse",
    "FlowOutcomeReport",
    "FlowStatusResponse",
    "ReportAcceptedResponse",
]
