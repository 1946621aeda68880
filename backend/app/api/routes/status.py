"""
Flow status API routes.

Provides endpoints for:
- Reporting the outcome of an OAuth redirect (POST)
- Polling for that outcome by correlation token (GET)
- CORS preflight (OPTIONS)

Every other method is rejected with 405.
"""

from fastapi import APIRouter, Response, status

from app.api.deps import FlowRelayDep
from app.core.errors import MethodNotSupportedError
from app.models import (
    ErrorResponse,
    FlowOutcomeReport,
    FlowStatusResponse,
    ReportAcceptedResponse,
)

router = APIRouter(tags=["status"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
}


@router.options("/status")
async def preflight_status() -> Response:
    """
    Answer a CORS preflight.

    The CORS headers themselves are added by the application middleware.
    """
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/status",
    response_model=FlowStatusResponse,
    response_model_exclude_unset=True,
    responses=_ERROR_RESPONSES,
)
async def get_flow_status(
    relay: FlowRelayDep,
    state: str | None = None,
) -> FlowStatusResponse:
    """
    Poll for the outcome of an OAuth flow.

    Returns {"status": "pending"} until an outcome has been reported for
    the given state.
    """
    return relay.query(state)


@router.post(
    "/status",
    response_model=ReportAcceptedResponse,
    responses=_ERROR_RESPONSES,
)
async def report_flow_outcome(
    relay: FlowRelayDep,
    report: FlowOutcomeReport | None = None,
) -> ReportAcceptedResponse:
    """
    Report the outcome of an OAuth flow.

    Replaces any outcome previously reported for the same state.
    """
    report = report or FlowOutcomeReport()
    outcome = report.model_dump(include={"code", "error"}, exclude_unset=True)
    relay.report(report.state, **outcome)
    return ReportAcceptedResponse()


@router.api_route(
    "/status",
    methods=["PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def reject_unsupported_method() -> None:
    raise MethodNotSupportedError()
