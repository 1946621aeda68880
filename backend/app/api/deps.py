"""
Shared FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from app.services.flow_relay import FlowRelay


def get_flow_relay(request: Request) -> FlowRelay:
    """Return the relay owned by the running application."""
    return request.app.state.flow_relay


FlowRelayDep = Annotated[FlowRelay, Depends(get_flow_relay)]
