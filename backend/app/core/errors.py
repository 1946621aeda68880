"""
Error types raised by the flow relay.

Each error carries the HTTP status code it maps to, so the API layer can
render any of them with a single exception handler.
"""

from fastapi import status


class FlowRelayError(Exception):
    """Base error for flow relay failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(FlowRelayError):
    """Request is missing the correlation token or is otherwise malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class MethodNotSupportedError(FlowRelayError):
    """HTTP method is not handled by the relay endpoint."""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)
