"""Errors raised by completion clients.

TransportError covers failures to reach the endpoint at all; ProtocolError
covers answers that arrived but cannot be used.
"""


class CompletionError(Exception):
    """Base class for failed completion requests."""


class TransportError(CompletionError):
    """Connection, DNS or timeout failure while talking to the endpoint."""


class ProtocolError(CompletionError):
    """Non-success status or a response body of unexpected shape."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
