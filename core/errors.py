from __future__ import annotations

from typing import Optional


class TransmissionError(Exception):
    """Base class for every error raised by the RPC client."""


class ArgumentError(TransmissionError, ValueError):
    """Caller-supplied arguments were rejected before any request was sent."""


class ProtocolError(TransmissionError):
    """The daemon answered with a result other than "success"."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionError(TransmissionError):
    """The session token could not be negotiated."""


class TransportError(TransmissionError):
    """HTTP-level failure: unexpected status code or network error."""

    def __init__(self, status: Optional[int], reason: Optional[str]) -> None:
        if status is None:
            msg = f'HTTP error: {reason}'
        else:
            msg = f'HTTP error {status}: {reason}'
        super().__init__(msg)
        self.status = status
        self.reason = reason
