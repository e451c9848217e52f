"""
Error taxonomy for drawing retrieval and ticket checking.

Parsers and the HTTP layer raise these; the public operations in
fetchers.py and evaluator.py catch them and hand back result values.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    INPUT = "input"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_DATA_MISSING = "upstream_data_missing"


class ErrorKind(str, Enum):
    """Classification codes carried by failed results."""
    INVALID_DATE = "INVALID_DATE"                  # Date not in MM/DD/YYYY or not a real date
    UNSUPPORTED_GAME = "UNSUPPORTED_GAME"          # Unknown lottery type
    INVALID_TICKET = "INVALID_TICKET"              # Malformed ticket numbers or multiplier
    UPSTREAM_UNREACHABLE = "UPSTREAM_UNREACHABLE"  # Network failure or timeout
    UPSTREAM_STATUS = "UPSTREAM_STATUS"            # Non-200 status code
    NO_DATA = "NO_DATA"                            # No drawing for date / mandatory field missing
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"        # Body could not be decoded or is inconsistent

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.category]


_CATEGORIES = {
    ErrorKind.INVALID_DATE: ErrorCategory.INPUT,
    ErrorKind.UNSUPPORTED_GAME: ErrorCategory.INPUT,
    ErrorKind.INVALID_TICKET: ErrorCategory.INPUT,
    ErrorKind.UPSTREAM_UNREACHABLE: ErrorCategory.UPSTREAM_UNAVAILABLE,
    ErrorKind.UPSTREAM_STATUS: ErrorCategory.UPSTREAM_UNAVAILABLE,
    ErrorKind.NO_DATA: ErrorCategory.UPSTREAM_DATA_MISSING,
    ErrorKind.MALFORMED_PAYLOAD: ErrorCategory.UPSTREAM_DATA_MISSING,
}

_HTTP_STATUS = {
    ErrorCategory.INPUT: 400,
    ErrorCategory.UPSTREAM_UNAVAILABLE: 502,
    ErrorCategory.UPSTREAM_DATA_MISSING: 404,
}


class LotteryError(Exception):
    """Base error; `kind` tells callers how to react."""

    kind: ErrorKind = ErrorKind.MALFORMED_PAYLOAD

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category


class InputError(LotteryError):
    pass


class InvalidDateError(InputError):
    kind = ErrorKind.INVALID_DATE


class UnsupportedGameError(InputError):
    kind = ErrorKind.UNSUPPORTED_GAME


class InvalidTicketError(InputError):
    kind = ErrorKind.INVALID_TICKET


class UpstreamUnavailableError(LotteryError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE


class UpstreamUnreachableError(UpstreamUnavailableError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE


class UpstreamStatusError(UpstreamUnavailableError):
    kind = ErrorKind.UPSTREAM_STATUS

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class UpstreamDataMissingError(LotteryError):
    kind = ErrorKind.NO_DATA


class NoDrawingError(UpstreamDataMissingError):
    kind = ErrorKind.NO_DATA


class MalformedPayloadError(UpstreamDataMissingError):
    kind = ErrorKind.MALFORMED_PAYLOAD
