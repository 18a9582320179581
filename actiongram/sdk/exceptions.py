"""Exception hierarchy for the actiongram SDK.

Only contract violations and transport failures are exceptions.  A server
answering ``"ok": false`` is an expected outcome and is reported as
:class:`~actiongram.core.result.Failure` instead.
"""

from typing import Optional


class ActiongramError(Exception):
    """Base class for every error raised by the library."""


class SchemaError(ActiongramError):
    """JSON did not match the expected shape.

    Attributes:
        field: Dotted path of the missing or mismatched field.
        reason: Short explanation of what was wrong with it.
    """

    def __init__(self, field: str, reason: str = "invalid value") -> None:
        """Initialise with the offending *field* and a *reason*."""
        self.field = field
        self.reason = reason
        super().__init__(f"Schema error at '{field}': {reason}")


class TransportError(ActiongramError):
    """The HTTP exchange itself failed (connection, TLS, non-JSON error page).

    Attributes:
        status_code: HTTP status code, when a response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """Initialise with a description and the optional HTTP status code."""
        self.status_code = status_code
        if status_code is not None:
            message = f"HTTP {status_code}: {message}"
        super().__init__(message)
