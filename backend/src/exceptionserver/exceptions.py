"""Server-side exceptions.

These are real failures of request handling, as opposed to the simulated
error chains that scenarios render into response bodies. Anything raised
here escapes the router and is handled by the recovery handler in main.py.
"""


class ServerError(Exception):
    """Base class for all server exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PanicError(ServerError):
    """Raised on purpose to exercise the recovery handler."""
