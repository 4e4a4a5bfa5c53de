"""Exception types raised while resolving and submitting a time entry.

Each error carries the process exit code used by ``core.main``. A user
declining the confirmation prompt is not an error and has no class here.
"""
from typing import Optional


class LazyClockifyError(Exception):
    """Base class for every failure surfaced to the user as one message."""

    exit_code = 1


class PreconditionError(LazyClockifyError):
    """A required setting (the API key) is missing."""

    exit_code = 2


class ResolutionError(LazyClockifyError):
    """Textual input could not be turned into a usable value."""

    exit_code = 4

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class RetryableSelectionError(ResolutionError):
    """Raised by the selection validator; the prompt loop reports it and asks again."""


class EmptyResultError(LazyClockifyError):
    """The service returned no workspaces or no projects."""

    exit_code = 5


class TransportError(LazyClockifyError):
    """A remote call failed or answered outside the 2xx range."""

    exit_code = 3

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
