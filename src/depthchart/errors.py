"""Error taxonomy raised by the depth chart service and store."""

from __future__ import annotations


class DepthChartError(Exception):
    """Base class; ``message`` is safe to show to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DepthChartError):
    """A referenced team does not exist."""


class InvalidArgumentError(DepthChartError, ValueError):
    """Malformed input or a position not valid for the team's sport."""


class ConflictError(DepthChartError):
    """Duplicate player at a position or a non-contiguous depth insert."""


class InternalError(DepthChartError):
    """Unexpected storage failure. The message is generic; see ``__cause__``."""

    def __init__(self, message: str = "An unexpected error occurred."):
        super().__init__(message)
