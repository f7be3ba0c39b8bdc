"""Typed failures surfaced by market lookups, upstream fetches and aggregation."""

from __future__ import annotations


class MarketToolError(Exception):
    """Base class for every failure a tool invocation can report to its caller."""

    code = "MARKET_TOOL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class UnknownLocationError(MarketToolError):
    code = "UNKNOWN_LOCATION"

    def __init__(self, location: str) -> None:
        super().__init__(f"Unsupported location '{location}'.")
        self.location = location


class InsufficientDataError(MarketToolError):
    """Raised when a feed returns fewer samples than a computation needs."""

    code = "INSUFFICIENT_DATA"

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Expected at least {required} samples but the provider returned {available}."
        )
        self.required = required
        self.available = available


class MissingCredentialsError(MarketToolError):
    code = "MISSING_CREDENTIALS"


class UpstreamError(MarketToolError):
    """The provider could not be reached or answered with an unusable response."""

    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    code = "UPSTREAM_TIMEOUT"


__all__ = [
    "InsufficientDataError",
    "MarketToolError",
    "MissingCredentialsError",
    "UnknownLocationError",
    "UpstreamError",
    "UpstreamTimeoutError",
]
