from __future__ import annotations

from typing import Optional


class AllocationError(Exception):
    """Base error for allocation runs."""


class MalformedPledgePayload(AllocationError, ValueError):
    """Raised when a verified ballot's pledge list cannot be parsed."""

    def __init__(self, message: str, *, row_id: Optional[int] = None):
        self.row_id = row_id
        where = f" (ballot row {row_id})" if row_id is not None else ""
        super().__init__(f"Malformed signed payload{where}: {message}")


class DegenerateScalingError(AllocationError):
    """Raised when the surviving median total is zero and no scale factor exists."""


class ConfigError(AllocationError, ValueError):
    """Raised for inconsistent allocation parameters."""
