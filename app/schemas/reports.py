"""Scan report schemas."""

from typing import Any

from pydantic import BaseModel

# Returned in place of a profile that cannot be resolved
UNKNOWN = "Unknown"


class ProfileSummary(BaseModel):
    """Minimal profile attached to each report row."""

    firstName: str | None = UNKNOWN
    lastName: str | None = UNKNOWN
    photoURL: str | None = UNKNOWN

    @classmethod
    def unknown(cls) -> "ProfileSummary":
        """Sentinel used when the profile lookup misses or fails."""
        return cls(firstName=UNKNOWN, lastName=UNKNOWN, photoURL=UNKNOWN)


class ScanReportResponse(BaseModel):
    """Schema for the scan report.

    Rows carry the scan document's own fields plus ``id``, ``firstName``,
    ``lastName`` and ``photoURL``.
    """

    data: list[dict[str, Any]]
