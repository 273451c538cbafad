"""Visit workflow schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.visits import VISIT_REQUEST_FIELDS


class VisitSubmitRequest(BaseModel):
    """Schema for submitting a visit request.

    Fields are optional here so that missing values produce the service's
    400 response rather than a 422 validation error.
    """

    homeownerId: str | None = None
    visitorId: str | None = None
    classification: str | None = None
    visitDate: str | None = Field(None, description="Visit date, YYYY-MM-DD")
    visitTime: str | None = Field(None, description="Visit time, HH:MM, HH:MM:SS or h:MM AM/PM")

    def missing_fields(self) -> list[str]:
        """List required fields that are absent or blank."""
        return [
            name
            for name in VISIT_REQUEST_FIELDS
            if not (getattr(self, name) or "").strip()
        ]


class VisitApproveRequest(BaseModel):
    """Schema for approving a visit request."""

    visitRequestId: str | None = None


class VisitTokenRecord(BaseModel):
    """Token record handed to the visitor's device."""

    visitRequestId: str
    userId: str
    homeownerId: str
    qrCode: str
    validFrom: datetime
    validUntil: datetime


class ApprovalResult(BaseModel):
    """Outcome of an approval."""

    token: VisitTokenRecord
    already_approved: bool = False
