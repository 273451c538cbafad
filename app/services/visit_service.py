"""Visit workflow: submission and approval."""

from datetime import UTC
from typing import Any

import structlog
from firebase_admin import firestore
from google.cloud.firestore import AsyncClient

from app.core.exceptions import (
    BadRequestException,
    DeviceNotRegisteredException,
    NotFoundException,
)
from app.core.time_window import parse_visit_datetime
from app.core.token_codec import TokenCodec
from app.core.upstream import call_upstream
from app.models.notifications import (
    HOMEOWNER_NOTIFICATIONS,
    TOKEN_VALIDITY,
    USER_NOTIFICATIONS,
    NotificationStatus,
)
from app.models.users import FCM_TOKEN_FIELD
from app.models.visits import VISIT_REQUESTS
from app.schemas.visits import (
    ApprovalResult,
    VisitApproveRequest,
    VisitSubmitRequest,
    VisitTokenRecord,
)
from app.services.notification_service import NotificationService
from app.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)


class VisitService:
    """Service for the visit request lifecycle (pending -> approved)."""

    def __init__(self, db: AsyncClient, token_codec: TokenCodec):
        """Initialize service with a Firestore client and token codec."""
        self.db = db
        self.token_codec = token_codec
        self.profiles = ProfileService(db)

    async def submit_visit(self, data: VisitSubmitRequest) -> str:
        """
        Submit a visit request on behalf of a homeowner.

        The homeowner must have a registered device; without one the
        request is rejected before anything is stored.

        Args:
            data: Submitted visit fields

        Returns:
            New visit request id

        Raises:
            BadRequestException: If a field is missing
            NotFoundException: If the homeowner profile does not exist
            DeviceNotRegisteredException: If the homeowner has no FCM token
        """
        missing = data.missing_fields()
        if missing:
            raise BadRequestException(
                f"Missing required visit information: {', '.join(missing)}."
            )

        homeowner = await self.profiles.require_user(data.homeownerId, label="Homeowner")
        registration_token = homeowner.get(FCM_TOKEN_FIELD)
        if not registration_token:
            raise DeviceNotRegisteredException("Homeowner does not have a valid FCM token.")

        visit_data = data.model_dump()
        await NotificationService.send_visit_scheduled_notification(
            token=registration_token,
            homeowner_id=data.homeownerId,
            visit_data=visit_data,
        )

        _, visit_ref = await call_upstream(
            "visitRequests.add",
            self.db.collection(VISIT_REQUESTS).add(
                {**visit_data, "createdAt": firestore.SERVER_TIMESTAMP}
            ),
        )
        visit_request_id = visit_ref.id

        await call_upstream(
            "homeownerNotification.set",
            self.db.collection(HOMEOWNER_NOTIFICATIONS)
            .document(visit_request_id)
            .set(
                {
                    "isRead": 0,
                    "status": NotificationStatus.PENDING.value,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                }
            ),
        )

        logger.info(
            "visit_submitted",
            visit_request_id=visit_request_id,
            homeowner_id=data.homeownerId,
            visitor_id=data.visitorId,
        )
        return visit_request_id

    async def _get_visit(self, visit_request_id: str) -> dict[str, Any]:
        snapshot = await call_upstream(
            "visitRequests.get",
            self.db.collection(VISIT_REQUESTS).document(visit_request_id).get(),
        )
        if not snapshot.exists:
            raise NotFoundException("Visit request not found.")
        return snapshot.to_dict() or {}

    async def _get_existing_approval(self, visit_request_id: str) -> VisitTokenRecord | None:
        """Return the stored token record if the visit is already approved."""
        status_snapshot = await call_upstream(
            "homeownerNotification.get",
            self.db.collection(HOMEOWNER_NOTIFICATIONS).document(visit_request_id).get(),
        )
        if not status_snapshot.exists:
            return None
        if (status_snapshot.to_dict() or {}).get("status") != NotificationStatus.APPROVED.value:
            return None

        token_snapshot = await call_upstream(
            "userNotification.get",
            self.db.collection(USER_NOTIFICATIONS).document(visit_request_id).get(),
        )
        if not token_snapshot.exists:
            return None
        return VisitTokenRecord.model_validate(token_snapshot.to_dict())

    async def approve_visit(self, data: VisitApproveRequest) -> ApprovalResult:
        """
        Approve a visit request and issue the visitor's token.

        Approval is final once the token record and status are written:
        a missing visitor profile or device token is reported to the
        caller afterwards but does not undo it. Approving an already
        approved request returns the existing token without side effects.

        Args:
            data: Approval request

        Returns:
            Token record and whether it already existed

        Raises:
            BadRequestException: If the id is missing or the stored visit
                date/time cannot be parsed
            NotFoundException: If the visit request or visitor does not exist
            DeviceNotRegisteredException: If the visitor has no FCM token
        """
        visit_request_id = (data.visitRequestId or "").strip()
        if not visit_request_id:
            raise BadRequestException("Missing visit request ID.")

        visit = await self._get_visit(visit_request_id)

        existing = await self._get_existing_approval(visit_request_id)
        if existing is not None:
            logger.info("visit_already_approved", visit_request_id=visit_request_id)
            return ApprovalResult(token=existing, already_approved=True)

        try:
            valid_from = parse_visit_datetime(visit["visitDate"], visit["visitTime"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(
                "visit_datetime_invalid",
                visit_request_id=visit_request_id,
                error=str(e),
            )
            raise BadRequestException("Visit request has an invalid visit date or time.") from e

        visitor_id = visit.get("visitorId")
        homeowner_id = visit.get("homeownerId")
        if not visitor_id or not homeowner_id:
            logger.warning("visit_parties_missing", visit_request_id=visit_request_id)
            raise BadRequestException("Visit request is missing its visitor or homeowner.")

        # Validity is 24 elapsed hours, so add the window to a UTC instant
        valid_from = valid_from.astimezone(UTC)
        token = VisitTokenRecord(
            visitRequestId=visit_request_id,
            userId=visitor_id,
            homeownerId=homeowner_id,
            qrCode=self.token_codec.derive(visit_request_id),
            validFrom=valid_from,
            validUntil=valid_from + TOKEN_VALIDITY,
        )

        await call_upstream(
            "userNotification.set",
            self.db.collection(USER_NOTIFICATIONS)
            .document(visit_request_id)
            .set(
                {
                    **token.model_dump(),
                    "isRead": 0,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                }
            ),
        )
        await call_upstream(
            "homeownerNotification.set",
            self.db.collection(HOMEOWNER_NOTIFICATIONS)
            .document(visit_request_id)
            .set(
                {
                    "status": NotificationStatus.APPROVED.value,
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                },
                merge=True,
            ),
        )
        logger.info(
            "visit_approved",
            visit_request_id=visit_request_id,
            visitor_id=token.userId,
            valid_from=valid_from.isoformat(),
        )

        # Approval is committed; failures below are reported, not rolled back
        visitor = await self.profiles.require_user(token.userId, label="Visitor")
        visitor_token = visitor.get(FCM_TOKEN_FIELD)
        if not visitor_token:
            raise DeviceNotRegisteredException("Visitor does not have a valid FCM token.")

        await NotificationService.send_visit_approved_notification(
            token=visitor_token,
            visit_request_id=visit_request_id,
            visit_data=visit,
        )
        return ApprovalResult(token=token)
