"""Notification service for sending push notifications via FCM."""

from typing import Any

import structlog
from firebase_admin import messaging

from app.core.upstream import run_blocking

logger = structlog.get_logger(__name__)


class NotificationService:
    """Best-effort push notifications for the visit workflow."""

    @staticmethod
    async def send_push_notification(
        token: str,
        title: str,
        body: str,
        data: dict[str, str] | None = None,
    ) -> str | None:
        """
        Send a push notification to a single device.

        Failures and timeouts are logged and swallowed; the caller's
        business action is never affected by delivery.

        Args:
            token: FCM registration token
            title: Notification title
            body: Notification body
            data: Optional data payload (string values only)

        Returns:
            FCM message id, or None if sending failed
        """
        message = messaging.Message(
            token=token,
            notification=messaging.Notification(
                title=title,
                body=body,
            ),
            data={key: str(value) for key, value in (data or {}).items()},
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(sound="default", badge=1),
                ),
            ),
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(sound="default"),
            ),
        )

        try:
            message_id = await run_blocking("messaging.send", messaging.send, message)
        except Exception as e:
            logger.error("push_notification_failed", error=str(e), title=title)
            return None

        logger.info("push_notification_sent", title=title, message_id=message_id)
        return message_id

    @staticmethod
    async def send_visit_scheduled_notification(
        token: str,
        homeowner_id: str,
        visit_data: dict[str, Any],
    ) -> str | None:
        """
        Tell a homeowner that a visit has been scheduled.

        Args:
            token: Homeowner's FCM token
            homeowner_id: Homeowner user id
            visit_data: Submitted visit fields
        """
        visit_date = visit_data["visitDate"]
        visit_time = visit_data["visitTime"]
        classification = visit_data["classification"]

        return await NotificationService.send_push_notification(
            token=token,
            title="New Visit Scheduled",
            body=(
                f"A visit has been scheduled for {visit_date} at {visit_time}. "
                f"Classification: {classification}"
            ),
            data={
                "homeownerId": homeowner_id,
                "visitDate": visit_date,
                "visitTime": visit_time,
                "classification": classification,
            },
        )

    @staticmethod
    async def send_visit_approved_notification(
        token: str,
        visit_request_id: str,
        visit_data: dict[str, Any],
    ) -> str | None:
        """
        Tell a visitor that their visit request was approved.

        Args:
            token: Visitor's FCM token
            visit_request_id: Approved visit request id
            visit_data: Stored visit request document
        """
        visit_date = visit_data.get("visitDate", "")
        visit_time = visit_data.get("visitTime", "")

        return await NotificationService.send_push_notification(
            token=token,
            title="Visit Approved",
            body=f"Your visit request for {visit_date} at {visit_time} has been approved.",
            data={
                "visitRequestId": visit_request_id,
                "visitDate": visit_date,
                "visitTime": visit_time,
                "status": "approved",
            },
        )
