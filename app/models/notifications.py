"""Notification documents.

``homeownerNotification`` holds the approval state of a visit request and
shares its document id. ``userNotification`` holds the visitor's token
record and is also keyed by the visit request id.
"""

from datetime import timedelta
from enum import Enum

HOMEOWNER_NOTIFICATIONS = "homeownerNotification"
USER_NOTIFICATIONS = "userNotification"

# A visit token is valid for one day from the visit start
TOKEN_VALIDITY = timedelta(hours=24)


class NotificationStatus(str, Enum):
    """Approval state of a visit request."""

    PENDING = "pending"
    APPROVED = "approved"
