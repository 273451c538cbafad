"""User profile documents (``users`` collection).

The document id is the Firebase Auth uid of the same person.
"""

from enum import Enum

USERS = "users"


class UserRole(str, Enum):
    """Role stored on a user profile."""

    ADMIN = "admin"
    HOMEOWNER = "homeowner"
    SECURITY_PERSONNEL = "securityPersonnel"
    USER = "user"


# Fields every provisioning request must carry, by role
BASE_REQUIRED_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "password",
    "address",
    "phoneNumber",
)

REQUIRED_FIELDS: dict[UserRole, tuple[str, ...]] = {
    UserRole.ADMIN: (*BASE_REQUIRED_FIELDS, "rfid"),
    UserRole.HOMEOWNER: (*BASE_REQUIRED_FIELDS, "rfid"),
    UserRole.SECURITY_PERSONNEL: BASE_REQUIRED_FIELDS,
    UserRole.USER: BASE_REQUIRED_FIELDS,
}

# Push-notification device handle
FCM_TOKEN_FIELD = "fcmToken"
PHOTO_URL_FIELD = "photoURL"
