"""Profile lookups against the ``users`` collection."""

from typing import Any

import structlog
from google.cloud.firestore import AsyncClient

from app.core.exceptions import NotFoundException
from app.core.upstream import call_upstream
from app.models.users import USERS
from app.schemas.reports import ProfileSummary

logger = structlog.get_logger(__name__)


class ProfileService:
    """Service for reading user profiles."""

    def __init__(self, db: AsyncClient):
        """Initialize service with a Firestore client."""
        self.db = db

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        """
        Get a user profile document.

        Returns:
            Profile fields, or None if no such document

        Raises:
            UpstreamException: If Firestore fails or times out
        """
        snapshot = await call_upstream(
            "users.get",
            self.db.collection(USERS).document(user_id).get(),
        )
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def require_user(self, user_id: str, label: str = "User") -> dict[str, Any]:
        """
        Get a user profile document or raise.

        Raises:
            NotFoundException: If the profile does not exist
        """
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundException(f"{label} not found.")
        return user

    async def get_profile_summary(self, user_id: str | None) -> ProfileSummary:
        """
        Resolve name and photo for a report row.

        One lookup, no retry. A missing document or any failure yields the
        "Unknown" sentinel so one bad reference cannot fail a whole report.
        """
        if not user_id:
            logger.warning("profile_lookup_skipped", reason="empty user id")
            return ProfileSummary.unknown()

        try:
            user = await self.get_user(user_id)
            if user is None:
                return ProfileSummary.unknown()
            return ProfileSummary(
                firstName=user.get("firstName"),
                lastName=user.get("lastName"),
                photoURL=user.get("photoURL"),
            )
        except Exception as e:
            logger.warning("profile_lookup_failed", user_id=user_id, error=str(e))
            return ProfileSummary.unknown()
