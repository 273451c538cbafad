"""Account provisioning: Firebase Auth accounts plus role-tagged profiles."""

import structlog
from firebase_admin import auth, firestore
from google.cloud.firestore import AsyncClient

from app.core.exceptions import (
    BadRequestException,
    NotFoundException,
    UpstreamException,
)
from app.core.upstream import call_upstream, run_blocking
from app.models.users import (
    FCM_TOKEN_FIELD,
    PHOTO_URL_FIELD,
    REQUIRED_FIELDS,
    USERS,
    UserRole,
)
from app.schemas.users import AccountCreateRequest

logger = structlog.get_logger(__name__)


class AccountService:
    """Service for creating and deleting user accounts."""

    def __init__(self, db: AsyncClient):
        """Initialize service with a Firestore client."""
        self.db = db

    async def create_account(self, role: UserRole, data: AccountCreateRequest) -> str:
        """
        Create an identity account and its profile document.

        If the profile cannot be written, the identity account is deleted
        again so that no login exists without a profile.

        A timed-out Auth call is abandoned, not cancelled: its worker thread
        may still create the account after the 504 is returned, and that
        account gets no compensating delete. Retrying with the same email
        then fails in Auth until the account is removed by hand.

        Args:
            role: Role to tag the profile with
            data: Submitted account fields

        Returns:
            New user id (shared by the identity account and the profile)

        Raises:
            BadRequestException: If a required field for the role is missing
            UpstreamException: If Firebase Auth or Firestore fails
        """
        required = REQUIRED_FIELDS[role]
        values = data.model_dump()
        missing = [name for name in required if not (values.get(name) or "").strip()]
        if missing:
            logger.info("account_create_rejected", role=role.value, missing=missing)
            raise BadRequestException("Please provide all required fields.")

        user_record = await run_blocking(
            "auth.create_user",
            auth.create_user,
            email=data.email,
            password=data.password,
            display_name=f"{data.firstName} {data.lastName}",
        )
        uid = user_record.uid

        profile = {name: values[name] for name in required if name != "password"}
        profile.update(
            {
                "role": role.value,
                PHOTO_URL_FIELD: None,
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )

        try:
            await call_upstream(
                "users.set",
                self.db.collection(USERS).document(uid).set(profile),
            )
        except UpstreamException:
            await self._discard_identity(uid)
            raise

        logger.info("account_created", uid=uid, role=role.value)
        return uid

    async def _discard_identity(self, uid: str) -> None:
        """Compensate a failed profile write by deleting the identity account."""
        try:
            await run_blocking("auth.delete_user", auth.delete_user, uid)
        except UpstreamException as e:
            logger.error("orphaned_identity_account", uid=uid, error=str(e.__cause__ or e))
            return
        logger.warning("identity_account_rolled_back", uid=uid)

    async def delete_account(self, uid: str) -> None:
        """
        Delete the identity account and the profile document.

        Both deletions are attempted even if the other fails. An identity
        account that no longer exists counts as deleted.

        Raises:
            UpstreamException: If either deletion failed
        """
        failures: list[str] = []

        try:
            await run_blocking("auth.delete_user", auth.delete_user, uid)
            logger.info("identity_account_deleted", uid=uid)
        except UpstreamException as e:
            if isinstance(e.__cause__, auth.UserNotFoundError):
                logger.info("identity_account_already_absent", uid=uid)
            else:
                failures.append("identity")

        try:
            await call_upstream(
                "users.delete",
                self.db.collection(USERS).document(uid).delete(),
            )
            logger.info("profile_deleted", uid=uid)
        except UpstreamException:
            failures.append("profile")

        if failures:
            logger.error("account_delete_incomplete", uid=uid, failed=failures)
            raise UpstreamException("Error deleting user.")

    async def register_device_token(self, uid: str, fcm_token: str | None) -> None:
        """
        Store the push-notification device token on a profile.

        Raises:
            BadRequestException: If the token is empty
            NotFoundException: If the profile does not exist
        """
        if not (fcm_token or "").strip():
            raise BadRequestException("Missing FCM token.")

        user_ref = self.db.collection(USERS).document(uid)
        snapshot = await call_upstream("users.get", user_ref.get())
        if not snapshot.exists:
            raise NotFoundException("User not found.")

        await call_upstream(
            "users.set",
            user_ref.set({FCM_TOKEN_FIELD: fcm_token.strip()}, merge=True),
        )
        logger.info("device_token_registered", uid=uid)
