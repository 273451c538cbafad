"""Account provisioning endpoints."""

from fastapi import APIRouter, status

from app.dependencies import AccountServiceDep
from app.models.users import UserRole
from app.schemas.users import (
    AccountCreatedResponse,
    AccountCreateRequest,
    DeviceTokenUpdate,
    MessageResponse,
)

router = APIRouter()


async def _create(
    service: AccountServiceDep, role: UserRole, data: AccountCreateRequest
) -> AccountCreatedResponse:
    uid = await service.create_account(role, data)
    return AccountCreatedResponse(message="User created successfully", userId=uid)


@router.post(
    "/create-admin",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an admin account",
)
async def create_admin(
    data: AccountCreateRequest, service: AccountServiceDep
) -> AccountCreatedResponse:
    """Create an admin account (requires rfid)."""
    return await _create(service, UserRole.ADMIN, data)


@router.post(
    "/create-homeowner",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a homeowner account",
)
async def create_homeowner(
    data: AccountCreateRequest, service: AccountServiceDep
) -> AccountCreatedResponse:
    """Create a homeowner account (requires rfid)."""
    return await _create(service, UserRole.HOMEOWNER, data)


@router.post(
    "/create-security-personnel",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a security personnel account",
)
async def create_security_personnel(
    data: AccountCreateRequest, service: AccountServiceDep
) -> AccountCreatedResponse:
    """Create a security personnel account."""
    return await _create(service, UserRole.SECURITY_PERSONNEL, data)


@router.post(
    "/create-user",
    response_model=AccountCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a generic user account",
)
async def create_user(
    data: AccountCreateRequest, service: AccountServiceDep
) -> AccountCreatedResponse:
    """Create a generic user (visitor) account."""
    return await _create(service, UserRole.USER, data)


@router.delete(
    "/delete-user/{uid}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an account",
)
async def delete_user(uid: str, service: AccountServiceDep) -> MessageResponse:
    """Delete the identity account and profile document for a user."""
    await service.delete_account(uid)
    return MessageResponse(message=f"User with UID: {uid} deleted successfully.")


@router.put(
    "/users/{uid}/device-token",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Register a push-notification device token",
)
async def register_device_token(
    uid: str, data: DeviceTokenUpdate, service: AccountServiceDep
) -> MessageResponse:
    """
    Store the FCM token used for visit notifications.

    Should be called after login and whenever the token is refreshed.
    """
    await service.register_device_token(uid, data.fcmToken)
    return MessageResponse(message="Device token registered.")
