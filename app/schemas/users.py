"""Account provisioning schemas."""

from pydantic import BaseModel, ConfigDict, Field


class AccountCreateRequest(BaseModel):
    """Schema for creating an account of any role.

    Which fields are required depends on the role and is checked by
    AccountService.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    firstName: str | None = None
    lastName: str | None = None
    email: str | None = None
    password: str | None = Field(None, repr=False)
    address: str | None = None
    phoneNumber: str | None = None
    rfid: str | None = None


class AccountCreatedResponse(BaseModel):
    """Schema for account creation response."""

    message: str
    userId: str


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class DeviceTokenUpdate(BaseModel):
    """Schema for registering a push-notification device token."""

    fcmToken: str | None = Field(None, description="Firebase Cloud Messaging token")
