"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class BadRequestException(AppException):
    """Bad request exception (missing or invalid client input)."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class DeviceNotRegisteredException(AppException):
    """The target user has no push-notification device token."""

    def __init__(self, message: str = "User does not have a valid FCM token."):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class UpstreamException(AppException):
    """Identity provider, document store or push gateway failure."""

    def __init__(self, message: str = "Upstream service error"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)


class UpstreamTimeoutException(UpstreamException):
    """An upstream call did not complete within the configured timeout."""

    def __init__(self, message: str = "Upstream service timed out"):
        """Initialize with 504 status code."""
        super().__init__(message)
        self.status_code = 504


class TokenConfigurationError(RuntimeError):
    """The visit-token secret is missing or empty."""
