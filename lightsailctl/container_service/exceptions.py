__all__ = [
    "AuthenticationError",
    "ContainerServiceError",
    "MissingDigestError",
    "PlatformMismatchError",
    "PushError",
    "RegistrationError",
    "StatusStreamError",
    "TagError",
    "UntagError",
]

from lightsailctl.core.exceptions import BaseError


class ContainerServiceError(BaseError):
    status_code = 500


class AuthenticationError(ContainerServiceError):
    status_code = 401


class TagError(ContainerServiceError):
    pass


class UntagError(ContainerServiceError):
    pass


class PushError(ContainerServiceError):
    pass


class PlatformMismatchError(PushError):
    status_code = 400

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"image does not provide {platform} platform")


class MissingDigestError(ContainerServiceError):
    pass


class RegistrationError(ContainerServiceError):
    pass


class StatusStreamError(Exception):
    """Error record received in the push status stream."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)
