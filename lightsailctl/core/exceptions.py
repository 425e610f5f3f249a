__all__ = [
    "BaseError",
    "BadRequestError",
    "DeadlineExceededError",
    "InternalError",
    "NotSupportedError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class NotSupportedError(BaseError):
    status_code = 415


class DeadlineExceededError(BaseError):
    status_code = 504


class InternalError(Exception):
    status_code = 500
