"""Exceptions raised by back-office services and translated to HTTP errors at the route boundary."""


class ServiceError(Exception):
    """Base for service failures; message is safe to show to the caller."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a mutation targets a row that does not exist."""


class InvalidValueError(ServiceError):
    """Raised when an input value is outside its allowed set (role, status, filter id, ...)."""

    def __init__(self, field: str, message: str, value: object = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
