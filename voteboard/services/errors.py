"""Exceptions shared by the service layer."""


class ServiceError(Exception):
    """Base exception for board workflows."""


class MissingFieldError(ServiceError):
    """Raised when a required field is absent or blank."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SuggestionNotFoundError(ServiceError):
    """Raised when a mutation targets an unknown suggestion."""
