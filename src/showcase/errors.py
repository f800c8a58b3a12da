from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InvalidPayloadError(ValidationError):
    """Raised when a payload field cannot be decoded (malformed array, boolean, number or date)."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Invalid value for field '{field}'")


class DuplicateError(UserError):
    """Raised when a unique key (slug, id, email) already exists."""


class DuplicateSlugError(DuplicateError):
    """Raised when a derived slug collides with an existing record."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"A record with slug '{slug}' already exists")


class DuplicateIdError(DuplicateError):
    """Raised when an allocated id is already taken."""

    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"A record with id {record_id} already exists")


class StorageUnavailableError(Exception):
    """Raised when the document store cannot be reached.

    Not a UserError: the message is replaced with a generic one in responses.
    """
