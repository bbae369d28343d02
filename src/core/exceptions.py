"""Custom exception classes for the E-Learning administration backend.

This module defines application-specific exceptions following Google Python
Style Guide. Every exception carries the HTTP status it is rendered with by
the application-level exception handler.
"""


class ELearningError(Exception):
    """Base exception for all E-Learning backend errors."""

    status_code: int = 500

    def __init__(self, message: str, inner: str = None):
        """Initialize the exception.

        Args:
            message: Human readable message surfaced to the caller.
            inner: Optional detail of an underlying cause.
        """
        self.message = message
        self.inner = inner
        super().__init__(message)


class ValidationError(ELearningError):
    """Raised when input is malformed or violates a business rule."""

    status_code = 400


class AuthError(ELearningError):
    """Raised when credentials cannot be verified."""

    status_code = 401


class NotFoundError(ELearningError):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id) -> "NotFoundError":
        """Build the standard '<Entity> <id> not found' error.

        Args:
            entity: Display name of the entity, e.g. "Course".
            entity_id: The identifier that was looked up.

        Returns:
            A NotFoundError instance.
        """
        return cls(f"{entity} {entity_id} not found")


class ConflictError(ELearningError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409
