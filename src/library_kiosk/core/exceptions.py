class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced student or record does not exist."""


class UnknownStudentError(NotFoundError):
    """Raised when a check-in references a student code not in the directory."""


class AuthenticationError(DomainError):
    """Raised when the admin password is wrong."""


class BackendError(DomainError):
    """Raised when the storage engine is unreachable or rejects a query."""


class ConfigurationError(BackendError):
    """Raised when required backend settings are missing."""
