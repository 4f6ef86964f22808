"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainException):
    """Input is malformed, out of range, or not editable in the current state"""

    pass


class AuthError(DomainException):
    """Missing, invalid or expired credentials"""

    pass


class PermissionDeniedError(DomainException):
    """Authenticated caller lacks the role required for the operation"""

    pass


class NotFoundError(DomainException):
    """Resource does not exist or is not visible to the caller"""

    pass


class StateError(DomainException):
    """Operation is not valid for the application's current status"""

    pass


class ConflictError(DomainException):
    """A unique field is already taken"""

    pass
