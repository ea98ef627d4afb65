class PropertyManagerException(Exception):
    """Base exception for property manager"""

    pass


class UnauthorizedException(PropertyManagerException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(PropertyManagerException):
    """
    Raised when resource not found.

    Also raised for rows owned by another tenant, so callers cannot
    distinguish "absent" from "not yours".
    """

    pass


class ForbiddenException(PropertyManagerException):
    """Raised when a storage key belongs to a different account"""

    pass


class ValidationException(PropertyManagerException):
    """Raised for business logic validation errors"""

    pass


class ConflictException(PropertyManagerException):
    """Raised when a state transition is no longer allowed (e.g. receipt already processed)"""

    pass


class StorageException(PropertyManagerException):
    """Raised when the object storage backend fails an essential call"""

    pass
