"""
Service-layer errors. Each class carries an error kind and a default HTTP
status so the API layer can map it without inspecting messages.
"""
from typing import Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    kind = "invalid_argument"
    default_status = 400

    def __init__(self, message: str = "", *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__
        self.status_code = status_code if status_code is not None else self.default_status


class NotFoundError(ServiceError):
    kind = "not_found"
    default_status = 404


class ForbiddenError(ServiceError):
    kind = "forbidden"
    default_status = 403


class InvalidArgumentError(ServiceError):
    kind = "invalid_argument"
    default_status = 400


class InvalidCategoryError(InvalidArgumentError):
    pass


class ConflictError(ServiceError):
    kind = "conflict"
    default_status = 409


class AlreadyGrantedError(ConflictError):
    """The grantee already holds access. Callers treat this as informational."""


class DuplicateTagError(ConflictError):
    pass


class TagInUseError(ConflictError):
    pass


class AlreadyLikedError(ConflictError):
    pass


class NotLikedError(ConflictError):
    pass
