"""Domain error codes for the attendance module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION = "VALIDATION"
    DUPLICATE = "DUPLICATE"
    NOT_FOUND = "NOT_FOUND"
    REFERENTIAL_CONFLICT = "REFERENTIAL_CONFLICT"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input has the wrong shape, length or format."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message)


class InvalidArgumentError(DomainError):
    """Raised when an identifier argument is not usable at all."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ARGUMENT, message=message)


class DuplicateError(DomainError):
    """Raised when a name collides with an existing record."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.DUPLICATE, message=message)


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{entity} not found",
        )
        self.entity_id = entity_id


class ReferentialConflictError(DomainError):
    """Raised when a delete is blocked by a live reference."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.REFERENTIAL_CONFLICT, message=message)


class StorageFailure(DomainError):
    """Raised when the storage collaborator fails."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.STORAGE_FAILURE, message=message)
