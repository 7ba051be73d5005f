"""Tagged outcome of a public service operation.

A service never lets a domain or storage exception cross its boundary. It
returns ``Ok`` with the value and a user-facing message, or ``Err`` with the
domain error that describes what went wrong.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from attendance.domain.errors import DomainError, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T
    message: str = ""

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying the domain error."""

    error: DomainError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self):
        raise self.error


Result = Ok[T] | Err
