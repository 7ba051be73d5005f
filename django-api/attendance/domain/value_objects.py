"""Domain primitives that enforce validity at creation time.

Every primitive raises ``ValidationError`` (or ``InvalidArgumentError`` for
identifiers) with a user-facing corrective message, so services can
validate all input before touching storage.
"""

import re
from dataclasses import dataclass
from typing import Self

from attendance.domain.errors import InvalidArgumentError, ValidationError

PERSON_NAME_INPUT_MAX = 200
PERSON_NAME_STORAGE_MAX = 250
VENUE_NAME_MIN = 2
VENUE_NAME_MAX = 30
EVENT_NAME_MAX = 200
EMAIL_MAX = 100

THIRTY_DAY_MONTHS = frozenset({4, 6, 9, 11})

_BIRTHDAY = re.compile(r"^(\d{1,2})/(\d{1,2})$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _positive_id(cls, value: object, label: str):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"Invalid {label} id: {value!r}")
    return cls(value=value)


@dataclass(frozen=True)
class VenueId:
    """Unique identifier for a Venue."""

    value: int

    @classmethod
    def of(cls, value: object) -> Self:
        return _positive_id(cls, value, "venue")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: int

    @classmethod
    def of(cls, value: object) -> Self:
        return _positive_id(cls, value, "event")


@dataclass(frozen=True)
class PersonId:
    """Unique identifier for a Person."""

    value: int

    @classmethod
    def of(cls, value: object) -> Self:
        return _positive_id(cls, value, "person")


@dataclass(frozen=True)
class PersonName:
    """Full name with given name and surname, trimmed.

    The input bound is a UX limit and the storage bound mirrors the column
    size; both are checked separately so the message names the one that
    was violated.
    """

    value: str

    @classmethod
    def parse(
        cls,
        raw: str | None,
        input_max: int = PERSON_NAME_INPUT_MAX,
        storage_max: int = PERSON_NAME_STORAGE_MAX,
    ) -> Self:
        if raw is None or not raw.strip():
            raise ValidationError("Name is required")

        name = raw.strip()
        if len(name) > storage_max:
            raise ValidationError(
                f"Name exceeds the storage limit ({storage_max} characters)"
            )
        if len(name) > input_max:
            raise ValidationError(
                f"Name too long. Maximum {input_max} characters."
            )
        if len(name) < 2:
            raise ValidationError("Name too short. Minimum 2 characters.")

        parts = name.split()
        if len(parts) < 2:
            raise ValidationError("Enter a given name and a surname.")
        if len(parts[-1]) < 2:
            raise ValidationError("Surname must have at least 2 characters.")

        return cls(value=name)


@dataclass(frozen=True)
class VenueName:
    """Venue name between the configured bounds, trimmed."""

    value: str

    @classmethod
    def parse(
        cls,
        raw: str | None,
        min_length: int = VENUE_NAME_MIN,
        max_length: int = VENUE_NAME_MAX,
    ) -> Self:
        if raw is None or not raw.strip():
            raise ValidationError("Venue name is required")

        name = raw.strip()
        if len(name) > max_length:
            raise ValidationError(
                f"Name too long. Maximum {max_length} characters."
            )
        if len(name) < min_length:
            raise ValidationError(
                f"Name too short. Minimum {min_length} characters."
            )
        return cls(value=name)


@dataclass(frozen=True)
class Birthday:
    """Day and month of birth, rendered as ``DD/MM``."""

    day: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.day <= 31:
            raise ValidationError("Day must be between 1 and 31")
        if not 1 <= self.month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if (self.month == 2 and self.day > 29) or (
            self.month in THIRTY_DAY_MONTHS and self.day > 30
        ):
            raise ValidationError("Invalid day for this month")

    @classmethod
    def parse(cls, raw: str | None) -> Self:
        if raw is None or not raw.strip():
            raise ValidationError("Birthday is required")

        match = _BIRTHDAY.match(raw.strip())
        if match is None:
            raise ValidationError("Use the DD/MM format (e.g. 15/03)")
        return cls(day=int(match.group(1)), month=int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.day:02d}/{self.month:02d}"


@dataclass(frozen=True)
class Email:
    """E-mail address of the ``local@domain.tld`` shape."""

    value: str

    @classmethod
    def parse(cls, raw: str | None, max_length: int = EMAIL_MAX) -> Self | None:
        """Return ``None`` for a blank address, which counts as absent."""
        if raw is None or not raw.strip():
            return None

        email = raw.strip()
        if not _EMAIL.match(email):
            raise ValidationError("Invalid e-mail address")
        if len(email) > max_length:
            raise ValidationError("E-mail address too long")
        return cls(value=email)

    def __str__(self) -> str:
        return self.value
