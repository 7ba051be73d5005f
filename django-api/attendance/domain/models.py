"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in attendance/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ParticipationStatus(Enum):
    """Whether a person showed up when called from the queue."""

    ABSENT = 0
    PRESENT = 1


@dataclass(frozen=True)
class Venue:
    """Domain representation of a Venue.

    ``normalized_name`` is the folded key used for duplicate checks, search
    and ordering, so names that differ only in case or accents collide.
    """

    id: int
    name: str
    normalized_name: str


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``venue`` is filled in when the event is loaded together with its venue
    (the active event always is).
    """

    id: int
    venue_id: int
    date: date
    name: str
    is_active: bool = False
    venue: Venue | None = None


@dataclass(frozen=True)
class Person:
    """Domain representation of a Person."""

    id: int
    full_name: str
    normalized_full_name: str
    participation_count: int = 0
    absence_count: int = 0
    birthday_day_month: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class ParticipationRecord:
    """Domain representation of one ledger row."""

    id: int
    person_id: int
    event_id: int
    timestamp: datetime
    status: ParticipationStatus


def display_identifier(person: Person) -> str:
    """Return the disambiguator shown next to a person's name.

    E-mail wins over birthday, which wins over the numeric id.
    """
    if person.email and person.email.strip():
        return person.email.strip().lower()
    if person.birthday_day_month and person.birthday_day_month.strip():
        return f"({person.birthday_day_month.strip()})"
    return f"(ID: {person.id})"


def display_name(person: Person) -> str:
    # With an e-mail the caller renders the identifier on its own line.
    if person.email and person.email.strip():
        return person.full_name
    return f"{person.full_name} {display_identifier(person)}"
