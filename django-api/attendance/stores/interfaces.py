"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Name lookups are
case-insensitive at the store level; services never re-implement collation.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date, datetime

from attendance.domain import (
    Event,
    ParticipationRecord,
    ParticipationStatus,
    Person,
    Venue,
)


class UnitOfWork(ABC):
    """Groups several store writes into one all-or-nothing step."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager; an exception inside rolls every write back."""
        ...


class VenueStore(ABC):
    """Interface for venue persistence operations."""

    @abstractmethod
    def get(self, venue_id: int) -> Venue | None:
        """Return a venue by ID, or None if not found."""
        ...

    @abstractmethod
    def list_all(self) -> list[Venue]:
        """Return all venues ordered by normalized name ascending."""
        ...

    @abstractmethod
    def first(self) -> Venue | None:
        """Return the venue with the lowest ID, or None if there are none."""
        ...

    @abstractmethod
    def find_by_normalized_name(self, normalized_name: str) -> Venue | None:
        """Return the venue with exactly this normalized name, or None."""
        ...

    @abstractmethod
    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Venue]:
        """Return venues whose normalized name starts with (or contains) the term."""
        ...

    @abstractmethod
    def add(self, name: str, normalized_name: str) -> Venue:
        """Persist a new venue and return it with its ID."""
        ...

    @abstractmethod
    def update(self, venue: Venue) -> Venue:
        """Persist the name and normalized name of an existing venue."""
        ...

    @abstractmethod
    def delete_many(self, venue_ids: Iterable[int]) -> int:
        """Delete the given venues; return how many rows were removed."""
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def get(self, event_id: int) -> Event | None:
        """Return an event (with its venue) by ID, or None if not found."""
        ...

    @abstractmethod
    def list_all(self) -> list[Event]:
        """Return all events ordered by date descending, then ID descending."""
        ...

    @abstractmethod
    def get_active(self, *, for_update: bool = False) -> Event | None:
        """Return the active event with its venue.

        ``for_update`` asks the store to lock the row for the rest of the
        current unit of work.
        """
        ...

    @abstractmethod
    def add(self, venue_id: int, event_date: date, name: str, *, is_active: bool = False) -> Event:
        """Persist a new event and return it with its ID."""
        ...

    @abstractmethod
    def set_active_flag(self, event_id: int, is_active: bool) -> None:
        """Write the ``is_active`` flag of one event."""
        ...

    @abstractmethod
    def venue_ids_in_use(self, venue_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``venue_ids`` referenced by at least one event."""
        ...


class PersonStore(ABC):
    """Interface for person persistence operations."""

    @abstractmethod
    def get(self, person_id: int) -> Person | None:
        """Return a person by ID, or None if not found."""
        ...

    @abstractmethod
    def find_by_normalized_name(self, normalized_full_name: str) -> Person | None:
        """Return the first person (lowest ID) with this identity key."""
        ...

    @abstractmethod
    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Person]:
        """Return people whose key starts with (or contains) the term, by full name."""
        ...

    @abstractmethod
    def add(
        self,
        full_name: str,
        normalized_full_name: str,
        birthday_day_month: str | None = None,
        email: str | None = None,
    ) -> Person:
        """Persist a new person and return it with its ID."""
        ...

    @abstractmethod
    def increment_counter(self, person_id: int, status: ParticipationStatus) -> None:
        """Bump the cached participation or absence counter."""
        ...


class ParticipationStore(ABC):
    """Interface for the append-only participation ledger."""

    @abstractmethod
    def append(
        self,
        person_id: int,
        event_id: int,
        timestamp: datetime,
        status: ParticipationStatus,
    ) -> ParticipationRecord:
        """Insert a ledger row; never updates an existing one."""
        ...

    @abstractmethod
    def list_for(self, person_id: int, event_id: int | None = None) -> list[ParticipationRecord]:
        """Return ledger rows in insertion order, optionally for one event."""
        ...

    @abstractmethod
    def count_by_status(self, person_id: int) -> dict[ParticipationStatus, int]:
        """Return the number of ledger rows per status for a person."""
        ...


@dataclass(frozen=True)
class Stores:
    """The full set of collaborators a service bundle is built from."""

    venues: VenueStore
    events: EventStore
    people: PersonStore
    participations: ParticipationStore
    unit_of_work: UnitOfWork
