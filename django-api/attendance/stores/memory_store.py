"""In-memory implementation of the stores.

All stores built from one ``MemoryDatabase`` share its tables. Rows are
frozen dataclasses, so a snapshot is a shallow copy of each table; a failed
``atomic()`` block restores the snapshot taken when it was entered.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime

from attendance.domain import (
    Event,
    ParticipationRecord,
    ParticipationStatus,
    Person,
    Venue,
)
from attendance.stores.interfaces import (
    EventStore,
    ParticipationStore,
    PersonStore,
    Stores,
    UnitOfWork,
    VenueStore,
)

_TABLES = ("venues", "events", "people", "participations")


class MemoryDatabase:
    """Tables and ID sequences shared by the in-memory stores."""

    def __init__(self) -> None:
        self.venues: dict[int, Venue] = {}
        self.events: dict[int, Event] = {}
        self.people: dict[int, Person] = {}
        self.participations: dict[int, ParticipationRecord] = {}
        self.sequences: dict[str, int] = {table: 0 for table in _TABLES}
        self.lock = threading.RLock()

    def next_id(self, table: str) -> int:
        self.sequences[table] += 1
        return self.sequences[table]

    def snapshot(self) -> dict[str, dict]:
        state = {table: dict(getattr(self, table)) for table in _TABLES}
        state["sequences"] = dict(self.sequences)
        return state

    def restore(self, state: dict[str, dict]) -> None:
        for table in _TABLES:
            setattr(self, table, state[table])
        self.sequences = state["sequences"]


class _Atomic:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db
        self._saved: list[dict[str, dict]] = []

    def __enter__(self) -> None:
        self._db.lock.acquire()
        self._saved.append(self._db.snapshot())

    def __exit__(self, exc_type, exc, tb) -> bool:
        saved = self._saved.pop()
        try:
            if exc_type is not None:
                self._db.restore(saved)
        finally:
            self._db.lock.release()
        return False


class MemoryUnitOfWork(UnitOfWork):
    """Serializes writers on the database lock and rolls back on error."""

    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def atomic(self) -> _Atomic:
        return _Atomic(self._db)


def _folded(value: str) -> str:
    return value.casefold()


class MemoryVenueStore(VenueStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def get(self, venue_id: int) -> Venue | None:
        return self._db.venues.get(venue_id)

    def list_all(self) -> list[Venue]:
        return sorted(self._db.venues.values(), key=lambda v: (v.normalized_name, v.name, v.id))

    def first(self) -> Venue | None:
        if not self._db.venues:
            return None
        return self._db.venues[min(self._db.venues)]

    def find_by_normalized_name(self, normalized_name: str) -> Venue | None:
        for venue_id in sorted(self._db.venues):
            venue = self._db.venues[venue_id]
            if venue.normalized_name == normalized_name:
                return venue
        return None

    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Venue]:
        if prefix:
            matches = [v for v in self.list_all() if v.normalized_name.startswith(normalized_term)]
        else:
            matches = [v for v in self.list_all() if normalized_term in v.normalized_name]
        return matches[:limit]

    def add(self, name: str, normalized_name: str) -> Venue:
        with self._db.lock:
            venue = Venue(id=self._db.next_id("venues"), name=name, normalized_name=normalized_name)
            self._db.venues[venue.id] = venue
        return venue

    def update(self, venue: Venue) -> Venue:
        if venue.id not in self._db.venues:
            raise LookupError(f"Venue {venue.id} does not exist")
        self._db.venues[venue.id] = venue
        return venue

    def delete_many(self, venue_ids: Iterable[int]) -> int:
        removed = 0
        with self._db.lock:
            for venue_id in set(venue_ids):
                if any(e.venue_id == venue_id for e in self._db.events.values()):
                    raise RuntimeError(f"Venue {venue_id} is referenced by an event")
                if self._db.venues.pop(venue_id, None) is not None:
                    removed += 1
        return removed


class MemoryEventStore(EventStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def _with_venue(self, event: Event) -> Event:
        return replace(event, venue=self._db.venues.get(event.venue_id))

    def get(self, event_id: int) -> Event | None:
        event = self._db.events.get(event_id)
        return self._with_venue(event) if event is not None else None

    def list_all(self) -> list[Event]:
        ordered = sorted(self._db.events.values(), key=lambda e: (e.date, e.id), reverse=True)
        return [self._with_venue(e) for e in ordered]

    def get_active(self, *, for_update: bool = False) -> Event | None:
        # The database lock held by atomic() already serializes writers.
        for event_id in sorted(self._db.events):
            event = self._db.events[event_id]
            if event.is_active:
                return self._with_venue(event)
        return None

    def add(self, venue_id: int, event_date: date, name: str, *, is_active: bool = False) -> Event:
        if venue_id not in self._db.venues:
            raise LookupError(f"Venue {venue_id} does not exist")
        with self._db.lock:
            event = Event(
                id=self._db.next_id("events"),
                venue_id=venue_id,
                date=event_date,
                name=name,
                is_active=is_active,
            )
            self._db.events[event.id] = event
        return self._with_venue(event)

    def set_active_flag(self, event_id: int, is_active: bool) -> None:
        event = self._db.events.get(event_id)
        if event is None:
            raise LookupError(f"Event {event_id} does not exist")
        self._db.events[event_id] = replace(event, is_active=is_active)

    def venue_ids_in_use(self, venue_ids: Iterable[int]) -> set[int]:
        wanted = set(venue_ids)
        return {e.venue_id for e in self._db.events.values() if e.venue_id in wanted}


class MemoryPersonStore(PersonStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def get(self, person_id: int) -> Person | None:
        return self._db.people.get(person_id)

    def find_by_normalized_name(self, normalized_full_name: str) -> Person | None:
        for person_id in sorted(self._db.people):
            person = self._db.people[person_id]
            if person.normalized_full_name == normalized_full_name:
                return person
        return None

    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Person]:
        ordered = sorted(self._db.people.values(), key=lambda p: (_folded(p.full_name), p.id))
        if prefix:
            matches = [p for p in ordered if p.normalized_full_name.startswith(normalized_term)]
        else:
            matches = [p for p in ordered if normalized_term in p.normalized_full_name]
        return matches[:limit]

    def add(
        self,
        full_name: str,
        normalized_full_name: str,
        birthday_day_month: str | None = None,
        email: str | None = None,
    ) -> Person:
        with self._db.lock:
            person = Person(
                id=self._db.next_id("people"),
                full_name=full_name,
                normalized_full_name=normalized_full_name,
                birthday_day_month=birthday_day_month,
                email=email,
            )
            self._db.people[person.id] = person
        return person

    def increment_counter(self, person_id: int, status: ParticipationStatus) -> None:
        person = self._db.people.get(person_id)
        if person is None:
            raise LookupError(f"Person {person_id} does not exist")
        if status is ParticipationStatus.PRESENT:
            person = replace(person, participation_count=person.participation_count + 1)
        else:
            person = replace(person, absence_count=person.absence_count + 1)
        self._db.people[person_id] = person


class MemoryParticipationStore(ParticipationStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def append(
        self,
        person_id: int,
        event_id: int,
        timestamp: datetime,
        status: ParticipationStatus,
    ) -> ParticipationRecord:
        if person_id not in self._db.people:
            raise LookupError(f"Person {person_id} does not exist")
        if event_id not in self._db.events:
            raise LookupError(f"Event {event_id} does not exist")
        with self._db.lock:
            record = ParticipationRecord(
                id=self._db.next_id("participations"),
                person_id=person_id,
                event_id=event_id,
                timestamp=timestamp,
                status=status,
            )
            self._db.participations[record.id] = record
        return record

    def list_for(self, person_id: int, event_id: int | None = None) -> list[ParticipationRecord]:
        return [
            record
            for _, record in sorted(self._db.participations.items())
            if record.person_id == person_id
            and (event_id is None or record.event_id == event_id)
        ]

    def count_by_status(self, person_id: int) -> dict[ParticipationStatus, int]:
        counts = {status: 0 for status in ParticipationStatus}
        for record in self._db.participations.values():
            if record.person_id == person_id:
                counts[record.status] += 1
        return counts


def memory_stores(db: MemoryDatabase | None = None) -> Stores:
    """Build a full store set over one shared in-memory database."""
    db = db or MemoryDatabase()
    return Stores(
        venues=MemoryVenueStore(db),
        events=MemoryEventStore(db),
        people=MemoryPersonStore(db),
        participations=MemoryParticipationStore(db),
        unit_of_work=MemoryUnitOfWork(db),
    )
