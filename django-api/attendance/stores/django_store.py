"""Django ORM implementation of the stores.

Each method queries the ORM and converts rows to domain models. Database
errors propagate unchanged; services decide how to report them.
"""

from collections.abc import Iterable
from datetime import date, datetime

from django.db import transaction
from django.db.models import Count, F

from attendance import models as orm
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


def _venue(row: orm.Venue) -> Venue:
    return Venue(id=row.id, name=row.name, normalized_name=row.normalized_name)


def _event(row: orm.Event) -> Event:
    return Event(
        id=row.id,
        venue_id=row.venue_id,
        date=row.date,
        name=row.name,
        is_active=row.is_active,
        venue=_venue(row.venue),
    )


def _person(row: orm.Person) -> Person:
    return Person(
        id=row.id,
        full_name=row.full_name,
        normalized_full_name=row.normalized_full_name,
        participation_count=row.participation_count,
        absence_count=row.absence_count,
        birthday_day_month=row.birthday_day_month,
        email=row.email,
    )


def _record(row: orm.ParticipationRecord) -> ParticipationRecord:
    return ParticipationRecord(
        id=row.id,
        person_id=row.person_id,
        event_id=row.event_id,
        timestamp=row.timestamp,
        status=ParticipationStatus(row.status),
    )


class DjangoUnitOfWork(UnitOfWork):
    """Database transaction; nested blocks become savepoints."""

    def __init__(self, using: str | None = None) -> None:
        self._using = using

    def atomic(self):
        return transaction.atomic(using=self._using)


class DjangoVenueStore(VenueStore):
    """Venue store backed by the ``attendance_venue`` table."""

    def get(self, venue_id: int) -> Venue | None:
        row = orm.Venue.objects.filter(pk=venue_id).first()
        return _venue(row) if row is not None else None

    def list_all(self) -> list[Venue]:
        return [_venue(row) for row in orm.Venue.objects.order_by("normalized_name", "name", "id")]

    def first(self) -> Venue | None:
        row = orm.Venue.objects.order_by("id").first()
        return _venue(row) if row is not None else None

    def find_by_normalized_name(self, normalized_name: str) -> Venue | None:
        row = orm.Venue.objects.filter(normalized_name=normalized_name).order_by("id").first()
        return _venue(row) if row is not None else None

    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Venue]:
        lookup = "normalized_name__startswith" if prefix else "normalized_name__contains"
        rows = orm.Venue.objects.filter(**{lookup: normalized_term}).order_by(
            "normalized_name", "name", "id"
        )
        return [_venue(row) for row in rows[:limit]]

    def add(self, name: str, normalized_name: str) -> Venue:
        return _venue(orm.Venue.objects.create(name=name, normalized_name=normalized_name))

    def update(self, venue: Venue) -> Venue:
        updated = orm.Venue.objects.filter(pk=venue.id).update(
            name=venue.name, normalized_name=venue.normalized_name
        )
        if not updated:
            raise orm.Venue.DoesNotExist(f"Venue {venue.id} does not exist")
        return venue

    def delete_many(self, venue_ids: Iterable[int]) -> int:
        deleted, _ = orm.Venue.objects.filter(pk__in=list(venue_ids)).delete()
        return deleted


class DjangoEventStore(EventStore):
    """Event store backed by the ``attendance_event`` table."""

    def _rows(self):
        return orm.Event.objects.select_related("venue")

    def get(self, event_id: int) -> Event | None:
        row = self._rows().filter(pk=event_id).first()
        return _event(row) if row is not None else None

    def list_all(self) -> list[Event]:
        return [_event(row) for row in self._rows().order_by("-date", "-id")]

    def get_active(self, *, for_update: bool = False) -> Event | None:
        rows = self._rows().filter(is_active=True).order_by("id")
        if for_update:
            rows = rows.select_for_update()
        row = rows.first()
        return _event(row) if row is not None else None

    def add(self, venue_id: int, event_date: date, name: str, *, is_active: bool = False) -> Event:
        row = orm.Event.objects.create(
            venue_id=venue_id,
            date=event_date,
            name=name,
            is_active=is_active,
        )
        return self.get(row.id)

    def set_active_flag(self, event_id: int, is_active: bool) -> None:
        updated = orm.Event.objects.filter(pk=event_id).update(is_active=is_active)
        if not updated:
            raise orm.Event.DoesNotExist(f"Event {event_id} does not exist")

    def venue_ids_in_use(self, venue_ids: Iterable[int]) -> set[int]:
        rows = orm.Event.objects.filter(venue_id__in=list(venue_ids))
        return set(rows.values_list("venue_id", flat=True).distinct())


class DjangoPersonStore(PersonStore):
    """Person store backed by the ``attendance_person`` table."""

    def get(self, person_id: int) -> Person | None:
        row = orm.Person.objects.filter(pk=person_id).first()
        return _person(row) if row is not None else None

    def find_by_normalized_name(self, normalized_full_name: str) -> Person | None:
        row = (
            orm.Person.objects.filter(normalized_full_name=normalized_full_name)
            .order_by("id")
            .first()
        )
        return _person(row) if row is not None else None

    def search_by_normalized_name(
        self, normalized_term: str, *, prefix: bool, limit: int
    ) -> list[Person]:
        lookup = "normalized_full_name__startswith" if prefix else "normalized_full_name__contains"
        rows = orm.Person.objects.filter(**{lookup: normalized_term}).order_by("full_name", "id")
        return [_person(row) for row in rows[:limit]]

    def add(
        self,
        full_name: str,
        normalized_full_name: str,
        birthday_day_month: str | None = None,
        email: str | None = None,
    ) -> Person:
        row = orm.Person.objects.create(
            full_name=full_name,
            normalized_full_name=normalized_full_name,
            birthday_day_month=birthday_day_month,
            email=email,
        )
        return _person(row)

    def increment_counter(self, person_id: int, status: ParticipationStatus) -> None:
        field = (
            "participation_count"
            if status is ParticipationStatus.PRESENT
            else "absence_count"
        )
        updated = orm.Person.objects.filter(pk=person_id).update(**{field: F(field) + 1})
        if not updated:
            raise orm.Person.DoesNotExist(f"Person {person_id} does not exist")


class DjangoParticipationStore(ParticipationStore):
    """Ledger store backed by the ``attendance_participationrecord`` table."""

    def append(
        self,
        person_id: int,
        event_id: int,
        timestamp: datetime,
        status: ParticipationStatus,
    ) -> ParticipationRecord:
        row = orm.ParticipationRecord.objects.create(
            person_id=person_id,
            event_id=event_id,
            timestamp=timestamp,
            status=status.value,
        )
        return _record(row)

    def list_for(self, person_id: int, event_id: int | None = None) -> list[ParticipationRecord]:
        rows = orm.ParticipationRecord.objects.filter(person_id=person_id)
        if event_id is not None:
            rows = rows.filter(event_id=event_id)
        return [_record(row) for row in rows.order_by("id")]

    def count_by_status(self, person_id: int) -> dict[ParticipationStatus, int]:
        counts = {status: 0 for status in ParticipationStatus}
        rows = (
            orm.ParticipationRecord.objects.filter(person_id=person_id)
            .order_by()
            .values("status")
            .annotate(total=Count("id"))
        )
        for row in rows:
            counts[ParticipationStatus(row["status"])] = row["total"]
        return counts


def django_stores(using: str | None = None) -> Stores:
    """Build a full store set over the Django database connection."""
    return Stores(
        venues=DjangoVenueStore(),
        events=DjangoEventStore(),
        people=DjangoPersonStore(),
        participations=DjangoParticipationStore(),
        unit_of_work=DjangoUnitOfWork(using),
    )
