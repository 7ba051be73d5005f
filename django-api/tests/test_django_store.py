"""Integration tests for the services over the Django ORM stores.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import date
from unittest import mock

import pytest
from django.db import IntegrityError, transaction

from attendance import models as orm
from attendance.domain import ParticipationStatus
from attendance.domain.errors import ErrorCode
from attendance.services import DeleteOutcomeKind
from attendance.stores.django_store import DjangoEventStore, DjangoParticipationStore

pytestmark = pytest.mark.django_db


def _active_count() -> int:
    return orm.Event.objects.filter(is_active=True).count()


class TestSingleActiveEvent:
    """Tests for the active event invariant in the database."""

    def test_set_active_swaps_in_one_transaction(self, orm_services):
        venue = orm_services.venues.create("Blue Bar").value
        first = orm_services.events.create_event(venue.id, date(2025, 7, 1), "One").value
        second = orm_services.events.create_event(venue.id, date(2025, 7, 2), "Two").value

        for event_id in [first.id, second.id, second.id, first.id, 999]:
            orm_services.events.set_active(event_id)
            assert _active_count() == 1

        active = orm_services.events.get_active().value
        assert active.id == first.id
        assert active.venue.name == "Blue Bar"

    def test_database_rejects_a_second_active_event(self):
        """The partial unique constraint backs the invariant."""
        venue = orm.Venue.objects.create(name="Blue Bar", normalized_name="blue bar")
        orm.Event.objects.create(venue=venue, date=date(2025, 7, 1), name="One", is_active=True)
        with pytest.raises(IntegrityError), transaction.atomic():
            orm.Event.objects.create(venue=venue, date=date(2025, 7, 2), name="Two", is_active=True)

    def test_failed_activation_keeps_previous_event(self, orm_services):
        venue = orm_services.venues.create("Blue Bar").value
        first = orm_services.events.create_event(venue.id, date(2025, 7, 1), "One", activate=True).value
        second = orm_services.events.create_event(venue.id, date(2025, 7, 2), "Two").value

        original = DjangoEventStore.set_active_flag

        def fail_on_activate(self, event_id, is_active):
            if is_active:
                raise RuntimeError("connection lost")
            return original(self, event_id, is_active)

        with mock.patch.object(DjangoEventStore, "set_active_flag", fail_on_activate):
            result = orm_services.events.set_active(second.id)

        assert result.code is ErrorCode.STORAGE_FAILURE
        assert orm.Event.objects.get(pk=first.id).is_active
        assert _active_count() == 1


class TestLedgerPersistence:
    """Tests for the participation ledger over the ORM."""

    def test_auto_provisions_exactly_one_venue_and_event(self, orm_services):
        person = orm_services.people.resolve_or_create("Ana Lima").value

        orm_services.queue.record_participation(person.id, ParticipationStatus.PRESENT)
        orm_services.queue.record_participation(person.id, ParticipationStatus.ABSENT)

        assert orm.Venue.objects.count() == 1
        assert orm.Event.objects.count() == 1
        assert _active_count() == 1
        assert orm.ParticipationRecord.objects.count() == 2

        row = orm.Person.objects.get(pk=person.id)
        assert (row.participation_count, row.absence_count) == (1, 1)
        counts = orm_services.queue.ledger_counts(person.id).value
        assert counts == {ParticipationStatus.PRESENT: 1, ParticipationStatus.ABSENT: 1}

    def test_append_failure_rolls_back_provisioning(self, orm_services):
        person = orm_services.people.resolve_or_create("Ana Lima").value

        with mock.patch.object(DjangoParticipationStore, "append", side_effect=RuntimeError("disk full")):
            result = orm_services.queue.record_participation(person.id, ParticipationStatus.PRESENT)

        assert result.code is ErrorCode.STORAGE_FAILURE
        assert orm.Venue.objects.count() == 0
        assert orm.Event.objects.count() == 0
        assert orm.Person.objects.get(pk=person.id).participation_count == 0

    def test_rows_listed_in_insertion_order(self, orm_services):
        person = orm_services.people.resolve_or_create("Ana Lima").value
        statuses = [ParticipationStatus.ABSENT, ParticipationStatus.PRESENT, ParticipationStatus.PRESENT]
        for status in statuses:
            orm_services.queue.record_participation(person.id, status)

        rows = orm_services.queue.participations_for(person.id).value
        assert [r.status for r in rows] == statuses


class TestPeopleAndVenues:
    """Tests for identity resolution and the venue registry over the ORM."""

    def test_resolve_or_create_is_stable(self, orm_services):
        first = orm_services.people.resolve_or_create("François Müller", email="FM@Example.com")
        second = orm_services.people.resolve_or_create("francois muller")
        assert first.value.id == second.value.id
        assert orm.Person.objects.count() == 1
        assert orm.Person.objects.get().normalized_full_name == "francois muller"

    def test_person_search(self, orm_services):
        for name in ["José Silva", "Ana Lima", "Joana Dias"]:
            orm_services.people.resolve_or_create(name)
        names = [p.full_name for p in orm_services.people.search("jo").value]
        assert names == ["Joana Dias", "José Silva"]

    def test_venue_duplicate_is_case_insensitive(self, orm_services):
        orm_services.venues.create("Blue Bar")
        assert orm_services.venues.create("blue bar").code is ErrorCode.DUPLICATE

    @pytest.mark.parametrize(
        "existing, candidate",
        [
            ("Salão Principal", "SALÃO PRINCIPAL"),
            ("Área Externa", "Area Externa"),
        ],
    )
    def test_venue_duplicate_ignores_accents_and_unicode_case(self, orm_services, existing, candidate):
        orm_services.venues.create(existing)
        assert orm_services.venues.create(candidate).code is ErrorCode.DUPLICATE
        assert orm.Venue.objects.count() == 1

    def test_venue_search_ignores_accents(self, orm_services):
        for name in ["Área Externa", "Salão Principal", "Arena Sul"]:
            orm_services.venues.create(name)
        prefix = orm_services.venues.search_by_prefix("área").value
        contains = orm_services.venues.search_by_contains("SALÃO").value
        assert [v.name for v in prefix] == ["Área Externa"]
        assert [v.name for v in contains] == ["Salão Principal"]

    def test_venue_list_ignores_case_when_ordering(self, orm_services):
        for name in ["Zed Pub", "bar central", "Área Externa"]:
            orm_services.venues.create(name)
        names = [v.name for v in orm_services.venues.list_all().value]
        assert names == ["Área Externa", "bar central", "Zed Pub"]

    def test_venue_search_ordered_and_capped(self, orm_services):
        for name in ["Sky Bar", "Blue Bar", "Bar Central", "Red Pub"]:
            orm_services.venues.create(name)
        prefix = orm_services.venues.search_by_prefix("BAR", 5).value
        contains = orm_services.venues.search_by_contains("bar", 2).value
        assert [v.name for v in prefix] == ["Bar Central"]
        assert [v.name for v in contains] == ["Bar Central", "Blue Bar"]

    def test_delete_many_partial(self, orm_services):
        used = orm_services.venues.create("Blue Bar").value
        unused = orm_services.venues.create("Red Pub").value
        orm_services.events.create_event(used.id, date(2025, 7, 1), "Night")

        result = orm_services.venues.delete_many([used.id, unused.id])

        assert result.value.kind is DeleteOutcomeKind.PARTIAL
        assert list(orm.Venue.objects.values_list("id", flat=True)) == [used.id]

    def test_rename(self, orm_services):
        venue = orm_services.venues.create("Blue Bar").value
        orm_services.venues.rename(venue.id, "Salão Verde")
        row = orm.Venue.objects.get(pk=venue.id)
        assert (row.name, row.normalized_name) == ("Salão Verde", "salao verde")

    def test_provisioned_venue_fits_the_name_column(self, orm_services):
        person = orm_services.people.resolve_or_create("Ana Lima").value
        orm_services.queue.record_participation(person.id, ParticipationStatus.PRESENT)

        row = orm.Venue.objects.get()
        assert len(row.name) <= orm.Venue._meta.get_field("name").max_length
        assert row.normalized_name == "default venue"
