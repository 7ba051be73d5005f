"""Queue service - the participation ledger.

Each call to ``record_participation`` appends one ledger row for the active
event. Rows are never updated or removed, and repeated calls produce
repeated rows. The per-person counters are a cache updated in the same unit
of work; ``ledger_counts`` derives the authoritative numbers from the rows.

When no event is active, a fallback venue and event are provisioned in the
same unit of work as the row itself, so a failure leaves nothing behind.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from django.utils import timezone

from attendance.domain import (
    Err,
    Event,
    EventId,
    Ok,
    ParticipationRecord,
    ParticipationStatus,
    Person,
    PersonId,
    Result,
)
from attendance.domain.errors import (
    DomainError,
    InvalidArgumentError,
    NotFoundError,
    StorageFailure,
)
from attendance.services.event_service import EventService
from attendance.services.person_service import PersonService
from attendance.stores.interfaces import ParticipationStore, PersonStore, UnitOfWork

logger = logging.getLogger(__name__)


class QueueService:
    """Service for queue admission and the participation ledger."""

    def __init__(
        self,
        participations: ParticipationStore,
        people: PersonStore,
        event_service: EventService,
        person_service: PersonService,
        unit_of_work: UnitOfWork,
        clock: Callable[[], datetime] = timezone.localtime,
    ) -> None:
        self._participations = participations
        self._people = people
        self._events = event_service
        self._persons = person_service
        self._uow = unit_of_work
        self._clock = clock

    def add_person(self, full_name: str | None) -> Result[Person]:
        """Register (or find) a person by name, ready to be queued."""
        return self._persons.resolve_or_create(full_name)

    def ensure_active_event(self) -> Result[Event]:
        """Return the active event, provisioning a fallback one if needed."""
        try:
            with self._uow.atomic():
                event, provisioned = self._events.active_or_provision(self._today())
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to ensure an active event")
            return Err(StorageFailure(f"Error preparing the active event: {e}"))

        if provisioned:
            return Ok(event, f"'{event.name}' was created and is now active.")
        return Ok(event)

    def record_participation(
        self, person_id: int, status: ParticipationStatus
    ) -> Result[ParticipationRecord]:
        """Append a presence or absence for ``person_id`` at the active event.

        Returns:
            Ok with the new ledger row, or Err with INVALID_ARGUMENT,
            NOT_FOUND or STORAGE_FAILURE. On Err nothing was written.
        """
        try:
            pid = PersonId.of(person_id)
            if not isinstance(status, ParticipationStatus):
                raise InvalidArgumentError(f"Invalid participation status: {status!r}")

            now = self._clock()
            with self._uow.atomic():
                if self._people.get(pid.value) is None:
                    raise NotFoundError("Person", pid.value)
                event, provisioned = self._events.active_or_provision(now.date())
                record = self._participations.append(pid.value, event.id, now, status)
                self._people.increment_counter(pid.value, status)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to record participation for person %s", person_id)
            return Err(StorageFailure(f"Error recording participation: {e}"))

        logger.debug(
            "Participation recorded: person=%s event=%s status=%s provisioned=%s",
            record.person_id,
            record.event_id,
            record.status.name,
            provisioned,
        )
        return Ok(record, f"{status.name.capitalize()} recorded for '{event.name}'.")

    def participations_for(
        self, person_id: int, event_id: int | None = None
    ) -> Result[list[ParticipationRecord]]:
        """Ledger rows for a person (optionally one event), in insertion order."""
        try:
            pid = PersonId.of(person_id)
            eid = EventId.of(event_id).value if event_id is not None else None
            return Ok(self._participations.list_for(pid.value, eid))
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to load participations for person %s", person_id)
            return Err(StorageFailure(f"Error loading participations: {e}"))

    def ledger_counts(self, person_id: int) -> Result[dict[ParticipationStatus, int]]:
        try:
            pid = PersonId.of(person_id)
            return Ok(self._participations.count_by_status(pid.value))
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to count participations for person %s", person_id)
            return Err(StorageFailure(f"Error counting participations: {e}"))

    def _today(self) -> date:
        return self._clock().date()
