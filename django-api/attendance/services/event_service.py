"""Event service - the active event state machine.

At most one event is active system-wide. Every transition that touches the
``is_active`` flag runs inside one unit of work and locks the current
active row first, so a reader never sees two active events, nor zero
active events halfway through a swap.

An activation request for an unknown event fails as a whole and leaves the
current active event untouched.
"""

import logging
from datetime import date

from attendance.config import AttendanceConfig
from attendance.domain import Err, Event, EventId, Ok, Result, VenueId
from attendance.domain.errors import (
    DomainError,
    NotFoundError,
    StorageFailure,
    ValidationError,
)
from attendance.domain.normalization import TextNormalizer
from attendance.stores.interfaces import EventStore, UnitOfWork, VenueStore

logger = logging.getLogger(__name__)


class EventService:
    """Service for event lifecycle and activation."""

    def __init__(
        self,
        events: EventStore,
        venues: VenueStore,
        unit_of_work: UnitOfWork,
        config: AttendanceConfig | None = None,
        normalizer: TextNormalizer | None = None,
    ) -> None:
        self._events = events
        self._venues = venues
        self._uow = unit_of_work
        self._config = config or AttendanceConfig()
        self._normalizer = normalizer or TextNormalizer()

    def get_active(self) -> Result[Event | None]:
        """Return the active event with its venue, or ``Ok(None)``."""
        try:
            return Ok(self._events.get_active())
        except Exception as e:
            logger.exception("Failed to load the active event")
            return Err(StorageFailure(f"Error loading the active event: {e}"))

    def list_events(self) -> Result[list[Event]]:
        try:
            return Ok(self._events.list_all())
        except Exception as e:
            logger.exception("Failed to list events")
            return Err(StorageFailure(f"Error loading events: {e}"))

    def set_active(self, event_id: int) -> Result[Event]:
        """Make ``event_id`` the only active event.

        Returns:
            Ok with the now-active event, or Err with INVALID_ARGUMENT,
            NOT_FOUND or STORAGE_FAILURE. On Err nothing was changed.
        """
        try:
            eid = EventId.of(event_id)
            with self._uow.atomic():
                current = self._events.get_active(for_update=True)
                if current is not None and current.id == eid.value:
                    return Ok(current, f"'{current.name}' is already the active event.")

                target = self._events.get(eid.value)
                if target is None:
                    raise NotFoundError("Event", eid.value)

                self._swap(current, target.id)
                activated = self._events.get(target.id)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to activate event %s", event_id)
            return Err(StorageFailure(f"Error activating event: {e}"))

        logger.info(
            "Active event changed: %s -> %s",
            current.id if current is not None else None,
            activated.id,
        )
        return Ok(activated, f"'{activated.name}' is now the active event.")

    def deactivate(self) -> Result[Event | None]:
        """Close the queue: leave no event active."""
        try:
            with self._uow.atomic():
                current = self._events.get_active(for_update=True)
                if current is not None:
                    self._events.set_active_flag(current.id, False)
        except Exception as e:
            logger.exception("Failed to deactivate the active event")
            return Err(StorageFailure(f"Error closing the active event: {e}"))

        if current is None:
            return Ok(None, "No event was active.")
        logger.info("Active event closed: %s", current.id)
        return Ok(current, f"'{current.name}' is no longer active.")

    def create_event(
        self,
        venue_id: int,
        event_date: date,
        name: str | None,
        activate: bool = False,
    ) -> Result[Event]:
        """Create an event at a venue, optionally making it the active one."""
        try:
            vid = VenueId.of(venue_id)
            event_name = self._parse_event_name(name)
            if not isinstance(event_date, date):
                raise ValidationError("Event date is required")
            with self._uow.atomic():
                if self._venues.get(vid.value) is None:
                    raise NotFoundError("Venue", vid.value)
                if activate:
                    current = self._events.get_active(for_update=True)
                    if current is not None:
                        self._events.set_active_flag(current.id, False)
                event = self._events.add(vid.value, event_date, event_name, is_active=activate)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to create event at venue %s", venue_id)
            return Err(StorageFailure(f"Error creating event: {e}"))

        logger.info("Event created: id=%s venue=%s active=%s", event.id, event.venue_id, activate)
        return Ok(event, f"Event '{event.name}' created.")

    def active_or_provision(self, today: date) -> tuple[Event, bool]:
        """Return the active event, creating a fallback one if none is active.

        Must be called inside a unit of work owned by the caller: the venue,
        the event and the caller's own writes commit or roll back together.
        Returns the event and whether it was provisioned.
        """
        current = self._events.get_active(for_update=True)
        if current is not None:
            return current, False

        venue = self._venues.first()
        if venue is None:
            venue_name = self._config.default_venue_name
            venue = self._venues.add(venue_name, self._normalizer.normalize_name(venue_name))
            logger.info("Default venue provisioned: id=%s", venue.id)

        name = self._config.default_event_name_format.format(date=today)
        event = self._events.add(venue.id, today, name[: self._config.event_name_max], is_active=True)
        logger.info("Fallback event provisioned and activated: id=%s venue=%s", event.id, venue.id)
        return event, True

    def _swap(self, current: Event | None, target_id: int) -> None:
        # Deactivate first: the single-active constraint rejects two active rows.
        if current is not None:
            self._events.set_active_flag(current.id, False)
        self._events.set_active_flag(target_id, True)

    def _parse_event_name(self, raw: str | None) -> str:
        if raw is None or not raw.strip():
            raise ValidationError("Event name is required")
        name = raw.strip()
        if len(name) > self._config.event_name_max:
            raise ValidationError(
                f"Event name too long. Maximum {self._config.event_name_max} characters."
            )
        return name
