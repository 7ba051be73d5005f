"""Venue registry - create, rename, search and guarded deletion.

Every public method returns an ``Ok``/``Err`` outcome. Domain errors raised
while validating are converted at the method boundary; unexpected store
errors are logged and reported as ``StorageFailure``.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from attendance.config import AttendanceConfig
from attendance.domain import Err, Ok, Result, Venue, VenueId, VenueName
from attendance.domain.errors import (
    DomainError,
    DuplicateError,
    NotFoundError,
    ReferentialConflictError,
    StorageFailure,
    ValidationError,
)
from attendance.domain.normalization import TextNormalizer
from attendance.services.counters import CharacterCounter, character_counter
from attendance.stores.interfaces import EventStore, UnitOfWork, VenueStore

logger = logging.getLogger(__name__)


class DeleteOutcomeKind(Enum):
    ALL_DELETED = "ALL_DELETED"
    PARTIAL = "PARTIAL"
    NONE_DELETED = "NONE_DELETED"


@dataclass(frozen=True)
class DeleteOutcome:
    """What happened to each id of a batch delete."""

    kind: DeleteOutcomeKind
    deleted: tuple[int, ...]
    blocked: tuple[int, ...]
    missing: tuple[int, ...] = ()


class VenueService:
    """Service for venue registry operations."""

    def __init__(
        self,
        venues: VenueStore,
        events: EventStore,
        unit_of_work: UnitOfWork,
        config: AttendanceConfig | None = None,
        normalizer: TextNormalizer | None = None,
    ) -> None:
        self._venues = venues
        self._events = events
        self._uow = unit_of_work
        self._config = config or AttendanceConfig()
        self._normalizer = normalizer or TextNormalizer()

    def _parse_name(self, raw: str | None) -> VenueName:
        return VenueName.parse(
            raw,
            min_length=self._config.venue_name_min,
            max_length=self._config.venue_name_max,
        )

    def validate_name(self, raw: str | None) -> Result[str]:
        try:
            return Ok(self._parse_name(raw).value)
        except DomainError as e:
            return Err(e)

    def create(self, name: str | None) -> Result[Venue]:
        """Create a venue; names equal up to case and accents are duplicates."""
        try:
            venue_name = self._parse_name(name)
            with self._uow.atomic():
                normalized = self._normalizer.normalize_name(venue_name.value)
                if self._venues.find_by_normalized_name(normalized) is not None:
                    raise DuplicateError("A venue with this name already exists")
                venue = self._venues.add(venue_name.value, normalized)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to create venue %r", name)
            return Err(StorageFailure(f"Error creating venue: {e}"))

        logger.info("Venue created: id=%s name=%r", venue.id, venue.name)
        return Ok(venue, f"Venue '{venue.name}' created.")

    def rename(self, venue_id: int, new_name: str | None) -> Result[Venue]:
        """Rename a venue; the new name may only collide with itself."""
        try:
            venue_name = self._parse_name(new_name)
            vid = VenueId.of(venue_id)
            with self._uow.atomic():
                venue = self._venues.get(vid.value)
                if venue is None:
                    raise NotFoundError("Venue", vid.value)
                normalized = self._normalizer.normalize_name(venue_name.value)
                existing = self._venues.find_by_normalized_name(normalized)
                if existing is not None and existing.id != venue.id:
                    raise DuplicateError("A venue with this name already exists")
                venue = self._venues.update(
                    replace(venue, name=venue_name.value, normalized_name=normalized)
                )
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to rename venue %s", venue_id)
            return Err(StorageFailure(f"Error updating venue: {e}"))

        logger.info("Venue renamed: id=%s name=%r", venue.id, venue.name)
        return Ok(venue, f"Venue renamed to '{venue.name}'.")

    def get(self, venue_id: int) -> Result[Venue]:
        try:
            vid = VenueId.of(venue_id)
            venue = self._venues.get(vid.value)
            if venue is None:
                raise NotFoundError("Venue", vid.value)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to load venue %s", venue_id)
            return Err(StorageFailure(f"Error loading venue: {e}"))
        return Ok(venue)

    def list_all(self) -> Result[list[Venue]]:
        try:
            return Ok(self._venues.list_all())
        except Exception as e:
            logger.exception("Failed to list venues")
            return Err(StorageFailure(f"Error loading venues: {e}"))

    def search_by_prefix(self, term: str | None, max_results: int | None = None) -> Result[list[Venue]]:
        return self._search(term, max_results, prefix=True)

    def search_by_contains(self, term: str | None, max_results: int | None = None) -> Result[list[Venue]]:
        return self._search(term, max_results, prefix=False)

    def _search(self, term: str | None, max_results: int | None, *, prefix: bool) -> Result[list[Venue]]:
        limit = self._config.venue_search_limit if max_results is None else max_results
        if term is None or limit <= 0:
            return Ok([])
        normalized = self._normalizer.normalize_search_term(term)
        if not normalized:
            return Ok([])
        try:
            return Ok(
                self._venues.search_by_normalized_name(normalized, prefix=prefix, limit=limit)
            )
        except Exception as e:
            logger.exception("Venue search failed for %r", term)
            return Err(StorageFailure(f"Error searching venues: {e}"))

    def delete(self, venue_id: int) -> Result[Venue]:
        """Delete a single venue unless an event still references it."""
        try:
            vid = VenueId.of(venue_id)
            with self._uow.atomic():
                venue = self._venues.get(vid.value)
                if venue is None:
                    raise NotFoundError("Venue", vid.value)
                if self._events.venue_ids_in_use([venue.id]):
                    raise ReferentialConflictError(
                        "This venue cannot be deleted because events are linked to it"
                    )
                self._venues.delete_many([venue.id])
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to delete venue %s", venue_id)
            return Err(StorageFailure(f"Error deleting venue: {e}"))

        logger.info("Venue deleted: id=%s", venue.id)
        return Ok(venue, f"Venue '{venue.name}' deleted.")

    def delete_many(self, venue_ids: list[int]) -> Result[DeleteOutcome]:
        """Delete every venue without events; skip and report the rest.

        Blocked ids are never an error: the outcome kind and message tell
        the caller whether all, some or none of the venues were removed.
        """
        try:
            ids = [VenueId.of(v).value for v in venue_ids]
            if not ids:
                raise ValidationError("Select at least one venue to delete")
            ids = list(dict.fromkeys(ids))
            with self._uow.atomic():
                existing = [v for v in ids if self._venues.get(v) is not None]
                missing = tuple(v for v in ids if v not in existing)
                in_use = self._events.venue_ids_in_use(existing)
                deletable = tuple(v for v in existing if v not in in_use)
                blocked = tuple(v for v in existing if v in in_use)
                if deletable:
                    self._venues.delete_many(deletable)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Batch venue delete failed for %s", venue_ids)
            return Err(StorageFailure(f"Error deleting venues: {e}"))

        outcome = DeleteOutcome(
            kind=_outcome_kind(deletable, blocked + missing),
            deleted=deletable,
            blocked=blocked,
            missing=missing,
        )
        logger.info(
            "Batch venue delete: deleted=%s blocked=%s missing=%s",
            outcome.deleted,
            outcome.blocked,
            outcome.missing,
        )
        return Ok(outcome, _outcome_message(outcome))

    def character_counter(self, current_length: int) -> CharacterCounter:
        return character_counter(
            current_length,
            limit=self._config.venue_name_max,
            warn_after=self._config.venue_counter_warn_at,
        )

    def should_show_counter(self, current_length: int) -> bool:
        return current_length > self._config.venue_counter_show_at


def _outcome_kind(deleted: tuple[int, ...], kept: tuple[int, ...]) -> DeleteOutcomeKind:
    if not deleted:
        return DeleteOutcomeKind.NONE_DELETED
    if kept:
        return DeleteOutcomeKind.PARTIAL
    return DeleteOutcomeKind.ALL_DELETED


def _outcome_message(outcome: DeleteOutcome) -> str:
    if outcome.kind is DeleteOutcomeKind.ALL_DELETED:
        if len(outcome.deleted) == 1:
            return "Venue deleted."
        return f"{len(outcome.deleted)} venues deleted."
    if outcome.kind is DeleteOutcomeKind.PARTIAL:
        return (
            f"{len(outcome.deleted)} venue(s) deleted; "
            f"{len(outcome.blocked) + len(outcome.missing)} could not be deleted "
            "because events are linked to them or they no longer exist."
        )
    return "No venue was deleted: every selected venue has linked events or no longer exists."
