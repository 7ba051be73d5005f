"""Builds the service bundle the handlers and embedders work with.

Nothing here is global: callers pass the stores and the configuration in,
and own the resulting ``Services`` for as long as they need it.
"""

from dataclasses import dataclass

from attendance.config import AttendanceConfig
from attendance.domain.normalization import TextNormalizer
from attendance.services import EventService, PersonService, QueueService, VenueService
from attendance.stores.interfaces import Stores


@dataclass(frozen=True)
class Services:
    venues: VenueService
    events: EventService
    people: PersonService
    queue: QueueService


def build_services(
    stores: Stores,
    config: AttendanceConfig | None = None,
    normalizer: TextNormalizer | None = None,
    **queue_options,
) -> Services:
    """Wire every service over one store set.

    ``queue_options`` are passed to ``QueueService`` (e.g. ``clock``).
    """
    config = config or AttendanceConfig()
    normalizer = normalizer or TextNormalizer()

    venues = VenueService(stores.venues, stores.events, stores.unit_of_work, config, normalizer)
    events = EventService(stores.events, stores.venues, stores.unit_of_work, config, normalizer)
    people = PersonService(stores.people, stores.unit_of_work, normalizer, config)
    queue = QueueService(
        stores.participations,
        stores.people,
        events,
        people,
        stores.unit_of_work,
        **queue_options,
    )
    return Services(venues=venues, events=events, people=people, queue=queue)


def django_services() -> Services:
    """Services over the ORM stores, configured from Django settings."""
    from django.conf import settings

    from attendance.stores.django_store import django_stores

    return build_services(django_stores(), AttendanceConfig.from_settings(settings))
