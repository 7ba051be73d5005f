from attendance.services.event_service import EventService
from attendance.services.person_service import PersonService
from attendance.services.queue_service import QueueService
from attendance.services.venue_service import (
    DeleteOutcome,
    DeleteOutcomeKind,
    VenueService,
)

__all__ = [
    "EventService",
    "PersonService",
    "QueueService",
    "VenueService",
    "DeleteOutcome",
    "DeleteOutcomeKind",
]
