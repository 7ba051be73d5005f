from attendance.domain.models import (
    Event,
    ParticipationRecord,
    ParticipationStatus,
    Person,
    Venue,
    display_identifier,
    display_name,
)
from attendance.domain.result import Err, Ok, Result
from attendance.domain.value_objects import (
    Birthday,
    Email,
    EventId,
    PersonId,
    PersonName,
    VenueId,
    VenueName,
)

__all__ = [
    "Event",
    "ParticipationRecord",
    "ParticipationStatus",
    "Person",
    "Venue",
    "display_identifier",
    "display_name",
    "Ok",
    "Err",
    "Result",
    "Birthday",
    "Email",
    "EventId",
    "PersonId",
    "PersonName",
    "VenueId",
    "VenueName",
]
