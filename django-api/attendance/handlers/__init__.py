from attendance.handlers.views import (
    ActiveEventView,
    EventActivateView,
    EventListView,
    ParticipationView,
    PersonListView,
    VenueDeleteView,
    VenueDetailView,
    VenueListView,
)

__all__ = [
    "ActiveEventView",
    "EventActivateView",
    "EventListView",
    "ParticipationView",
    "PersonListView",
    "VenueDeleteView",
    "VenueDetailView",
    "VenueListView",
]
