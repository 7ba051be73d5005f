from django.urls import path

from attendance.handlers import (
    ActiveEventView,
    EventActivateView,
    EventListView,
    ParticipationView,
    PersonListView,
    VenueDeleteView,
    VenueDetailView,
    VenueListView,
)

urlpatterns = [
    path("venues", VenueListView.as_view(), name="venue-list"),
    path("venues/delete", VenueDeleteView.as_view(), name="venue-delete"),
    path("venues/<int:venue_id>", VenueDetailView.as_view(), name="venue-detail"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/active", ActiveEventView.as_view(), name="event-active"),
    path(
        "events/<int:event_id>/activate",
        EventActivateView.as_view(),
        name="event-activate",
    ),
    path("people", PersonListView.as_view(), name="person-list"),
    path("participations", ParticipationView.as_view(), name="participation-create"),
]
