"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from attendance.domain import Err, Result
from attendance.domain.errors import ErrorCode
from attendance.handlers.serializers import (
    DeleteOutcomeSerializer,
    EventInputSerializer,
    EventSerializer,
    ParticipationInputSerializer,
    ParticipationRecordSerializer,
    PersonInputSerializer,
    PersonSerializer,
    VenueDeleteInputSerializer,
    VenueInputSerializer,
    VenueSerializer,
)
from attendance.wiring import Services, django_services

ERROR_STATUS = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorCode.REFERENTIAL_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(result: Err) -> Response:
    return Response(
        {"code": result.code.value, "message": result.message},
        status=ERROR_STATUS[result.code],
    )


def invalid_input(errors) -> Response:
    return Response(
        {"code": ErrorCode.VALIDATION.value, "message": "Invalid request", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def respond(result: Result, serializer_class, *, many=False, success_status=status.HTTP_200_OK) -> Response:
    if not result.ok:
        return error_response(result)
    data = None
    if result.value is not None:
        data = serializer_class(result.value, many=many).data
    return Response({"message": result.message, "data": data}, status=success_status)


class AttendanceView(APIView):
    """Base handler holding the service bundle."""

    services_factory = staticmethod(django_services)

    @property
    def services(self) -> Services:
        if not hasattr(self, "_services"):
            self._services = self.services_factory()
        return self._services


def _max_results(request: Request) -> int | None:
    raw = request.query_params.get("max")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


class VenueListView(AttendanceView):
    """Handler for GET/POST /api/venues"""

    def get(self, request: Request) -> Response:
        term = request.query_params.get("q")
        if term is None:
            return respond(self.services.venues.list_all(), VenueSerializer, many=True)
        if request.query_params.get("mode", "contains") == "prefix":
            result = self.services.venues.search_by_prefix(term, _max_results(request))
        else:
            result = self.services.venues.search_by_contains(term, _max_results(request))
        return respond(result, VenueSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = VenueInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = self.services.venues.create(payload.validated_data["name"])
        return respond(result, VenueSerializer, success_status=status.HTTP_201_CREATED)


class VenueDetailView(AttendanceView):
    """Handler for GET/PATCH /api/venues/{venue_id}"""

    def get(self, request: Request, venue_id: int) -> Response:
        return respond(self.services.venues.get(venue_id), VenueSerializer)

    def patch(self, request: Request, venue_id: int) -> Response:
        payload = VenueInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = self.services.venues.rename(venue_id, payload.validated_data["name"])
        return respond(result, VenueSerializer)


class VenueDeleteView(AttendanceView):
    """Handler for POST /api/venues/delete"""

    def post(self, request: Request) -> Response:
        payload = VenueDeleteInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = self.services.venues.delete_many(payload.validated_data["ids"])
        return respond(result, DeleteOutcomeSerializer)


class EventListView(AttendanceView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        return respond(self.services.events.list_events(), EventSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = EventInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        data = payload.validated_data
        result = self.services.events.create_event(
            data["venue_id"], data["date"], data["name"], activate=data["activate"]
        )
        return respond(result, EventSerializer, success_status=status.HTTP_201_CREATED)


class ActiveEventView(AttendanceView):
    """Handler for GET /api/events/active"""

    def get(self, request: Request) -> Response:
        result = self.services.events.get_active()
        if result.ok and result.value is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return respond(result, EventSerializer)


class EventActivateView(AttendanceView):
    """Handler for POST /api/events/{event_id}/activate"""

    def post(self, request: Request, event_id: int) -> Response:
        return respond(self.services.events.set_active(event_id), EventSerializer)


class PersonListView(AttendanceView):
    """Handler for GET/POST /api/people"""

    def get(self, request: Request) -> Response:
        term = request.query_params.get("q")
        if request.query_params.get("mode", "contains") == "prefix":
            result = self.services.people.search_starts_with(term, _max_results(request))
        else:
            result = self.services.people.search(term, _max_results(request))
        return respond(result, PersonSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = PersonInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        data = payload.validated_data
        result = self.services.people.resolve_or_create(
            data["full_name"], data.get("birthday"), data.get("email")
        )
        return respond(result, PersonSerializer)


class ParticipationView(AttendanceView):
    """Handler for POST /api/participations"""

    def post(self, request: Request) -> Response:
        payload = ParticipationInputSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        data = payload.validated_data
        result = self.services.queue.record_participation(data["person_id"], data["status"])
        return respond(result, ParticipationRecordSerializer, success_status=status.HTTP_201_CREATED)
