"""Serializers for transforming domain models to API responses and parsing input.

Input serializers only check the request format. Business validation
(name bounds, birthday rules, duplicates) belongs to the services.
"""

from rest_framework import serializers

from attendance.domain import ParticipationStatus, display_identifier, display_name


class VenueSerializer(serializers.Serializer):
    """Serializer for Venue domain model."""

    id = serializers.IntegerField()
    name = serializers.CharField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.IntegerField()
    venue_id = serializers.IntegerField()
    date = serializers.DateField()
    name = serializers.CharField()
    is_active = serializers.BooleanField()
    venue = VenueSerializer(allow_null=True)


class PersonSerializer(serializers.Serializer):
    """Serializer for Person domain model."""

    id = serializers.IntegerField()
    full_name = serializers.CharField()
    participation_count = serializers.IntegerField()
    absence_count = serializers.IntegerField()
    birthday_day_month = serializers.CharField(allow_null=True)
    email = serializers.CharField(allow_null=True)
    display_name = serializers.SerializerMethodField()
    display_identifier = serializers.SerializerMethodField()

    def get_display_name(self, person) -> str:
        return display_name(person)

    def get_display_identifier(self, person) -> str:
        return display_identifier(person)


class ParticipationRecordSerializer(serializers.Serializer):
    """Serializer for ParticipationRecord domain model."""

    id = serializers.IntegerField()
    person_id = serializers.IntegerField()
    event_id = serializers.IntegerField()
    timestamp = serializers.DateTimeField()
    status = serializers.SerializerMethodField()

    def get_status(self, record) -> str:
        return record.status.name


class DeleteOutcomeSerializer(serializers.Serializer):
    kind = serializers.SerializerMethodField()
    deleted = serializers.ListField(child=serializers.IntegerField())
    blocked = serializers.ListField(child=serializers.IntegerField())
    missing = serializers.ListField(child=serializers.IntegerField())

    def get_kind(self, outcome) -> str:
        return outcome.kind.value


class VenueInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)


class VenueDeleteInputSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class EventInputSerializer(serializers.Serializer):
    venue_id = serializers.IntegerField()
    date = serializers.DateField()
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    activate = serializers.BooleanField(default=False)


class PersonInputSerializer(serializers.Serializer):
    full_name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    birthday = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ParticipationInputSerializer(serializers.Serializer):
    person_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=[s.name for s in ParticipationStatus])

    def validate_status(self, value: str) -> ParticipationStatus:
        return ParticipationStatus[value]
