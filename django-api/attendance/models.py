"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.db import models
from django.db.models import Q


class Venue(models.Model):
    """Persistence model for venues."""

    name = models.CharField(max_length=30)
    normalized_name = models.CharField(max_length=60, db_index=True)

    class Meta:
        ordering = ["normalized_name", "name", "id"]

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for events."""

    venue = models.ForeignKey(Venue, on_delete=models.PROTECT, related_name="events")
    date = models.DateField()
    name = models.CharField(max_length=200)
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ["-date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_active"],
                condition=Q(is_active=True),
                name="single_active_event",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.date})"


class Person(models.Model):
    """Persistence model for registered people."""

    full_name = models.CharField(max_length=250)
    normalized_full_name = models.CharField(max_length=500, db_index=True)
    participation_count = models.PositiveIntegerField(default=0)
    absence_count = models.PositiveIntegerField(default=0)
    birthday_day_month = models.CharField(max_length=5, blank=True, null=True)
    email = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        ordering = ["full_name", "id"]

    def __str__(self) -> str:
        return self.full_name


class ParticipationRecord(models.Model):
    """Persistence model for the participation ledger."""

    class Status(models.IntegerChoices):
        ABSENT = 0, "Absent"
        PRESENT = 1, "Present"

    person = models.ForeignKey(
        Person, on_delete=models.PROTECT, related_name="participations"
    )
    event = models.ForeignKey(
        Event, on_delete=models.PROTECT, related_name="participations"
    )
    timestamp = models.DateTimeField()
    status = models.IntegerField(choices=Status.choices)

    class Meta:
        ordering = ["timestamp", "id"]
        indexes = [
            models.Index(fields=["person", "event"]),
        ]

    def __str__(self) -> str:
        return f"{self.person_id}@{self.event_id}: {self.get_status_display()}"
