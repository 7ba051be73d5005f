"""Configuration passed explicitly to the services.

Defaults match the column sizes in attendance/models.py. A deployment can
override any of them through the ``ATTENDANCE`` dict in Django settings.
"""

from dataclasses import dataclass, fields, replace
from typing import Self

from django.core.exceptions import ImproperlyConfigured

from attendance.domain.value_objects import (
    EMAIL_MAX,
    EVENT_NAME_MAX,
    PERSON_NAME_INPUT_MAX,
    PERSON_NAME_STORAGE_MAX,
    VENUE_NAME_MAX,
    VENUE_NAME_MIN,
)


@dataclass(frozen=True)
class AttendanceConfig:
    person_name_input_max: int = PERSON_NAME_INPUT_MAX
    person_name_storage_max: int = PERSON_NAME_STORAGE_MAX
    person_counter_show_at: int = 180
    person_counter_warn_at: int = 190
    venue_name_min: int = VENUE_NAME_MIN
    venue_name_max: int = VENUE_NAME_MAX
    venue_counter_show_at: int = 25
    venue_counter_warn_at: int = 27
    event_name_max: int = EVENT_NAME_MAX
    email_max: int = EMAIL_MAX
    default_venue_name: str = "Default venue"
    default_event_name_format: str = "Automatic event {date:%Y-%m-%d}"
    person_search_limit: int = 5
    person_prefix_search_limit: int = 3
    venue_search_limit: int = 10

    def __post_init__(self) -> None:
        if self.person_name_input_max > self.person_name_storage_max:
            raise ImproperlyConfigured(
                "person_name_input_max cannot exceed person_name_storage_max"
            )
        if not 0 < self.venue_name_min <= self.venue_name_max:
            raise ImproperlyConfigured("venue name bounds are inconsistent")
        if not self.venue_name_min <= len(self.default_venue_name.strip()) <= self.venue_name_max:
            raise ImproperlyConfigured(
                f"default_venue_name must be {self.venue_name_min} to "
                f"{self.venue_name_max} characters long"
            )

    @classmethod
    def from_settings(cls, settings) -> Self:
        """Build the config from ``settings.ATTENDANCE`` (optional)."""
        overrides = getattr(settings, "ATTENDANCE", None) or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ImproperlyConfigured(
                f"Unknown ATTENDANCE setting(s): {', '.join(unknown)}"
            )
        return replace(cls(), **overrides)
