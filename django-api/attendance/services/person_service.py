"""Person service - identity resolution.

A raw name is matched against registered people through its normalized
form: "José Silva", "JOSE SILVA" and "Jose  Silva" all resolve to the same
person. A name that is already registered is returned as it is; a later
call never changes the stored birthday or e-mail.
"""

import logging

from attendance.config import AttendanceConfig
from attendance.domain import (
    Birthday,
    Email,
    Err,
    Ok,
    Person,
    PersonId,
    PersonName,
    Result,
)
from attendance.domain.errors import DomainError, NotFoundError, StorageFailure
from attendance.domain.normalization import TextNormalizer
from attendance.services.counters import CharacterCounter, character_counter
from attendance.stores.interfaces import PersonStore, UnitOfWork

logger = logging.getLogger(__name__)

MIN_SEARCH_TERM_LENGTH = 2


class PersonService:
    """Service for person registration and lookup."""

    def __init__(
        self,
        people: PersonStore,
        unit_of_work: UnitOfWork,
        normalizer: TextNormalizer | None = None,
        config: AttendanceConfig | None = None,
    ) -> None:
        self._people = people
        self._uow = unit_of_work
        self._normalizer = normalizer or TextNormalizer()
        self._config = config or AttendanceConfig()

    # Validation

    def _parse_name(self, raw: str | None) -> PersonName:
        return PersonName.parse(
            raw,
            input_max=self._config.person_name_input_max,
            storage_max=self._config.person_name_storage_max,
        )

    def validate_name_input(self, name: str | None) -> Result[str]:
        """Check the name against the input (UX) bound and shape rules."""
        try:
            return Ok(
                PersonName.parse(
                    name,
                    input_max=self._config.person_name_input_max,
                    storage_max=max(
                        self._config.person_name_input_max,
                        self._config.person_name_storage_max,
                    ),
                ).value
            )
        except DomainError as e:
            return Err(e)

    def validate_name_for_storage(self, name: str | None) -> Result[str]:
        """Check the name against the storage bound and shape rules."""
        try:
            return Ok(
                PersonName.parse(
                    name,
                    input_max=self._config.person_name_storage_max,
                    storage_max=self._config.person_name_storage_max,
                ).value
            )
        except DomainError as e:
            return Err(e)

    def validate_birthday(self, birthday: str | None) -> Result[str]:
        """Validate a ``DD/MM`` birthday; a missing birthday is an error here."""
        try:
            return Ok(str(Birthday.parse(birthday)))
        except DomainError as e:
            return Err(e)

    def validate_email(self, email: str | None) -> Result[str | None]:
        try:
            parsed = Email.parse(email, max_length=self._config.email_max)
        except DomainError as e:
            return Err(e)
        return Ok(str(parsed) if parsed is not None else None)

    # Registration and lookup

    def resolve_or_create(
        self,
        full_name: str | None,
        birthday: str | None = None,
        email: str | None = None,
    ) -> Result[Person]:
        """Return the person registered under ``full_name``, creating one if needed.

        All input is validated before the store is touched. Birthday and
        e-mail are optional; when given they must be valid even if the
        name turns out to be registered already.
        """
        try:
            name = self._parse_name(full_name)
            parsed_birthday = (
                Birthday.parse(birthday) if birthday is not None and birthday.strip() else None
            )
            parsed_email = Email.parse(email, max_length=self._config.email_max)
            normalized = self._normalizer.normalize_name(name.value)

            with self._uow.atomic():
                existing = self._people.find_by_normalized_name(normalized)
                if existing is not None:
                    return Ok(existing, f"{existing.full_name} is already registered.")

                person = self._people.add(
                    full_name=name.value,
                    normalized_full_name=normalized,
                    birthday_day_month=str(parsed_birthday) if parsed_birthday else None,
                    email=str(parsed_email) if parsed_email else None,
                )
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to register person %r", full_name)
            return Err(StorageFailure(f"Error registering person: {e}"))

        logger.info("Person registered: id=%s", person.id)
        return Ok(person, f"{person.full_name} registered successfully!")

    def get_person(self, person_id: int) -> Result[Person]:
        try:
            pid = PersonId.of(person_id)
            person = self._people.get(pid.value)
            if person is None:
                raise NotFoundError("Person", pid.value)
        except DomainError as e:
            return Err(e)
        except Exception as e:
            logger.exception("Failed to load person %s", person_id)
            return Err(StorageFailure(f"Error loading person: {e}"))
        return Ok(person)

    def search(self, term: str | None, max_results: int | None = None) -> Result[list[Person]]:
        """People whose normalized name contains the normalized term."""
        limit = self._config.person_search_limit if max_results is None else max_results
        return self._search(term, limit, prefix=False)

    def search_starts_with(self, term: str | None, max_results: int | None = None) -> Result[list[Person]]:
        limit = self._config.person_prefix_search_limit if max_results is None else max_results
        return self._search(term, limit, prefix=True)

    def _search(self, term: str | None, limit: int, *, prefix: bool) -> Result[list[Person]]:
        if term is None or len(term.strip()) < MIN_SEARCH_TERM_LENGTH or limit <= 0:
            return Ok([])
        normalized = self._normalizer.normalize_search_term(term)
        if not normalized:
            return Ok([])
        try:
            return Ok(
                self._people.search_by_normalized_name(normalized, prefix=prefix, limit=limit)
            )
        except Exception as e:
            logger.exception("Person search failed for %r", term)
            return Err(StorageFailure(f"Error searching people: {e}"))

    # Input helpers

    def should_show_counter(self, current_length: int) -> bool:
        return current_length > self._config.person_counter_show_at

    def character_counter(self, current_length: int) -> CharacterCounter:
        return character_counter(
            current_length,
            limit=self._config.person_name_input_max,
            warn_after=self._config.person_counter_warn_at,
        )
