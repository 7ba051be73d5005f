"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import pytest

from attendance.domain import (
    Birthday,
    Email,
    Err,
    EventId,
    Ok,
    Person,
    PersonId,
    PersonName,
    VenueName,
    display_identifier,
    display_name,
)
from attendance.domain.errors import (
    ErrorCode,
    InvalidArgumentError,
    NotFoundError,
    ValidationError,
)


class TestPersonName:
    """Tests for PersonName value object."""

    def test_accepts_given_name_and_surname(self):
        """A two-token name is accepted and trimmed."""
        assert PersonName.parse("  Maria José Silva ").value == "Maria José Silva"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_rejects_blank(self, raw):
        with pytest.raises(ValidationError, match="required"):
            PersonName.parse(raw)

    def test_rejects_single_token(self):
        """A surname is mandatory."""
        with pytest.raises(ValidationError, match="surname"):
            PersonName.parse("Madonna")

    def test_rejects_short_surname(self):
        """The last token needs at least two characters."""
        with pytest.raises(ValidationError, match="Surname"):
            PersonName.parse("John S")

    def test_input_bound_is_enforced(self):
        """Names above the input bound name that bound in the message."""
        name = "Ana " + "b" * 197  # 201 chars
        with pytest.raises(ValidationError, match="Maximum 200"):
            PersonName.parse(name)

    def test_storage_bound_is_enforced_independently(self):
        """A longer input bound does not lift the storage bound."""
        name = "Ana " + "b" * 250
        with pytest.raises(ValidationError, match="storage limit \\(250"):
            PersonName.parse(name, input_max=300, storage_max=250)


class TestVenueName:
    """Tests for VenueName value object."""

    def test_trims(self):
        assert VenueName.parse("  Blue Bar ").value == "Blue Bar"

    @pytest.mark.parametrize("raw", ["A", " B "])
    def test_rejects_too_short(self, raw):
        with pytest.raises(ValidationError, match="Minimum 2"):
            VenueName.parse(raw)

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError, match="Maximum 30"):
            VenueName.parse("x" * 31)

    def test_accepts_bounds(self):
        assert VenueName.parse("ab").value == "ab"
        assert VenueName.parse("x" * 30).value == "x" * 30


class TestBirthday:
    """Tests for Birthday value object."""

    @pytest.mark.parametrize("raw, expected", [("22/07", "22/07"), ("5/3", "05/03"), ("29/02", "29/02")])
    def test_accepts_valid_dates(self, raw, expected):
        assert str(Birthday.parse(raw)) == expected

    @pytest.mark.parametrize(
        "raw, message",
        [
            ("30/02", "Invalid day for this month"),
            ("31/04", "Invalid day for this month"),
            ("31/06", "Invalid day for this month"),
            ("31/09", "Invalid day for this month"),
            ("31/11", "Invalid day for this month"),
            ("15/13", "Month must be between 1 and 12"),
            ("00/05", "Day must be between 1 and 31"),
            ("32/01", "Day must be between 1 and 31"),
            ("1-5", "DD/MM"),
            ("15/03/1990", "DD/MM"),
        ],
    )
    def test_rejects_invalid_dates(self, raw, message):
        with pytest.raises(ValidationError, match=message):
            Birthday.parse(raw)

    def test_missing_birthday_is_an_error(self):
        with pytest.raises(ValidationError, match="required"):
            Birthday.parse(None)


class TestEmail:
    """Tests for Email value object."""

    def test_blank_is_absent(self):
        assert Email.parse("") is None
        assert Email.parse(None) is None

    def test_accepts_simple_address(self):
        assert str(Email.parse(" ana@example.com ")) == "ana@example.com"

    @pytest.mark.parametrize("raw", ["ana", "ana@example", "a b@example.com", "a@b@c.com"])
    def test_rejects_bad_shape(self, raw):
        with pytest.raises(ValidationError, match="Invalid e-mail"):
            Email.parse(raw)

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError, match="too long"):
            Email.parse("a" * 95 + "@example.com")


class TestIds:
    """Tests for the identifier value objects."""

    @pytest.mark.parametrize("raw", [0, -1, None, "3", True, 1.5])
    def test_rejects_non_positive_or_non_int(self, raw):
        with pytest.raises(InvalidArgumentError):
            PersonId.of(raw)

    def test_accepts_positive_int(self):
        assert EventId.of(7).value == 7


class TestDisplayIdentifier:
    """Tests for display identifier derivation."""

    def test_birthday_used_without_email(self):
        person = Person(id=3, full_name="Maria José Silva", normalized_full_name="maria jose silva",
                        birthday_day_month="22/07")
        assert display_identifier(person) == "(22/07)"
        assert display_name(person) == "Maria José Silva (22/07)"

    def test_email_wins_and_is_lower_cased(self):
        person = Person(id=3, full_name="Ana Lima", normalized_full_name="ana lima",
                        birthday_day_month="01/01", email="Ana@Example.COM")
        assert display_identifier(person) == "ana@example.com"
        assert display_name(person) == "Ana Lima"

    def test_falls_back_to_id(self):
        person = Person(id=42, full_name="Ana Lima", normalized_full_name="ana lima")
        assert display_identifier(person) == "(ID: 42)"
        assert display_name(person) == "Ana Lima (ID: 42)"


class TestResult:
    """Tests for the tagged result type."""

    def test_ok_unwraps(self):
        result = Ok(5, "done")
        assert result.ok
        assert result.unwrap() == 5

    def test_err_exposes_code_and_raises_on_unwrap(self):
        result = Err(NotFoundError("Venue", 9))
        assert not result.ok
        assert result.code is ErrorCode.NOT_FOUND
        assert result.message == "Venue not found"
        with pytest.raises(NotFoundError):
            result.unwrap()
