"""Test member model validation and derived fields."""

from datetime import date

import pytest
from pydantic import ValidationError

from kinship.models import Gender, Member


class TestMember:
    """Tests for the Member model."""

    def test_death_before_birth_rejected(self):
        """Should reject a death date earlier than the birth date."""
        with pytest.raises(ValidationError):
            Member(tenant_id=1, first_name="X",
                   birth_date=date(2000, 1, 1), death_date=date(1999, 12, 31))

    def test_same_day_birth_and_death_allowed(self):
        """Should accept death on the day of birth."""
        member = Member(tenant_id=1, first_name="X",
                        birth_date=date(2000, 1, 1), death_date=date(2000, 1, 1))
        assert member.age == 0

    def test_gender_values(self):
        """Should accept the enumerated genders only."""
        assert Member(tenant_id=1, first_name="X", gender="other").gender == Gender.OTHER
        assert Member(tenant_id=1, first_name="X").gender == Gender.UNSPECIFIED
        with pytest.raises(ValidationError):
            Member(tenant_id=1, first_name="X", gender="robot")

    def test_names(self):
        """Should build full and display names."""
        member = Member(tenant_id=1, first_name="Karla", last_name="Walker")
        assert member.full_name == "Karla Walker"
        assert member.display_name == "Karla Walker"

        nick = Member(tenant_id=1, first_name="Karla", nickname="KJ")
        assert nick.full_name == "Karla"
        assert nick.display_name == "KJ"

    def test_age_of_deceased_stops_at_death(self):
        """Should measure age up to the death date."""
        member = Member(tenant_id=1, first_name="X",
                        birth_date=date(1900, 6, 15), death_date=date(1980, 6, 14))
        assert member.age == 79

    def test_age_unknown_without_birth_date(self):
        assert Member(tenant_id=1, first_name="X").age is None
