"""Data models for family members."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Gender(str, Enum):
    """Recorded gender of a family member."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNSPECIFIED = "unspecified"


class Member(BaseModel):
    """Family member node.

    Owned by the surrounding application; the graph engine only reads it.
    """

    id: Optional[int] = None
    tenant_id: int
    first_name: str
    last_name: Optional[str] = None
    nickname: Optional[str] = None
    gender: Gender = Gender.UNSPECIFIED
    is_living: bool = True
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def _check_dates(self) -> "Member":
        if self.birth_date and self.death_date and self.death_date < self.birth_date:
            raise ValueError("death_date must not be before birth_date")
        return self

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name or ''}".strip()

    @property
    def display_name(self) -> str:
        """Nickname when set, otherwise the full name."""
        return self.nickname or self.full_name

    @property
    def age(self) -> Optional[int]:
        """Whole years from birth until death (or today)."""
        if not self.birth_date:
            return None
        end = self.death_date or date.today()
        return end.year - self.birth_date.year - (
            (end.month, end.day) < (self.birth_date.month, self.birth_date.day)
        )
