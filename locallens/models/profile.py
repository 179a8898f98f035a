"""User profile models."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

Role = Literal["traveler", "guide"]


class Profile(BaseModel):
    """Profile row keyed by the authenticated user id."""

    id: UUID
    role: Role = "traveler"
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: date | None = None
    updated_at: datetime | None = None

    @property
    def has_name(self) -> bool:
        return bool(self.first_name.strip())


class ProfileUpdate(BaseModel):
    """Body for PUT /profiles/me. A first name is mandatory."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    phone: str = Field("", max_length=40)
    date_of_birth: date | None = None
    role: Role | None = None
    email: str | None = None
