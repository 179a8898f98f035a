"""Guide marketplace models."""

from uuid import UUID

from pydantic import BaseModel, Field


class Guide(BaseModel):
    """Guide profile. ``verified`` is set by reviewers, never by the guide."""

    id: UUID
    name: str
    location: str
    bio: str = ""
    specialty: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    price_per_day: float = Field(0, ge=0)
    experience_years: str | None = None
    rating: float = Field(4.5, ge=0, le=5)
    verified: bool = False
    image_url: str | None = None
    verification_document_url: str | None = None

    def matches(self, term: str) -> bool:
        """Marketplace search: location or any specialty contains ``term``."""
        needle = term.strip().lower()
        if not needle:
            return True
        return needle in self.location.lower() or any(needle in s.lower() for s in self.specialty)


class GuideApplication(BaseModel):
    """Body for applying as a guide."""

    name: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=200)
    bio: str = Field("", max_length=4000)
    specialty: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    price_per_day: float = Field(0, ge=0)
    experience_years: str | None = Field(None, pattern=r"^(1-3|3-7|7\+) Years$")


class GuideUpdate(BaseModel):
    """Partial guide profile update. Deliberately has no ``verified`` field."""

    name: str | None = Field(None, min_length=1, max_length=200)
    location: str | None = Field(None, min_length=1, max_length=200)
    bio: str | None = Field(None, max_length=4000)
    specialty: list[str] | None = None
    languages: list[str] | None = None
    price_per_day: float | None = Field(None, ge=0)
    experience_years: str | None = Field(None, pattern=r"^(1-3|3-7|7\+) Years$")
