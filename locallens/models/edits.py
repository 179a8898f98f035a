"""Typed edit operations applied to an itinerary working copy."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from locallens.models.itinerary import Activity

ActivityField = Literal[
    "time",
    "location",
    "description",
    "estimatedCost",
    "estimatedTime",
    "culturalInsight",
    "mapUrl",
]


class RemoveActivity(BaseModel):
    """Remove the activity at a position."""

    op: Literal["remove"] = "remove"
    day_index: int = Field(..., ge=0)
    activity_index: int = Field(..., ge=0)


class AddActivity(BaseModel):
    """Append a suggested activity to a day."""

    op: Literal["add"] = "add"
    activity: Activity
    target_day_index: int = Field(..., ge=0)


class ReorderActivity(BaseModel):
    """Swap an activity with its neighbour."""

    op: Literal["reorder"] = "reorder"
    day_index: int = Field(..., ge=0)
    activity_index: int = Field(..., ge=0)
    direction: Literal["up", "down"]


class MoveActivity(BaseModel):
    """Move an activity to the end of another day."""

    op: Literal["move"] = "move"
    day_index: int = Field(..., ge=0)
    activity_index: int = Field(..., ge=0)
    target_day_index: int = Field(..., ge=0)


class UpdateActivityField(BaseModel):
    """Replace one scalar field of an activity."""

    op: Literal["update"] = "update"
    day_index: int = Field(..., ge=0)
    activity_index: int = Field(..., ge=0)
    field: ActivityField
    value: str


ItineraryEdit = Annotated[
    RemoveActivity | AddActivity | ReorderActivity | MoveActivity | UpdateActivityField,
    Field(discriminator="op"),
]
