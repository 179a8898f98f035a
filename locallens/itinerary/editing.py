"""Itinerary editing - positional mutations on a working copy.

Every operation is a pure function: it deep-copies the itinerary it is given,
applies one edit and returns the copy. Callers pass the latest copy each time,
so an edit is never computed against a snapshot taken before an earlier edit.
Positions are (day index, activity index), both zero-based.
"""

from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic.alias_generators import to_camel

from locallens.errors import StaleEditError, ValidationFailure
from locallens.models.edits import (
    AddActivity,
    ItineraryEdit,
    MoveActivity,
    RemoveActivity,
    ReorderActivity,
    UpdateActivityField,
)
from locallens.models.itinerary import Activity, DayItinerary, HotelRecommendation, Itinerary

DEFAULT_ACTIVITY_TIME = "10:00"

_EDITABLE_FIELDS = {name: name for name in Activity.model_fields} | {
    to_camel(name): name for name in Activity.model_fields
}


def _day(itinerary: Itinerary, day_index: int) -> DayItinerary:
    if not 0 <= day_index < len(itinerary.days):
        raise StaleEditError(
            f"Day index {day_index} is out of range for {len(itinerary.days)} day(s)"
        )
    return itinerary.days[day_index]


def _check_activity(day: DayItinerary, day_index: int, activity_index: int) -> None:
    if not 0 <= activity_index < len(day.activities):
        raise StaleEditError(
            f"Activity index {activity_index} is out of range for day index {day_index} "
            f"({len(day.activities)} activities)"
        )


def remove_activity(
    itinerary: Itinerary | None, day_index: int, activity_index: int
) -> Itinerary | None:
    """Remove the activity at ``(day_index, activity_index)``.

    No-op when there is no itinerary or it has no days.

    Raises:
        StaleEditError: If the position does not exist in this copy
    """
    if itinerary is None or not itinerary.days:
        return itinerary

    updated = itinerary.model_copy(deep=True)
    day = _day(updated, day_index)
    _check_activity(day, day_index, activity_index)
    del day.activities[activity_index]
    return updated


def add_activity_from_suggestion(
    itinerary: Itinerary | None, activity: Activity, target_day_index: int
) -> Itinerary | None:
    """Append a suggested activity to the end of the target day.

    A blank ``time`` defaults to 10:00. The suggestion itself is not modified.
    """
    if itinerary is None or not itinerary.days:
        return itinerary

    updated = itinerary.model_copy(deep=True)
    day = _day(updated, target_day_index)
    new_activity = activity.model_copy(
        update={"time": activity.time.strip() or DEFAULT_ACTIVITY_TIME}
    )
    day.activities.append(new_activity)
    return updated


def reorder_activity(
    itinerary: Itinerary | None,
    day_index: int,
    activity_index: int,
    direction: Literal["up", "down"],
) -> Itinerary | None:
    """Swap an activity with its neighbour. No-op at either end of the day."""
    if itinerary is None or not itinerary.days:
        return itinerary
    if direction not in ("up", "down"):
        raise ValidationFailure(f"Unknown direction: {direction!r}")

    updated = itinerary.model_copy(deep=True)
    day = _day(updated, day_index)
    _check_activity(day, day_index, activity_index)

    neighbour = activity_index - 1 if direction == "up" else activity_index + 1
    if not 0 <= neighbour < len(day.activities):
        return updated

    acts = day.activities
    acts[activity_index], acts[neighbour] = acts[neighbour], acts[activity_index]
    return updated


def move_activity_to_day(
    itinerary: Itinerary | None, day_index: int, activity_index: int, target_day_index: int
) -> Itinerary | None:
    """Move an activity to the end of another day. No-op for the same day."""
    if itinerary is None or not itinerary.days or day_index == target_day_index:
        return itinerary

    updated = itinerary.model_copy(deep=True)
    source = _day(updated, day_index)
    target = _day(updated, target_day_index)
    _check_activity(source, day_index, activity_index)
    target.activities.append(source.activities.pop(activity_index))
    return updated


def update_activity_field(
    itinerary: Itinerary | None, day_index: int, activity_index: int, field: str, value: str
) -> Itinerary | None:
    """Replace one scalar field of an activity, leaving the rest untouched.

    ``field`` may be given as the wire name (``estimatedCost``) or the
    attribute name (``estimated_cost``).
    """
    if itinerary is None or not itinerary.days:
        return itinerary

    attr = _EDITABLE_FIELDS.get(field)
    if attr is None:
        raise ValidationFailure(f"Unknown activity field: {field!r}")

    updated = itinerary.model_copy(deep=True)
    day = _day(updated, day_index)
    _check_activity(day, day_index, activity_index)
    day.activities[activity_index] = day.activities[activity_index].model_copy(
        update={attr: value}
    )
    return updated


def apply_edit(itinerary: Itinerary | None, edit: ItineraryEdit) -> Itinerary | None:
    """Dispatch one typed edit."""
    if isinstance(edit, RemoveActivity):
        return remove_activity(itinerary, edit.day_index, edit.activity_index)
    if isinstance(edit, AddActivity):
        return add_activity_from_suggestion(itinerary, edit.activity, edit.target_day_index)
    if isinstance(edit, ReorderActivity):
        return reorder_activity(itinerary, edit.day_index, edit.activity_index, edit.direction)
    if isinstance(edit, MoveActivity):
        return move_activity_to_day(
            itinerary, edit.day_index, edit.activity_index, edit.target_day_index
        )
    if isinstance(edit, UpdateActivityField):
        return update_activity_field(
            itinerary, edit.day_index, edit.activity_index, edit.field, edit.value
        )
    raise ValidationFailure(f"Unsupported edit: {type(edit).__name__}")


def apply_edits(itinerary: Itinerary | None, edits: Sequence[ItineraryEdit]) -> Itinerary | None:
    """Apply edits in order, each against the result of the previous one."""
    current = itinerary
    for edit in edits:
        current = apply_edit(current, edit)
    return current


def _normalize(text: str) -> str:
    return text.strip().lower()


def planned_locations(itinerary: Itinerary | None) -> set[str]:
    """Normalized locations of every activity across all days."""
    if itinerary is None:
        return set()
    return {_normalize(a.location) for day in itinerary.days for a in day.activities}


def unique_extras(itinerary: Itinerary | None, suggestions: Iterable[Activity]) -> list[Activity]:
    """Drop suggestions whose location is already planned (case-insensitive).

    Pure: neither argument is modified.
    """
    taken = planned_locations(itinerary)
    return [s for s in suggestions if _normalize(s.location) not in taken]


def unique_hotels(
    itinerary: Itinerary | None, hotels: Iterable[HotelRecommendation]
) -> list[HotelRecommendation]:
    """Drop hotels already recommended on the itinerary, keyed on name."""
    taken = (
        {_normalize(h.name) for h in itinerary.hotel_recommendations} if itinerary else set()
    )
    result: list[HotelRecommendation] = []
    for hotel in hotels:
        key = _normalize(hotel.name)
        if key in taken:
            continue
        taken.add(key)
        result.append(hotel)
    return result
