"""Helper functions for UI - LocalLens API client and view-state helpers.

Nothing in here renders anything: ``ui/app.py`` draws whatever these helpers
decide, so the rules (optimistic delete, merge selection, booking actions)
can be tested without Streamlit.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEV_USER_ID = "00000000-0000-0000-0000-000000000002"
MIN_MERGE_SELECTION = 2


def get_auth_header(user_id: str = DEV_USER_ID) -> dict[str, str]:
    """Get auth header for API calls (bearer token is the user id)."""
    return {"Authorization": f"Bearer {user_id}"}


class LocalLensClient:
    """Thin synchronous client for the LocalLens HTTP API.

    Every method raises ``httpx.HTTPStatusError`` on a non-2xx response.
    """

    def __init__(
        self,
        backend_url: str,
        user_id: str = DEV_USER_ID,
        http: httpx.Client | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._http = http or httpx.Client(base_url=backend_url, timeout=timeout)
        self._headers = get_auth_header(user_id)
        self.user_id = user_id

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._http.request(method, path, headers=self._headers, **kwargs)
        response.raise_for_status()
        if response.status_code == 204 or not response.content:
            return None
        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.content

    # Planner

    def generate(
        self,
        destination: str,
        duration: int,
        themes: list[str],
        starting_location: str,
        hotel_stars: int = 3,
        travelers_count: int = 1,
    ) -> dict[str, Any]:
        """Generate an itinerary from the planner form."""
        return self._request(
            "POST",
            "/planner/generate",
            json={
                "destination": destination,
                "duration": duration,
                "themes": themes,
                "starting_location": starting_location,
                "hotel_stars": hotel_stars,
                "travelers_count": travelers_count,
            },
        )

    def generate_from_prompt(self, prompt: str) -> dict[str, Any]:
        return self._request("POST", "/planner/prompt", json={"prompt": prompt})

    def merge(self, itineraries: list[dict[str, Any]]) -> dict[str, Any]:
        return self._request("POST", "/planner/merge", json={"itineraries": itineraries})

    def suggestions(self, itinerary: dict[str, Any], query: str | None = None) -> list[dict[str, Any]]:
        return self._request(
            "POST", "/planner/suggestions", json={"itinerary": itinerary, "query": query}
        )

    def hotels(self, itinerary: dict[str, Any], hotel_stars: int = 3) -> list[dict[str, Any]]:
        return self._request(
            "POST", "/planner/hotels", json={"itinerary": itinerary, "hotel_stars": hotel_stars}
        )

    def apply_edits(self, itinerary: dict[str, Any], edits: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply positional edits to a working copy server-side."""
        return self._request("POST", "/planner/edits", json={"itinerary": itinerary, "edits": edits})

    # Saved itineraries

    def save(self, itinerary: dict[str, Any], record_id: str | None = None) -> dict[str, Any]:
        return self._request("POST", "/itineraries", json={"id": record_id, "itinerary": itinerary})

    def list_recent(self) -> list[dict[str, Any]]:
        return self._request("GET", "/itineraries")

    def list_all(self) -> list[dict[str, Any]]:
        return self._request("GET", "/itineraries/all")

    def delete(self, record_id: str) -> None:
        self._request("DELETE", f"/itineraries/{record_id}")

    # Bookings and messages

    def bookings(self, role: str = "traveler") -> list[dict[str, Any]]:
        return self._request("GET", "/bookings", params={"role": role})

    def book_guide(self, guide_id: str) -> dict[str, Any]:
        return self._request("POST", "/bookings", json={"guide_id": guide_id})

    def update_booking(self, booking_id: str, status: str) -> dict[str, Any]:
        return self._request("PATCH", f"/bookings/{booking_id}", json={"status": status})

    def messages(self, booking_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/bookings/{booking_id}/messages")

    def send_message(
        self, booking_id: str, content: str, itinerary: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"content": content, "message_type": "text"}
        if itinerary is not None:
            body = {"content": content, "message_type": "itinerary", "metadata": itinerary}
        return self._request("POST", f"/bookings/{booking_id}/messages", json=body)

    # Guides and profile

    def guides(self, search: str = "") -> list[dict[str, Any]]:
        return self._request("GET", "/guides", params={"search": search})

    def profile(self) -> dict[str, Any] | None:
        """The caller's profile, or None if it was never filled in."""
        try:
            return self._request("GET", "/profiles/me")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

    def save_profile(self, **fields: Any) -> dict[str, Any]:
        return self._request("PUT", "/profiles/me", json=fields)

    # Concierge

    def chat(self, message: str, context: str = "general travel in India") -> str:
        return self._request("POST", "/concierge/chat", json={"message": message, "context": context})[
            "reply"
        ]

    def translate(self, text: str, target_language: str) -> str:
        result = self._request(
            "POST", "/concierge/translate", json={"text": text, "target_language": target_language}
        )
        return result["translation"]

    def speech(self, text: str) -> bytes | None:
        return self._request("POST", "/concierge/speech", json={"text": text})


def error_message(error: Exception) -> str:
    """Human-readable message for a failed API call."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            detail = error.response.json().get("detail")
        except ValueError:
            detail = None
        if isinstance(detail, str):
            return detail
        return f"Request failed ({error.response.status_code})"
    return str(error) or type(error).__name__


@dataclass
class HistoryState:
    """Saved-plan list shown on the history page, with merge selection."""

    plans: list[dict[str, Any]] = field(default_factory=list)
    selected: set[str] = field(default_factory=set)
    error: str | None = None

    def toggle(self, plan_id: str) -> None:
        if plan_id in self.selected:
            self.selected.discard(plan_id)
        else:
            self.selected.add(plan_id)

    def delete_plan(self, plan_id: str, delete: Callable[[str], None]) -> bool:
        """Remove a plan optimistically, then ask the server to delete it.

        If the server call fails the previous list (and selection) is restored
        exactly, with the plan back at its original position, and the error
        message is kept on ``self.error``.

        Returns:
            True if the server confirmed the delete
        """
        previous_plans = list(self.plans)
        previous_selected = set(self.selected)

        self.plans = [p for p in self.plans if str(p["id"]) != plan_id]
        self.selected.discard(plan_id)
        self.error = None

        try:
            delete(plan_id)
        except Exception as e:
            logger.warning(f"[history] delete {plan_id} failed, restoring: {e}")
            self.plans = previous_plans
            self.selected = previous_selected
            self.error = f"Failed to delete plan. Error: {error_message(e)}"
            return False

        return True

    def selected_itineraries(self) -> list[dict[str, Any]]:
        """Itinerary payloads of the selected plans, in list order."""
        return [p["itinerary"] for p in self.plans if str(p["id"]) in self.selected]

    def merge_selection(
        self, merge: Callable[[list[dict[str, Any]]], dict[str, Any]]
    ) -> dict[str, Any] | None:
        """Merge the selected plans. Nothing is sent with fewer than two selected."""
        chosen = self.selected_itineraries()
        if len(chosen) < MIN_MERGE_SELECTION:
            self.error = f"Please select at least {MIN_MERGE_SELECTION} itineraries to merge."
            return None

        self.error = None
        try:
            return merge(chosen)
        except Exception as e:
            logger.warning(f"[history] merge failed: {e}")
            self.error = error_message(e)
            return None


def booking_actions(booking: dict[str, Any], viewer_id: str) -> list[str]:
    """Approve/reject buttons to show: only for the guide, only while pending."""
    if booking.get("status") != "pending" or str(booking.get("guide_id")) != viewer_id:
        return []
    return ["approved", "rejected"]


def can_book_guide(guide_id: str, viewer_id: str) -> bool:
    """Travelers cannot book themselves."""
    return guide_id != viewer_id


def activity_rows(itinerary: dict[str, Any]) -> list[tuple[int, int, dict[str, Any]]]:
    """Flatten days into ``(day_index, activity_index, activity)`` rows for editing."""
    rows: list[tuple[int, int, dict[str, Any]]] = []
    for day_index, day in enumerate(itinerary.get("days") or []):
        for activity_index, activity in enumerate(day.get("activities") or []):
            rows.append((day_index, activity_index, activity))
    return rows
