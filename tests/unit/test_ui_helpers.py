"""Unit tests for UI helper functions."""

from unittest.mock import MagicMock

import httpx
import pytest

from ui.helpers import (
    HistoryState,
    LocalLensClient,
    activity_rows,
    booking_actions,
    can_book_guide,
    error_message,
    get_auth_header,
)


def plan(plan_id: str, destination: str) -> dict:
    return {"id": plan_id, "itinerary": {"destination": destination, "duration": 1, "days": []}}


@pytest.fixture
def history() -> HistoryState:
    return HistoryState(plans=[plan("a", "Agra"), plan("b", "Goa"), plan("c", "Kochi")])


def http_error(status_code: int, body: dict) -> httpx.HTTPStatusError:
    request = httpx.Request("DELETE", "http://api/itineraries/b")
    response = httpx.Response(status_code, json=body, request=request)
    return httpx.HTTPStatusError("failed", request=request, response=response)


def test_get_auth_header() -> None:
    assert get_auth_header("u-1") == {"Authorization": "Bearer u-1"}


def test_delete_plan_success_removes_plan(history: HistoryState) -> None:
    delete = MagicMock()
    history.toggle("b")

    assert history.delete_plan("b", delete) is True

    delete.assert_called_once_with("b")
    assert [p["id"] for p in history.plans] == ["a", "c"]
    assert history.selected == set()
    assert history.error is None


def test_delete_plan_failure_restores_original_position(history: HistoryState) -> None:
    """Failed delete puts the plan back where it was and keeps the error."""
    history.toggle("b")
    delete = MagicMock(side_effect=http_error(403, {"detail": "permission denied"}))

    assert history.delete_plan("b", delete) is False

    assert [p["id"] for p in history.plans] == ["a", "b", "c"]
    assert history.selected == {"b"}
    assert history.error == "Failed to delete plan. Error: permission denied"


def test_merge_requires_two_selected(history: HistoryState) -> None:
    merge = MagicMock()
    history.toggle("a")

    assert history.merge_selection(merge) is None

    merge.assert_not_called()
    assert history.error == "Please select at least 2 itineraries to merge."


def test_merge_sends_selected_in_list_order(history: HistoryState) -> None:
    merge = MagicMock(return_value={"destination": "Kochi + Agra", "isMerged": True})
    history.toggle("c")
    history.toggle("a")

    result = history.merge_selection(merge)

    assert result == {"destination": "Kochi + Agra", "isMerged": True}
    sent = merge.call_args.args[0]
    assert [i["destination"] for i in sent] == ["Agra", "Kochi"]
    assert history.error is None


def test_merge_failure_sets_error(history: HistoryState) -> None:
    history.toggle("a")
    history.toggle("b")
    merge = MagicMock(side_effect=http_error(502, {"detail": "gateway timed out"}))

    assert history.merge_selection(merge) is None
    assert history.error == "gateway timed out"


def test_toggle_selects_and_deselects(history: HistoryState) -> None:
    history.toggle("a")
    history.toggle("a")
    assert history.selected == set()


def test_booking_actions_only_for_pending_guide() -> None:
    booking = {"id": "bk", "guide_id": "g", "user_id": "t", "status": "pending"}

    assert booking_actions(booking, "g") == ["approved", "rejected"]
    assert booking_actions(booking, "t") == []
    assert booking_actions({**booking, "status": "approved"}, "g") == []


def test_can_book_guide() -> None:
    assert can_book_guide("g", "t") is True
    assert can_book_guide("g", "g") is False


def test_activity_rows() -> None:
    itinerary = {
        "days": [
            {"day": 1, "activities": [{"location": "A"}, {"location": "B"}]},
            {"day": 2, "activities": []},
            {"day": 3, "activities": [{"location": "C"}]},
        ]
    }

    rows = activity_rows(itinerary)

    assert [(d, a, act["location"]) for d, a, act in rows] == [
        (0, 0, "A"),
        (0, 1, "B"),
        (2, 0, "C"),
    ]
    assert activity_rows({}) == []


def test_error_message_fallbacks() -> None:
    assert error_message(http_error(500, {"detail": [{"msg": "x"}]})) == "Request failed (500)"
    assert error_message(RuntimeError("offline")) == "offline"


def test_client_sends_auth_and_parses_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer u-1"
        assert request.url.path == "/bookings"
        assert request.url.params["role"] == "guide"
        return httpx.Response(200, json=[{"id": "bk"}])

    http = httpx.Client(base_url="http://api", transport=httpx.MockTransport(handler))
    client = LocalLensClient("http://api", user_id="u-1", http=http)

    assert client.bookings(role="guide") == [{"id": "bk"}]


def test_client_profile_missing_is_none() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"detail": "nope"}))
    http = httpx.Client(base_url="http://api", transport=transport)

    assert LocalLensClient("http://api", http=http).profile() is None


def test_client_delete_raises_on_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"detail": "boom"}))
    http = httpx.Client(base_url="http://api", transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        LocalLensClient("http://api", http=http).delete("abc")
