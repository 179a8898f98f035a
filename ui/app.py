"""Streamlit UI for LocalLens - planner, history, guides and concierge.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import os  # noqa: E402

import streamlit as st  # noqa: E402

from ui.helpers import (  # noqa: E402
    DEV_USER_ID,
    HistoryState,
    LocalLensClient,
    activity_rows,
    booking_actions,
    can_book_guide,
    error_message,
)

# Configuration
BACKEND_URL = os.environ.get("LOCALLENS_BACKEND_URL", "http://localhost:8000")
USER_ID = os.environ.get("LOCALLENS_USER_ID", DEV_USER_ID)

THEMES = ["Heritage", "Spiritual", "Food", "Adventure", "Nature", "Art", "Shopping", "Nightlife"]

st.set_page_config(page_title="LocalLens", page_icon="🧭", layout="wide")

client = LocalLensClient(BACKEND_URL, user_id=USER_ID)

# Initialize session state
if "itinerary" not in st.session_state:
    st.session_state.itinerary = None
if "record_id" not in st.session_state:
    st.session_state.record_id = None
if "extras" not in st.session_state:
    st.session_state.extras = []
if "history" not in st.session_state:
    st.session_state.history = HistoryState()
if "error" not in st.session_state:
    st.session_state.error = None


def _apply(edit: dict) -> None:
    """Apply one edit to the current working copy."""
    try:
        st.session_state.itinerary = client.apply_edits(st.session_state.itinerary, [edit])
        st.session_state.error = None
    except Exception as e:
        st.session_state.error = error_message(e)


st.title("🧭 LocalLens")
page = st.sidebar.radio("Go to", ["Planner", "History", "Guides", "Bookings", "Concierge"])

# =============================================================================
# PLANNER
# =============================================================================
if page == "Planner":
    col_form, col_plan = st.columns([1, 2])

    with col_form:
        st.subheader("📋 Plan a trip")
        with st.form("trip_form"):
            destination = st.text_input("Destination *", value="Jaipur")
            starting_location = st.text_input("Starting from *", value="Delhi")
            duration = st.number_input("Days", min_value=1, max_value=30, value=3)
            themes = st.multiselect("Themes *", THEMES, default=["Heritage"])
            hotel_stars = st.slider("Hotel stars", 1, 5, 3)
            travelers = st.number_input("Travelers", min_value=1, max_value=20, value=2)
            submitted = st.form_submit_button("🚀 Generate", type="primary", use_container_width=True)

        if submitted:
            try:
                st.session_state.itinerary = client.generate(
                    destination=destination.strip(),
                    duration=int(duration),
                    themes=themes,
                    starting_location=starting_location.strip(),
                    hotel_stars=hotel_stars,
                    travelers_count=int(travelers),
                )
                st.session_state.record_id = None
                st.session_state.extras = []
                st.session_state.error = None
            except Exception as e:
                st.session_state.error = error_message(e)

        prompt = st.text_area("…or describe your trip")
        if st.button("✨ Plan from description") and prompt.strip():
            try:
                st.session_state.itinerary = client.generate_from_prompt(prompt)
                st.session_state.record_id = None
                st.session_state.error = None
            except Exception as e:
                st.session_state.error = error_message(e)

        if st.session_state.error:
            st.error(f"❌ {st.session_state.error}")

    with col_plan:
        itinerary = st.session_state.itinerary
        if not itinerary:
            st.info("👈 Fill out the form to generate an itinerary.")
        else:
            label = " (merged)" if itinerary.get("isMerged") else ""
            st.subheader(f"🗺️ {itinerary['destination']} · {itinerary['duration']} days{label}")

            if st.button("💾 Save plan"):
                try:
                    saved = client.save(itinerary, st.session_state.record_id)
                    st.session_state.record_id = saved["id"]
                    st.success("Saved")
                except Exception as e:
                    st.error(f"Failed to save: {error_message(e)}")

            day_count = len(itinerary.get("days") or [])
            last_day = -1
            for day_index, activity_index, activity in activity_rows(itinerary):
                if day_index != last_day:
                    st.markdown(f"#### Day {day_index + 1}")
                    last_day = day_index
                cols = st.columns([6, 1, 1, 1, 2])
                cols[0].markdown(f"**{activity.get('time', '')}** {activity['location']}")
                cols[0].caption(activity.get("description", ""))
                key = f"{day_index}-{activity_index}"
                if cols[1].button("⬆", key=f"up-{key}"):
                    _apply({"op": "reorder", "day_index": day_index, "activity_index": activity_index, "direction": "up"})
                    st.rerun()
                if cols[2].button("⬇", key=f"down-{key}"):
                    _apply({"op": "reorder", "day_index": day_index, "activity_index": activity_index, "direction": "down"})
                    st.rerun()
                if cols[3].button("🗑", key=f"rm-{key}"):
                    _apply({"op": "remove", "day_index": day_index, "activity_index": activity_index})
                    st.rerun()
                target = cols[4].selectbox(
                    "Move to", list(range(1, day_count + 1)), index=day_index, key=f"mv-{key}"
                )
                if cols[4].button("Move", key=f"mvb-{key}") and target - 1 != day_index:
                    _apply({"op": "move", "day_index": day_index, "activity_index": activity_index, "target_day_index": target - 1})
                    st.rerun()

            st.divider()
            st.markdown("#### 🔎 Discover more")
            query = st.text_input("Looking for something specific?")
            if st.button("Find hidden spots"):
                try:
                    st.session_state.extras = client.suggestions(itinerary, query or None)
                except Exception as e:
                    st.error(error_message(e))

            for i, extra in enumerate(st.session_state.extras):
                cols = st.columns([6, 2])
                cols[0].markdown(f"**{extra['location']}** - {extra.get('description', '')}")
                day = cols[1].selectbox("Add to day", list(range(1, day_count + 1)), key=f"extra-day-{i}")
                if cols[1].button("Add", key=f"extra-add-{i}"):
                    _apply({"op": "add", "activity": extra, "target_day_index": day - 1})
                    st.session_state.extras.pop(i)
                    st.rerun()

            st.markdown("#### 🏨 Hotels")
            for hotel in itinerary.get("hotelRecommendations", []):
                st.markdown(f"- **{hotel['name']}** · {hotel.get('estimatedPricePerNight', '')}")

# =============================================================================
# HISTORY
# =============================================================================
elif page == "History":
    history: HistoryState = st.session_state.history
    st.subheader("📚 My recent plans")

    if st.button("🔄 Refresh") or not history.plans:
        try:
            history.plans = client.list_recent()
        except Exception as e:
            history.error = error_message(e)

    for plan in history.plans:
        plan_id = str(plan["id"])
        cols = st.columns([1, 6, 1, 1])
        checked = cols[0].checkbox("", value=plan_id in history.selected, key=f"sel-{plan_id}")
        if checked != (plan_id in history.selected):
            history.toggle(plan_id)
        data = plan["itinerary"]
        cols[1].markdown(f"**{data['destination']}** · {data['duration']} days · {data.get('theme', '')}")
        if cols[2].button("Open", key=f"open-{plan_id}"):
            st.session_state.itinerary = data
            st.session_state.record_id = plan_id
        if cols[3].button("🗑", key=f"del-{plan_id}"):
            history.delete_plan(plan_id, client.delete)
            st.rerun()

    if st.button("🔀 Merge selected"):
        merged = history.merge_selection(client.merge)
        if merged is not None:
            st.session_state.itinerary = merged
            st.session_state.record_id = None
            st.success("Merged - open the Planner to review it.")

    if history.error:
        st.error(history.error)

# =============================================================================
# GUIDES
# =============================================================================
elif page == "Guides":
    st.subheader("🧑‍🏫 Local guides")
    search = st.text_input("Search by location or specialty")
    try:
        guides = client.guides(search)
    except Exception as e:
        guides = []
        st.error(error_message(e))

    for guide in guides:
        with st.container(border=True):
            st.markdown(f"**{guide['name']}** · {guide['location']} · ⭐ {guide['rating']}")
            st.caption(", ".join(guide.get("specialty", [])))
            st.write(guide.get("bio", ""))
            if can_book_guide(str(guide["id"]), client.user_id):
                if st.button("Book", key=f"book-{guide['id']}"):
                    try:
                        client.book_guide(str(guide["id"]))
                        st.success("Request sent")
                    except Exception as e:
                        st.error(error_message(e))

# =============================================================================
# BOOKINGS
# =============================================================================
elif page == "Bookings":
    role = st.radio("View as", ["traveler", "guide"], horizontal=True)
    try:
        bookings = client.bookings(role)
    except Exception as e:
        bookings = []
        st.error(error_message(e))

    for booking in bookings:
        with st.container(border=True):
            other = booking.get("guide") if role == "traveler" else booking.get("traveler")
            name = (other or {}).get("name") or (other or {}).get("first_name") or "Unknown"
            st.markdown(f"**{name}** · status: `{booking['status']}`")
            for action in booking_actions(booking, client.user_id):
                if st.button(action.title(), key=f"{action}-{booking['id']}"):
                    try:
                        client.update_booking(str(booking["id"]), action)
                    except Exception as e:
                        st.error(error_message(e))
                    st.rerun()

# =============================================================================
# CONCIERGE
# =============================================================================
elif page == "Concierge":
    st.subheader("💬 Concierge")
    message = st.text_input("Ask anything about your trip")
    if st.button("Ask") and message.strip():
        try:
            st.markdown(client.chat(message))
        except Exception as e:
            st.error(error_message(e))

    st.divider()
    phrase = st.text_input("Translate a phrase")
    language = st.selectbox("Into", ["Hindi", "Tamil", "Bengali", "Marathi", "Telugu"])
    if st.button("Translate") and phrase.strip():
        try:
            translation = client.translate(phrase, language)
            st.markdown(f"**{translation}**")
            audio = client.speech(translation)
            if audio:
                st.audio(audio, format="audio/mpeg")
        except Exception as e:
            st.error(error_message(e))
