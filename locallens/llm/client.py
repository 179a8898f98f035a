"""AI synthesis gateway with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides a deterministic stub when no key is present for dev and testing.

Every call is a single attempt. Failures (transport errors, empty or
malformed JSON) are logged here and raised as ``GatewayError``; callers
surface them to the user.
"""

import json
import logging
import time
from typing import Protocol, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from locallens.config import get_settings
from locallens.errors import GatewayError
from locallens.models.itinerary import (
    Activity,
    ActivitySuggestions,
    DayItinerary,
    HotelRecommendation,
    HotelSuggestions,
    Itinerary,
    TravelOption,
)
from locallens.models.planning import TripRequest
from locallens.utils.logging import StructuredGatewayLogger
from locallens.utils.metrics import PrometheusGatewayMetrics

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ItineraryGateway(Protocol):
    """Protocol for AI gateway implementations."""

    async def generate_itinerary(self, request: TripRequest) -> Itinerary:
        """Generate an itinerary from structured planner parameters."""
        ...

    async def generate_itinerary_from_prompt(self, prompt: str) -> Itinerary:
        """Generate an itinerary from a free-text description of the trip."""
        ...

    async def merge_itineraries(self, itineraries: list[Itinerary]) -> Itinerary:
        """Combine several itineraries into one sequential plan."""
        ...

    async def suggest_activities(self, destination: str, query: str | None = None) -> list[Activity]:
        """Discover additional activities for a destination."""
        ...

    async def refresh_hotels(
        self, destination: str, hotel_stars: int, travelers_count: int
    ) -> list[HotelRecommendation]:
        """Suggest hotels for a destination."""
        ...

    async def chat(self, message: str, context: str) -> str:
        """Concierge chat reply."""
        ...

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text into the target language."""
        ...

    async def synthesize_speech(self, text: str) -> bytes:
        """Render text as spoken audio (mp3 bytes)."""
        ...


def _place_name(destination: str) -> str:
    """'Agra (Taj Mahal)' -> 'Agra'."""
    return destination.split(" (")[0].strip() or destination


def _stub_itinerary(
    *,
    destination: str,
    duration: int,
    theme: str,
    starting_location: str,
    travelers_count: int,
    hotel_stars: int = 3,
) -> Itinerary:
    place = _place_name(destination)
    days = [
        DayItinerary(
            day=d,
            activities=[
                Activity(
                    time="09:00",
                    location=f"{place} Heritage Walk {d}",
                    description=f"Guided morning walk through old {place}.",
                    estimated_cost="₹500",
                    estimated_time="3 hours",
                    cultural_insight=f"Stories of {place}'s history.",
                ),
                Activity(
                    time="16:00",
                    location=f"{place} Bazaar {d}",
                    description="Evening at the local market.",
                    estimated_cost="₹300",
                    estimated_time="2 hours",
                    cultural_insight="Local crafts and street food.",
                ),
            ],
        )
        for d in range(1, duration + 1)
    ]
    return Itinerary(
        destination=destination,
        duration=duration,
        theme=theme,
        starting_location=starting_location,
        travelers_count=travelers_count,
        days=days,
        travel_options=[
            TravelOption(
                mode="Train",
                description=f"Express train from {starting_location} to {place}.",
                estimated_cost=f"₹{1500 * travelers_count}",
                duration="8 hours",
            ),
            TravelOption(
                mode="Bus",
                description=f"Overnight sleeper bus from {starting_location}.",
                estimated_cost=f"₹{900 * travelers_count}",
                duration="11 hours",
            ),
        ],
        hotel_recommendations=_stub_hotels(place, hotel_stars),
    )


def _stub_hotels(place: str, hotel_stars: int) -> list[HotelRecommendation]:
    return [
        HotelRecommendation(
            name=f"{place} {label} {hotel_stars}★",
            description=f"{hotel_stars}-star stay in {place}.",
            estimated_price_per_night=f"₹{price * hotel_stars}",
            amenities=["WiFi", "Breakfast"],
            google_rating=4.2,
            web_rating=4.0,
            review_count="1K+",
        )
        for label, price in (("Heritage Haveli", 1500), ("Riverside Inn", 1200), ("City Lodge", 900))
    ]


class DeterministicStubClient:
    """Deterministic stub gateway for testing (no API key required)."""

    async def generate_itinerary(self, request: TripRequest) -> Itinerary:
        """Generate a placeholder itinerary with two activities per day."""
        return _stub_itinerary(
            destination=request.destination,
            duration=request.duration,
            theme=request.theme_string,
            starting_location=request.starting_location,
            travelers_count=request.travelers_count,
            hotel_stars=request.hotel_stars,
        )

    async def generate_itinerary_from_prompt(self, prompt: str) -> Itinerary:
        """Generate a 3-day placeholder itinerary named after the prompt."""
        return _stub_itinerary(
            destination=prompt.strip()[:60] or "India",
            duration=3,
            theme="Custom",
            starting_location="New Delhi",
            travelers_count=1,
        )

    async def merge_itineraries(self, itineraries: list[Itinerary]) -> Itinerary:
        """Return a placeholder plan spanning the combined duration.

        The stub does not combine the inputs' days; merging is the model's job.
        """
        destinations = list(dict.fromkeys(i.destination for i in itineraries))
        themes = list(dict.fromkeys(t for i in itineraries for t in i.theme_tags))
        return _stub_itinerary(
            destination=" + ".join(destinations),
            duration=sum(i.duration for i in itineraries),
            theme=", ".join(themes),
            starting_location=itineraries[0].starting_location if itineraries else "",
            travelers_count=max((i.travelers_count for i in itineraries), default=1),
        )

    async def suggest_activities(self, destination: str, query: str | None = None) -> list[Activity]:
        """Five placeholder spots."""
        place = _place_name(destination)
        label = f" ({query.strip()})" if query and query.strip() else ""
        return [
            Activity(
                location=f"{place} Hidden Spot {i}{label}",
                description=f"Lesser-known place #{i} in {place}.",
                estimated_cost="Free",
                estimated_time="1 hour",
                cultural_insight="Off the beaten path.",
            )
            for i in range(1, 6)
        ]

    async def refresh_hotels(
        self, destination: str, hotel_stars: int, travelers_count: int
    ) -> list[HotelRecommendation]:
        """Three placeholder hotels."""
        return _stub_hotels(_place_name(destination), hotel_stars)

    async def chat(self, message: str, context: str) -> str:
        """Echo reply."""
        return f"(stub concierge, {context}) You asked: {message}"

    async def translate(self, text: str, target_language: str) -> str:
        """Tag the text with the target language."""
        return f"[{target_language}] {text}"

    async def synthesize_speech(self, text: str) -> bytes:
        """No audio without a key."""
        return b""


class OpenAIClient:
    """OpenAI-backed gateway for real synthesis."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        tts_model: str = "gpt-4o-mini-tts",
        tts_voice: str = "alloy",
        timeout_s: float = 60.0,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Chat model used for structured generation
            tts_model: Speech model
            tts_voice: Speech voice
            timeout_s: Transport timeout per request
        """
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)
        self.model = model
        self.tts_model = tts_model
        self.tts_voice = tts_voice
        self._log = StructuredGatewayLogger()
        self._metrics = PrometheusGatewayMetrics()

    async def generate_itinerary(self, request: TripRequest) -> Itinerary:
        """Generate itinerary from planner parameters."""
        prompt = (
            f"Architect a {request.duration}-day travel itinerary for {request.destination} "
            f"starting from {request.starting_location} for {request.travelers_count} travelers.\n"
            f"Themes: {request.theme_string}.\n"
            f"Hotel requirement: {request.hotel_stars}-star hotels.\n"
            f"Include travel options (Bus, Train, Flight) from {request.starting_location} with "
            f"price estimates in INR for all travelers, and 3 matching hotels with Google Maps "
            f"URLs."
        )
        return await self._complete_json(
            "generate_itinerary", self._itinerary_system_prompt(), prompt, Itinerary
        )

    async def generate_itinerary_from_prompt(self, prompt: str) -> Itinerary:
        """Generate itinerary from a free-text intent."""
        user = (
            f'Synthesize a travel itinerary for this intent: "{prompt}". Include travel options '
            "from the inferred starting point and hotel recommendations with map links."
        )
        return await self._complete_json(
            "generate_from_prompt", self._itinerary_system_prompt(), user, Itinerary
        )

    async def merge_itineraries(self, itineraries: list[Itinerary]) -> Itinerary:
        """Ask the model to fold several plans into one sequential itinerary."""
        serialized = json.dumps([i.to_wire() for i in itineraries], ensure_ascii=False)
        user = (
            "Merge these itineraries into one cohesive, sequential trip. Remove redundant "
            "stops, keep a sensible pace, number days from 1 and set duration to the number "
            f"of days.\n\nItineraries:\n{serialized}"
        )
        return await self._complete_json(
            "merge_itineraries", self._itinerary_system_prompt(), user, Itinerary
        )

    async def suggest_activities(self, destination: str, query: str | None = None) -> list[Activity]:
        """Discover 5 additional spots."""
        focus = f" matching: {query}" if query else ""
        user = f"Find 5 additional unique spots in {destination}{focus}."
        result = await self._complete_json(
            "suggest_activities",
            self._schema_prompt(ActivitySuggestions),
            user,
            ActivitySuggestions,
        )
        return result.activities

    async def refresh_hotels(
        self, destination: str, hotel_stars: int, travelers_count: int
    ) -> list[HotelRecommendation]:
        """Suggest 3 hotels matching the star rating."""
        user = (
            f"Suggest 3 {hotel_stars}-star hotels in {destination} for {travelers_count} "
            "travelers, with price per night in INR, ratings and Google Maps URLs."
        )
        result = await self._complete_json(
            "refresh_hotels", self._schema_prompt(HotelSuggestions), user, HotelSuggestions
        )
        return result.hotels

    async def chat(self, message: str, context: str) -> str:
        """Concierge-mode reply."""
        return await self._complete_text(
            "chat",
            "You are a concierge for travelers exploring India. Be concise and practical.",
            f"Context: {context}\n\nUser: {message}",
        )

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text, returning only the translation."""
        return await self._complete_text(
            "translate",
            "Translate the user's text. Reply with the translation only.",
            f"Translate to {target_language}:\n{text}",
        )

    async def synthesize_speech(self, text: str) -> bytes:
        """Text-to-speech via the audio API."""
        started = time.perf_counter()
        try:
            response = await self.client.audio.speech.create(
                model=self.tts_model,
                voice=self.tts_voice,
                input=text,
            )
            audio = response.content
        except OpenAIError as e:
            self._fail("synthesize_speech", started, type(e).__name__)
            raise GatewayError(f"Speech synthesis failed: {e}") from e

        self._succeed("synthesize_speech", started)
        return audio

    def _itinerary_system_prompt(self) -> str:
        return (
            "You are an expert planner for travel in India. Prices are in INR, times are "
            "24h HH:mm. " + self._schema_prompt(Itinerary)
        )

    def _schema_prompt(self, model_cls: type[BaseModel]) -> str:
        schema = json.dumps(model_cls.model_json_schema(by_alias=True))
        return f"Respond with a single JSON object conforming to this JSON schema:\n{schema}"

    async def _complete_json(
        self, operation: str, system_prompt: str, user_prompt: str, model_cls: type[ModelT]
    ) -> ModelT:
        """Run one JSON-mode completion and validate it against ``model_cls``."""
        started = time.perf_counter()
        content = await self._request(
            operation, started, system_prompt, user_prompt, json_mode=True
        )
        try:
            result = model_cls.model_validate_json(content)
        except ValidationError as e:
            self._fail(operation, started, "invalid_schema")
            logger.error(f"[gateway] {operation} returned malformed JSON: {e}")
            raise GatewayError(f"AI response for {operation} did not match the schema") from e

        self._succeed(operation, started)
        return result

    async def _complete_text(self, operation: str, system_prompt: str, user_prompt: str) -> str:
        started = time.perf_counter()
        content = await self._request(operation, started, system_prompt, user_prompt)

        self._succeed(operation, started)
        return content

    async def _request(
        self,
        operation: str,
        started: float,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
    ) -> str:
        """Single chat completion; failures are recorded here, success by the caller."""
        try:
            kwargs = {"response_format": {"type": "json_object"}} if json_mode else {}
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.7,
                **kwargs,
            )
        except OpenAIError as e:
            self._fail(operation, started, type(e).__name__)
            logger.error(f"[gateway] {operation} call failed: {e}")
            raise GatewayError(f"AI service call failed for {operation}") from e

        content = (response.choices[0].message.content or "") if response.choices else ""
        if not content.strip():
            self._fail(operation, started, "empty_response")
            raise GatewayError(f"AI service returned an empty response for {operation}")

        return content

    def _succeed(self, operation: str, started: float) -> None:
        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_latency(operation, "success", latency_ms)
        self._log.log_call(operation, "success", latency_ms, model=self.model)

    def _fail(self, operation: str, started: float, reason: str) -> None:
        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_latency(operation, "error", latency_ms)
        self._metrics.inc_error(operation, reason)
        self._log.log_call(operation, "error", latency_ms, model=self.model, error_reason=reason)


async def get_llm_client() -> ItineraryGateway:
    """Factory function to get appropriate gateway based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for synthesis")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            tts_model=settings.openai_tts_model,
            tts_voice=settings.openai_tts_voice,
            timeout_s=settings.gateway_timeout_s,
        )
    else:
        logger.warning("No OpenAI API key configured, using deterministic stub client")
        return DeterministicStubClient()
