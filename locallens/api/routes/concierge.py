"""Concierge endpoints - chat, translation and text-to-speech."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from locallens.api.deps import enforce_rate_limit, http_error
from locallens.errors import LocalLensError
from locallens.llm.client import ItineraryGateway, get_llm_client

router = APIRouter(
    prefix="/concierge", tags=["concierge"], dependencies=[Depends(enforce_rate_limit)]
)
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Request body for POST /concierge/chat."""

    message: str = Field(..., min_length=1, max_length=4000)
    context: str = Field("general travel in India", max_length=500)


class ChatResponse(BaseModel):
    """Response for POST /concierge/chat."""

    reply: str


class TranslateRequest(BaseModel):
    """Request body for POST /concierge/translate."""

    text: str = Field(..., min_length=1, max_length=4000)
    target_language: str = Field(..., min_length=1, max_length=50)


class TranslateResponse(BaseModel):
    """Response for POST /concierge/translate."""

    translation: str


class SpeechRequest(BaseModel):
    """Request body for POST /concierge/speech."""

    text: str = Field(..., min_length=1, max_length=4000)


@router.post("/chat", response_model=ChatResponse, status_code=status.HTTP_200_OK)
async def chat(
    request: ChatRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> ChatResponse:
    """Ask the travel concierge."""
    try:
        return ChatResponse(reply=await gateway.chat(request.message, request.context))
    except LocalLensError as e:
        raise http_error(e) from e


@router.post("/translate", response_model=TranslateResponse, status_code=status.HTTP_200_OK)
async def translate(
    request: TranslateRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> TranslateResponse:
    """Translate a phrase."""
    try:
        translation = await gateway.translate(request.text, request.target_language)
    except LocalLensError as e:
        raise http_error(e) from e

    return TranslateResponse(translation=translation)


@router.post("/speech", status_code=status.HTTP_200_OK)
async def speech(
    request: SpeechRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> Response:
    """Read text aloud. Returns mp3 audio, or 204 when no audio is available."""
    try:
        audio = await gateway.synthesize_speech(request.text)
    except LocalLensError as e:
        raise http_error(e) from e

    if not audio:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(content=audio, media_type="audio/mpeg")
