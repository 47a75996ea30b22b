"""API endpoints for Daily Ripple episodes."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from askapril.api.errors import http_error, internal_error
from askapril.core.errors import AprilError
from askapril.core.logging import get_logger
from askapril.services.daily_ripple import (
    DailyRippleGenerator,
    get_daily_ripple_generator,
    todays_episode,
)
from askapril.services.elevenlabs_service import find_april_voice

logger = get_logger(__name__)

router = APIRouter()


class GenerateEpisodeRequest(BaseModel):
    day: str


@router.get("/today")
async def get_todays_episode() -> dict[str, Any]:
    """Episode card for today."""
    return todays_episode()


@router.get("/week")
async def get_weekly_episodes(
    generator: DailyRippleGenerator = Depends(get_daily_ripple_generator),
) -> dict[str, Any]:
    """Weekday episodes from the manifest (or the defaults)."""
    episodes = generator.weekly_episodes()
    return {"episodes": episodes, "total": len(episodes)}


@router.post("/generate")
async def generate_episode(
    request: GenerateEpisodeRequest,
    generator: DailyRippleGenerator = Depends(get_daily_ripple_generator),
) -> dict[str, Any]:
    """
    Voice one weekday episode.

    Raises:
        HTTPException 404: If the day has no episode
        HTTPException 502: If text-to-speech is not configured
    """
    try:
        return await generator.generate_single(request.day)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Episode generation failed for {request.day}: {e}")
        raise internal_error("Failed to generate episode") from e


@router.post("/generate-week")
async def generate_week(
    generator: DailyRippleGenerator = Depends(get_daily_ripple_generator),
) -> dict[str, Any]:
    """Voice all five weekday episodes sequentially."""
    try:
        return await generator.generate_week()

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Weekly generation failed: {e}")
        raise internal_error("Failed to generate episodes") from e


@router.get("/voices")
async def list_voices(
    generator: DailyRippleGenerator = Depends(get_daily_ripple_generator),
) -> dict[str, Any]:
    """
    Voices on the ElevenLabs account and the best match for April.

    Raises:
        HTTPException 502: If the voice listing fails
    """
    try:
        voices = await generator.client.list_voices()
    except AprilError as e:
        raise http_error(e) from e

    return {
        "voices": voices,
        "aprilVoice": find_april_voice(voices),
        "configuredVoiceId": generator.client.voice_id,
    }
