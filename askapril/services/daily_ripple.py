"""Daily Ripple audio generation and episode lookup."""

import asyncio
import json
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any

from askapril.core.config import Settings, get_settings
from askapril.core.errors import AprilError, NotFoundError
from askapril.core.logging import get_logger
from askapril.services.elevenlabs_service import ElevenLabsClient
from askapril.services.ripple_scripts import (
    DAILY_DESCRIPTIONS,
    DAILY_TITLES,
    DAY_NAMES,
    WEEKLY_EPISODES,
    RippleEpisode,
)

logger = get_logger(__name__)

TODAY_DURATION = "5:12"


def find_episode(day: str) -> RippleEpisode:
    """
    Look up a weekday episode by day name (case-insensitive).

    Raises:
        NotFoundError: If no episode exists for that day
    """
    for episode in WEEKLY_EPISODES:
        if episode.day.lower() == day.strip().lower():
            return episode
    raise NotFoundError(
        f'Day "{day}" not found',
        availableDays=[episode.day for episode in WEEKLY_EPISODES],
    )


def todays_episode(today: date | None = None) -> dict[str, Any]:
    """Episode card for a calendar day (defaults to today)."""
    today = today or date.today()
    # date.weekday() is Monday=0; the tables are Sunday-first
    day_index = (today.weekday() + 1) % 7
    day_name = DAY_NAMES[day_index]

    return {
        "id": f"{today.year}-{today.month}-{today.day}",
        "day": day_name,
        "date": today.isoformat(),
        "title": DAILY_TITLES[day_index],
        "description": DAILY_DESCRIPTIONS[day_index],
        "audioUrl": f"/audio/daily-{day_name}.mp3",
        "duration": TODAY_DURATION,
        "published": True,
    }


class DailyRippleGenerator:
    """Voices the weekday scripts and maintains the episode manifest."""

    def __init__(
        self,
        client: ElevenLabsClient | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.client = client or ElevenLabsClient(settings)
        self.audio_dir = Path(settings.RIPPLE_AUDIO_DIR)
        self.manifest_path = Path(settings.RIPPLE_MANIFEST_PATH)
        self.request_delay = settings.RIPPLE_REQUEST_DELAY_SECONDS

    def _audio_path(self, episode: RippleEpisode) -> Path:
        return self.audio_dir / episode.filename

    async def generate_episode(self, episode: RippleEpisode) -> bool:
        """
        Voice one episode and write its audio file.

        Returns:
            True on success, False if synthesis or the write failed
        """
        logger.info(f"Generating: {episode.title}")

        try:
            audio = await self.client.synthesize(episode.script)
            self.audio_dir.mkdir(parents=True, exist_ok=True)
            self._audio_path(episode).write_bytes(audio)
        except (AprilError, OSError) as e:
            logger.error(f"Failed to generate {episode.title}: {e}")
            return False

        logger.info(f"Generated: {episode.filename} ({len(audio) // 1024}KB)")
        return True

    def write_manifest(self) -> list[dict[str, Any]]:
        """Write episodes.json with audio URLs and availability."""
        entries = [
            {
                **episode.summary(),
                "script": episode.script,
                "audioUrl": f"/audio/{episode.filename}",
                "available": self._audio_path(episode).exists(),
            }
            for episode in WEEKLY_EPISODES
        ]
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        self.manifest_path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        logger.info(f"Updated {self.manifest_path}")
        return entries

    async def generate_week(self) -> dict[str, Any]:
        """
        Voice all weekday episodes sequentially, then refresh the manifest.

        Returns:
            Dict with successful / failed counts and the generated filenames
        """
        logger.info(f"Starting Daily Ripple generation (voice={self.client.voice_id})")

        successful: list[str] = []
        failed: list[str] = []
        for index, episode in enumerate(WEEKLY_EPISODES):
            if index:
                await asyncio.sleep(self.request_delay)
            if await self.generate_episode(episode):
                successful.append(episode.filename)
            else:
                failed.append(episode.filename)

        self.write_manifest()
        logger.info(
            f"Generation complete: {len(successful)} successful, {len(failed)} failed"
        )
        return {
            "successful": len(successful),
            "failed": len(failed),
            "generated": successful,
        }

    async def generate_single(self, day: str) -> dict[str, Any]:
        """
        Voice the episode for one weekday.

        Raises:
            NotFoundError: If the day has no episode
        """
        episode = find_episode(day)
        success = await self.generate_episode(episode)
        if success:
            self.write_manifest()
        return {
            "success": success,
            "episode": {**episode.summary(), "audioUrl": f"/audio/{episode.filename}"},
        }

    def weekly_episodes(self) -> list[dict[str, Any]]:
        """Episodes from the manifest, or the default weekday list if none is readable."""
        try:
            return json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug(f"No usable manifest at {self.manifest_path}: {e}")
            return [
                {
                    "id": episode.id,
                    "title": episode.title,
                    "day": episode.day,
                    "duration": episode.duration,
                }
                for episode in WEEKLY_EPISODES
            ]


@lru_cache(maxsize=1)
def get_daily_ripple_generator() -> DailyRippleGenerator:
    """Get the generator wired from settings (cached singleton)."""
    return DailyRippleGenerator()
