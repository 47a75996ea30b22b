"""Tests for Daily Ripple generation and episode endpoints."""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from askapril.core.config import Settings
from askapril.core.errors import NotFoundError, UpstreamError
from askapril.services.daily_ripple import (
    DailyRippleGenerator,
    find_episode,
    get_daily_ripple_generator,
    todays_episode,
)
from askapril.services.ripple_scripts import WEEKLY_EPISODES


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="test-key",
        RIPPLE_AUDIO_DIR=str(tmp_path / "audio"),
        RIPPLE_MANIFEST_PATH=str(tmp_path / "episodes.json"),
        RIPPLE_REQUEST_DELAY_SECONDS=0,
    )


@pytest.fixture
def tts_client():
    client = MagicMock()
    client.voice_id = "voice-april"
    client.synthesize = AsyncMock(return_value=b"mp3-bytes")
    client.list_voices = AsyncMock(return_value=[{"voice_id": "v1", "name": "April"}])
    return client


@pytest.fixture
def generator(tts_client, settings):
    return DailyRippleGenerator(client=tts_client, settings=settings)


class TestEpisodes:
    def test_five_weekday_episodes(self):
        assert [e.day for e in WEEKLY_EPISODES] == [
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
        ]
        assert all("I'm April" in e.script for e in WEEKLY_EPISODES)

    def test_find_episode_case_insensitive(self):
        assert find_episode("friday").filename == "friday-focus.mp3"

    def test_find_episode_unknown_day(self):
        with pytest.raises(NotFoundError) as exc_info:
            find_episode("Saturday")
        assert exc_info.value.extra["availableDays"][0] == "Monday"

    @pytest.mark.parametrize(
        "day,name,title",
        [
            (date(2024, 3, 3), "sunday", "Sunday Reflection: Week Ahead Preparation"),
            (date(2024, 3, 4), "monday", "Monday Momentum: Lead with Purpose"),
            (date(2024, 3, 9), "saturday", "Saturday Strategy: Planning for Success"),
        ],
    )
    def test_todays_episode(self, day, name, title):
        episode = todays_episode(day)

        assert episode["day"] == name
        assert episode["title"] == title
        assert episode["date"] == day.isoformat()
        assert episode["id"] == f"{day.year}-{day.month}-{day.day}"
        assert episode["audioUrl"] == f"/audio/daily-{name}.mp3"
        assert episode["published"] is True


class TestGenerator:
    @pytest.mark.asyncio
    async def test_generate_week_writes_audio_and_manifest(self, generator, tts_client, settings):
        summary = await generator.generate_week()

        assert summary["successful"] == 5
        assert summary["failed"] == 0
        assert tts_client.synthesize.await_count == 5

        monday = generator.audio_dir / "monday-momentum.mp3"
        assert monday.read_bytes() == b"mp3-bytes"

        manifest = json.loads(generator.manifest_path.read_text())
        assert [entry["id"] for entry in manifest] == [e.id for e in WEEKLY_EPISODES]
        assert manifest[0]["audioUrl"] == "/audio/monday-momentum.mp3"
        assert all(entry["available"] for entry in manifest)

    @pytest.mark.asyncio
    async def test_generate_week_reports_failures(self, generator, tts_client):
        tts_client.synthesize.side_effect = [
            b"a",
            UpstreamError("quota exceeded"),
            b"c",
            b"d",
            b"e",
        ]

        summary = await generator.generate_week()

        assert summary["successful"] == 4
        assert summary["failed"] == 1
        manifest = {entry["id"]: entry for entry in generator.weekly_episodes()}
        assert manifest["tuesday"]["available"] is False
        assert manifest["wednesday"]["available"] is True

    @pytest.mark.asyncio
    async def test_generate_single(self, generator, tts_client):
        result = await generator.generate_single("Wednesday")

        assert result["success"] is True
        assert result["episode"]["filename"] == "wednesday-wisdom.mp3"
        tts_client.synthesize.assert_awaited_once_with(WEEKLY_EPISODES[2].script)

    @pytest.mark.asyncio
    async def test_generate_single_unknown_day(self, generator, tts_client):
        with pytest.raises(NotFoundError):
            await generator.generate_single("Someday")
        tts_client.synthesize.assert_not_awaited()

    def test_weekly_episodes_default_without_manifest(self, generator):
        episodes = generator.weekly_episodes()

        assert len(episodes) == 5
        assert episodes[0] == {
            "id": "monday",
            "title": "Monday Momentum: Lead with Purpose",
            "day": "Monday",
            "duration": "5:12",
        }


class TestRippleEndpoints:
    @pytest.fixture
    def client(self, generator):
        from askapril.main import app

        app.dependency_overrides[get_daily_ripple_generator] = lambda: generator
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_today(self, client):
        response = client.get("/api/ripple/today")

        assert response.status_code == 200
        assert response.json()["published"] is True

    def test_week(self, client):
        data = client.get("/api/ripple/week").json()
        assert data["total"] == 5

    def test_generate(self, client):
        response = client.post("/api/ripple/generate", json={"day": "monday"})

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_generate_unknown_day(self, client):
        response = client.post("/api/ripple/generate", json={"day": "Sunday"})

        assert response.status_code == 404
        assert "availableDays" in response.json()["detail"]

    def test_voices(self, client):
        data = client.get("/api/ripple/voices").json()

        assert data["aprilVoice"]["voice_id"] == "v1"
        assert data["configuredVoiceId"] == "voice-april"

    def test_voices_upstream_failure(self, client, tts_client):
        tts_client.list_voices.side_effect = UpstreamError("ELEVENLABS_API_KEY not configured")

        response = client.get("/api/ripple/voices")

        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "upstream_error"
