"""ElevenLabs text-to-speech client.

Used by the Daily Ripple generator to voice episode scripts as April.
"""

from typing import Any

import httpx

from askapril.core.config import Settings, get_settings
from askapril.core.errors import UpstreamError
from askapril.core.logging import get_logger

logger = get_logger(__name__)

ELEVENLABS_API_URL = "https://api.elevenlabs.io"


def find_april_voice(voices: list[dict[str, Any]]) -> dict[str, Any] | None:
    """First voice whose name or description mentions April."""
    for voice in voices:
        name = (voice.get("name") or "").lower()
        description = (voice.get("description") or "").lower()
        if "april" in name or "april" in description:
            return voice
    return None


class ElevenLabsClient:
    """Thin async wrapper over the ElevenLabs REST API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or get_settings()
        self.api_key = settings.ELEVENLABS_API_KEY
        self.voice_id = settings.ELEVENLABS_VOICE_ID
        self.model_id = settings.ELEVENLABS_MODEL_ID
        self.output_format = settings.ELEVENLABS_OUTPUT_FORMAT
        self.timeout = settings.ELEVENLABS_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=ELEVENLABS_API_URL,
            timeout=self.timeout,
            transport=self._transport,
            headers={"xi-api-key": self.api_key or ""},
        )

    def _require_api_key(self) -> None:
        if not self.api_key:
            raise UpstreamError("ELEVENLABS_API_KEY not configured")

    async def synthesize(self, text: str, voice_id: str | None = None) -> bytes:
        """
        Convert text to speech.

        Args:
            text: Script to voice
            voice_id: Voice override (defaults to ELEVENLABS_VOICE_ID)

        Returns:
            Encoded audio bytes

        Raises:
            UpstreamError: If credentials are missing or the request fails
        """
        self._require_api_key()
        voice_id = voice_id or self.voice_id
        if not voice_id:
            raise UpstreamError("ELEVENLABS_VOICE_ID not configured")

        logger.info(f"Requesting speech for {len(text)} chars (voice={voice_id})")

        try:
            async with self._client() as client:
                response = await client.post(
                    f"/v1/text-to-speech/{voice_id}",
                    params={"output_format": self.output_format},
                    json={"text": text, "model_id": self.model_id},
                )
                response.raise_for_status()
                audio = response.content
        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs returned {e.response.status_code}: {e.response.text[:200]}")
            raise UpstreamError(
                "Text-to-speech request failed", status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed: {e}")
            raise UpstreamError(f"Text-to-speech request failed: {e}") from e

        logger.info(f"Received {len(audio)} bytes of audio")
        return audio

    async def list_voices(self) -> list[dict[str, Any]]:
        """
        List voices available to the account.

        Raises:
            UpstreamError: If credentials are missing or the request fails
        """
        self._require_api_key()

        try:
            async with self._client() as client:
                response = await client.get("/v1/voices")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs voices returned {e.response.status_code}")
            raise UpstreamError(
                "Failed to list voices", status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs voices request failed: {e}")
            raise UpstreamError(f"Failed to list voices: {e}") from e

        voices = data.get("voices", [])
        logger.debug(f"Found {len(voices)} voices")
        return voices
