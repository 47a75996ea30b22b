"""Configuration management for the Ask April engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    APRIL_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Co-pilot conversations
    CONVERSATION_STORE: str = Field(
        default="memory", description="Conversation store backend: memory or supabase"
    )
    SYNTHESIS_DELAY_SECONDS: float = Field(
        default=3.0, description="Delay before a queued document synthesis runs"
    )
    SYNTHESIS_POLL_INTERVAL: float = Field(
        default=0.5, description="Seconds between synthesis worker polls"
    )

    # Upload limits
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024, description="Max co-pilot document upload size in bytes"
    )

    # ElevenLabs text-to-speech
    ELEVENLABS_API_KEY: str | None = Field(default=None, description="ElevenLabs API key")
    ELEVENLABS_VOICE_ID: str | None = Field(default=None, description="Voice used for April")
    ELEVENLABS_MODEL_ID: str = Field(
        default="eleven_multilingual_v2", description="ElevenLabs speech model"
    )
    ELEVENLABS_OUTPUT_FORMAT: str = Field(
        default="mp3_44100_128", description="ElevenLabs audio output format"
    )
    ELEVENLABS_TIMEOUT_SECONDS: float = Field(
        default=60.0, description="HTTP timeout for ElevenLabs requests"
    )

    # Daily Ripple generation
    RIPPLE_AUDIO_DIR: str = Field(default="./audio", description="Generated audio directory")
    RIPPLE_MANIFEST_PATH: str = Field(
        default="./episodes.json", description="Episode manifest written after generation"
    )
    RIPPLE_REQUEST_DELAY_SECONDS: float = Field(
        default=1.0, description="Pause between consecutive text-to-speech requests"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
