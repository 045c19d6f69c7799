"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SpeechCoach settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Which LLM backend evaluates transcripts ("openai", "claude", "ollama").
        stt_provider: Which STT backend transcribes audio ("openai" or "local").
        pipeline_max_attempts: Attempts per external call; 1 means no retry.
        history_size: Number of overall scores kept in the client session history.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    llm_provider: str = "openai"

    # OpenAI settings (also used by the "openai" STT provider)
    openai_api_key: str = ""
    openai_model: str = "gpt-4"
    openai_transcription_model: str = "whisper-1"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Evaluation ---
    evaluation_temperature: float = 0.2
    evaluation_max_tokens: int = 2048

    # --- Speech-to-text ---
    stt_provider: str = "openai"
    whisper_model: str = "base"  # faster-whisper size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"

    # --- Pipeline ---
    pipeline_max_attempts: int = 1

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- Client ---
    api_base_url: str = "http://localhost:8000"
    api_timeout: float = 120.0
    record_sample_rate: int = 16000
    record_channels: int = 1
    history_size: int = 5


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
