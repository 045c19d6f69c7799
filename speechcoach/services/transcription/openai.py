"""OpenAI speech-to-text provider (``audio.transcriptions`` endpoint)."""

import logging

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

from speechcoach.core.config import get_settings
from speechcoach.core.models import AudioArtifact
from speechcoach.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class OpenAISTT(BaseSTT):
    """Transcribes recordings with the hosted Whisper model.

    Args:
        api_key: OpenAI API key (defaults to ``settings.openai_api_key``).
        model: Transcription model (defaults to ``settings.openai_transcription_model``).
    """

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_transcription_model
        self._client = AsyncOpenAI(api_key=self._api_key)

    async def transcribe(self, audio: AudioArtifact, **kwargs) -> str:
        request: dict = {
            "model": self._model,
            "file": (audio.filename, audio.data, audio.content_type),
        }
        if kwargs.get("language"):
            request["language"] = kwargs["language"]

        try:
            response = await self._client.audio.transcriptions.create(**request)
        except APITimeoutError as exc:
            logger.warning("OpenAI transcription timeout: %s", exc)
            raise TimeoutError(f"OpenAI transcription timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI transcription connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to OpenAI API: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("OpenAI transcription rate limit hit: %s", exc)
            raise ConnectionError(f"OpenAI API rate limit exceeded: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected OpenAI transcription error: %s", exc)
            raise RuntimeError(f"OpenAI transcription error: {exc}") from exc

        return response.text
