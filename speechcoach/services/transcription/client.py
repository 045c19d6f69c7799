"""
Transcription client: the pipeline's boundary to the speech-to-text service.

Validates the artifact, makes exactly one provider call, and wraps every
provider failure in ``TranscriptionFailedError``.
"""

import logging

from speechcoach.core.exceptions import InvalidAudioError, TranscriptionFailedError
from speechcoach.core.models import AudioArtifact
from speechcoach.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Turns an ``AudioArtifact`` into a transcript using an STT provider."""

    def __init__(self, stt: BaseSTT) -> None:
        """Initialize with the configured STT provider.

        Args:
            stt: A provider implementing ``BaseSTT``.
        """
        self._stt = stt

    async def transcribe(self, artifact: AudioArtifact, **kwargs) -> str:
        """Transcribe one recording.

        Args:
            artifact: The finished recording.
            **kwargs: Passed through to the provider (e.g. ``language``).

        Returns:
            The transcript with surrounding whitespace removed. An empty
            string is a valid transcript (silence).

        Raises:
            InvalidAudioError: If the artifact has no bytes; the provider is
                not called.
            TranscriptionFailedError: If the provider call fails or returns
                something other than text.
        """
        if artifact is None or artifact.is_empty:
            raise InvalidAudioError()

        try:
            text = await self._stt.transcribe(artifact, **kwargs)
        except Exception as exc:
            logger.warning("Transcription of %s failed: %s", artifact.filename, exc)
            raise TranscriptionFailedError(exc) from exc

        if not isinstance(text, str):
            raise TranscriptionFailedError(
                f"Unexpected transcription response type: {type(text).__name__}"
            )
        return text.strip()
