"""
Abstract base class for Speech-to-Text providers.

All STT implementations (OpenAI API, local faster-whisper) must implement
this interface, enabling provider-agnostic transcription in the service layer.
"""

from abc import ABC, abstractmethod

from speechcoach.core.models import AudioArtifact


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: AudioArtifact, **kwargs) -> str:
        """Transcribe a finished recording to plain text.

        Args:
            audio: The recording to transcribe (any container the backend accepts).
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            The transcribed text, possibly empty for silent audio.
        """
