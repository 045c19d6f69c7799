"""
Microphone recorder: owns the input stream for the duration of one take.

States: idle -> recording -> idle

``start()`` while recording raises ``RecordingAlreadyActiveError`` and
``stop()`` while idle raises ``RecordingNotActiveError``; neither changes
the state. ``stop()`` always releases the device and returns the take as a
16-bit PCM WAV ``AudioArtifact`` (zero bytes when nothing was captured).
"""

import io
import logging
import threading
from collections.abc import Callable
from enum import StrEnum

import numpy as np
import soundfile as sf

from speechcoach.core.config import get_settings
from speechcoach.core.exceptions import (
    DeviceUnavailableError,
    RecordingAlreadyActiveError,
    RecordingNotActiveError,
)
from speechcoach.core.models import AudioArtifact

logger = logging.getLogger(__name__)


class RecorderState(StrEnum):
    idle = "idle"
    recording = "recording"


def _open_input_stream(**kwargs):
    """Create a ``sounddevice.InputStream``.

    sounddevice loads PortAudio at import time, so the import lives here:
    a machine without an audio stack fails the same way as one without a
    microphone.
    """
    import sounddevice as sd

    return sd.InputStream(**kwargs)


class Recorder:
    """Captures microphone audio into memory between ``start()`` and ``stop()``.

    Args:
        sample_rate: Capture rate in Hz (defaults to ``settings.record_sample_rate``).
        channels: Channel count (defaults to ``settings.record_channels``).
        stream_factory: Callable returning an object with ``start``/``stop``/
            ``close``; receives ``samplerate``, ``channels``, ``dtype`` and
            ``callback`` keyword arguments like ``sounddevice.InputStream``.
    """

    def __init__(
        self,
        sample_rate: int | None = None,
        channels: int | None = None,
        stream_factory: Callable | None = None,
    ) -> None:
        settings = get_settings()
        self._sample_rate = sample_rate or settings.record_sample_rate
        self._channels = channels or settings.record_channels
        self._stream_factory = stream_factory or _open_input_stream
        self._stream = None
        self._blocks: list[np.ndarray] = []
        self._lock = threading.Lock()  # guards _blocks against the audio callback thread

    @property
    def state(self) -> RecorderState:
        return RecorderState.recording if self._stream is not None else RecorderState.idle

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        """Acquire the microphone and begin capturing.

        Raises:
            RecordingAlreadyActiveError: If a take is already in progress.
            DeviceUnavailableError: If the input stream cannot be opened or
                started; the recorder stays idle and nothing is held open.
        """
        if self._stream is not None:
            raise RecordingAlreadyActiveError()

        with self._lock:
            self._blocks = []

        stream = None
        try:
            stream = self._stream_factory(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="float32",
                callback=self._on_audio,
            )
            stream.start()
        except Exception as exc:
            logger.warning("Unable to start recording: %s", exc)
            if stream is not None:
                self._release(stream)
            raise DeviceUnavailableError(str(exc)) from exc

        self._stream = stream
        logger.info(
            "Recording started (%d Hz, %d channel(s))", self._sample_rate, self._channels
        )

    def _on_audio(self, indata: np.ndarray, _frames: int, _time, status) -> None:
        if status:
            logger.debug("Recording status: %s", status)
        with self._lock:
            self._blocks.append(indata.copy())

    def stop(self) -> AudioArtifact:
        """Release the microphone and return the finished take.

        Raises:
            RecordingNotActiveError: If no take is in progress.
        """
        if self._stream is None:
            raise RecordingNotActiveError()

        stream, self._stream = self._stream, None
        self._release(stream)

        with self._lock:
            blocks, self._blocks = self._blocks, []

        if not blocks:
            logger.info("Recording stopped but no audio was captured")
            return AudioArtifact(data=b"")

        samples = np.concatenate(blocks, axis=0)
        buffer = io.BytesIO()
        sf.write(buffer, samples, self._sample_rate, format="WAV", subtype="PCM_16")
        logger.info("Recording stopped: %.1fs captured", samples.shape[0] / self._sample_rate)
        return AudioArtifact(data=buffer.getvalue())

    @staticmethod
    def _release(stream) -> None:
        try:
            stream.stop()
        except Exception as exc:
            logger.warning("Failed to stop input stream: %s", exc)
        finally:
            try:
                stream.close()
            except Exception as exc:
                logger.warning("Failed to close input stream: %s", exc)
