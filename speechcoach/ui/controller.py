"""
Session controller: drives the recorder, the API client and the reducer.

The controller is the only place that mutates the current ``SessionState``.
Blocking HTTP calls run in a worker thread via ``asyncio.to_thread`` so the
event loop keeps serving the UI while an analysis is in flight.
"""

import asyncio
import logging
import random
from collections.abc import Callable

from speechcoach.core.config import get_settings
from speechcoach.core.exceptions import SpeechCoachError
from speechcoach.ui.api_client import APIClient, APIError
from speechcoach.ui.recorder import Recorder
from speechcoach.ui.session import (
    AnalysisFailed,
    AnalysisSucceeded,
    RecordingStarted,
    RecordingStopped,
    SessionEvent,
    SessionState,
    initial_state,
    reduce,
)

logger = logging.getLogger(__name__)


class SessionController:
    """Owns one user session.

    Args:
        recorder: Microphone recorder.
        client: Backend API client.
        notify: Called with a plain-language message for transient
            notifications (errors the user should see).
        history_size: Overall scores to keep (defaults to ``settings.history_size``).
        rng: Random source for topic selection.
    """

    def __init__(
        self,
        recorder: Recorder,
        client: APIClient,
        notify: Callable[[str], None] | None = None,
        history_size: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._recorder = recorder
        self._client = client
        self._notify = notify or (lambda _message: None)
        self._history_size = history_size or get_settings().history_size
        self._state = initial_state(rng)

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, event: SessionEvent) -> SessionState:
        self._state = reduce(self._state, event, history_size=self._history_size)
        return self._state

    def start_recording(self) -> bool:
        """Start a new take; returns False (and notifies) if the recorder refused."""
        try:
            self._recorder.start()
        except SpeechCoachError as exc:
            logger.warning("Error starting recording: %s", exc.details or exc.detail)
            self._notify(f"Error starting recording: {exc.detail}")
            return False
        self.dispatch(RecordingStarted())
        return True

    async def stop_recording(self) -> SessionState:
        """Finish the take and analyze it.

        Returns once this take's analysis has resolved. If a newer take was
        started in the meantime, the outcome is discarded.

        Raises:
            RecordingNotActiveError: If no take is in progress.
        """
        artifact = self._recorder.stop()
        self.dispatch(RecordingStopped(artifact))
        topic = self._state.topic

        try:
            result = await asyncio.to_thread(self._client.analyze_speech, artifact, topic)
        except APIError as exc:
            if not self._state.is_current(artifact.artifact_id):
                logger.info("Discarding stale analysis failure for %s", artifact.artifact_id)
                return self._state
            logger.warning("Error analyzing audio (%s): %s", exc.category, exc.message)
            self.dispatch(AnalysisFailed(artifact.artifact_id, exc.message))
            self._notify(f"Error analyzing audio: {exc.message}")
            return self._state

        if not self._state.is_current(artifact.artifact_id):
            logger.info("Discarding stale analysis result for %s", artifact.artifact_id)
            return self._state
        return self.dispatch(AnalysisSucceeded(artifact.artifact_id, result))
