"""
Client session state and its reducer.

``SessionState`` is immutable; every change goes through ``reduce()``.
Analysis outcomes carry the ``artifact_id`` of the recording they were
started for and are dropped unless that recording is still the current
one, so a slow earlier run can never overwrite a newer take.
"""

import random
from collections.abc import Iterable
from dataclasses import dataclass, replace

from speechcoach.core.models import AnalysisResult, AudioArtifact
from speechcoach.core.topics import select_topic

HISTORY_SIZE = 5


@dataclass(frozen=True)
class SessionState:
    """Everything the page renders.

    ``result`` is None both before the first take and while an analysis is
    pending; ``history`` holds the most recent overall scores, oldest first.
    """

    topic: str = ""
    artifact: AudioArtifact | None = None
    result: AnalysisResult | None = None
    history: tuple[int, ...] = ()
    is_recording: bool = False
    error: str | None = None

    @property
    def is_analyzing(self) -> bool:
        return (
            self.artifact is not None
            and self.result is None
            and self.error is None
            and not self.is_recording
        )

    def is_current(self, artifact_id: str) -> bool:
        return self.artifact is not None and self.artifact.artifact_id == artifact_id


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TopicSelected:
    topic: str


@dataclass(frozen=True)
class RecordingStarted:
    pass


@dataclass(frozen=True)
class RecordingStopped:
    artifact: AudioArtifact


@dataclass(frozen=True)
class AnalysisSucceeded:
    artifact_id: str
    result: AnalysisResult


@dataclass(frozen=True)
class AnalysisFailed:
    artifact_id: str
    message: str


SessionEvent = (
    TopicSelected | RecordingStarted | RecordingStopped | AnalysisSucceeded | AnalysisFailed
)


def _append_score(history: Iterable[int], score: int, limit: int) -> tuple[int, ...]:
    return (*history, score)[-limit:] if limit > 0 else ()


def reduce(state: SessionState, event: SessionEvent, history_size: int = HISTORY_SIZE) -> SessionState:
    """Return the state that follows ``event``; ``state`` is never modified."""
    match event:
        case TopicSelected(topic=topic):
            return replace(state, topic=topic)
        case RecordingStarted():
            return replace(state, artifact=None, result=None, error=None, is_recording=True)
        case RecordingStopped(artifact=artifact):
            return replace(state, artifact=artifact, result=None, error=None, is_recording=False)
        case AnalysisSucceeded(artifact_id=artifact_id, result=result):
            if not state.is_current(artifact_id):
                return state
            return replace(
                state,
                result=result,
                error=None,
                history=_append_score(
                    state.history, result.overall_effectiveness.score, history_size
                ),
            )
        case AnalysisFailed(artifact_id=artifact_id, message=message):
            if not state.is_current(artifact_id):
                return state
            return replace(state, result=None, error=message)
        case _:
            raise TypeError(f"Unknown session event: {event!r}")


def initial_state(rng: random.Random | None = None) -> SessionState:
    """Start a session with a randomly selected topic."""
    return reduce(SessionState(), TopicSelected(select_topic(rng)))
