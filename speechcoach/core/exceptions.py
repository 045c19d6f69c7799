"""
SpeechCoach exception hierarchy.

All application-specific exceptions inherit from SpeechCoachError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime
from enum import StrEnum


class SpeechCoachError(Exception):
    """Base exception for all SpeechCoach errors.

    Args:
        detail: Plain-language message, safe to show to the end user.
        code: Stable machine-readable error code.
        status_code: HTTP status the API responds with.
        details: Optional diagnostic text for the ``details`` field of the
            error envelope.
    """

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SPEECHCOACH_ERROR",
        status_code: int = 500,
        details: str | None = None,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Recorder (client side)
# ---------------------------------------------------------------------------


class DeviceUnavailableError(SpeechCoachError):
    """Raised when the microphone cannot be acquired (no device, permission denied)."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(
            detail="Microphone is not available. Check the device and permissions.",
            code="DEVICE_UNAVAILABLE",
            status_code=503,
            details=reason or None,
        )


class RecordingAlreadyActiveError(SpeechCoachError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class RecordingNotActiveError(SpeechCoachError):
    """Raised when stopping a recorder that is not recording."""

    def __init__(self) -> None:
        super().__init__(
            detail="No recording is active",
            code="RECORDING_NOT_ACTIVE",
            status_code=409,
        )


# ---------------------------------------------------------------------------
# Pipeline stages (server side)
# ---------------------------------------------------------------------------


class MissingInputError(SpeechCoachError):
    """Raised when the audio or the topic of an analysis request is absent."""

    def __init__(self, detail: str = "Missing audio or topic") -> None:
        super().__init__(detail=detail, code="MISSING_INPUT", status_code=400)


class InvalidAudioError(SpeechCoachError):
    """Raised when the submitted audio artifact is empty."""

    def __init__(self, detail: str = "Audio recording is empty") -> None:
        super().__init__(detail=detail, code="INVALID_AUDIO", status_code=400)


class TranscriptionFailedError(SpeechCoachError):
    """Raised when the speech-to-text service call fails."""

    def __init__(self, cause: BaseException | str | None = None) -> None:
        super().__init__(
            detail="Transcription failed. Please try again.",
            code="TRANSCRIPTION_FAILED",
            status_code=502,
            details=str(cause) if cause else None,
        )


class EvaluationFailedError(SpeechCoachError):
    """Raised when the language-model evaluation call itself fails."""

    def __init__(self, cause: BaseException | str | None = None) -> None:
        super().__init__(
            detail="Evaluation service failed. Please try again.",
            code="EVALUATION_FAILED",
            status_code=502,
            details=str(cause) if cause else None,
        )


class MalformedEvaluationError(SpeechCoachError):
    """Raised when the evaluation response is not usable JSON.

    The raw model output is kept on ``raw_text`` for logging only; it is
    never part of the user-facing message or the API envelope.
    """

    def __init__(self, raw_text: str, reason: str = "Response was not valid JSON") -> None:
        self.raw_text = raw_text
        super().__init__(
            detail="The evaluation result could not be read. Please try again.",
            code="MALFORMED_EVALUATION",
            status_code=502,
            details=reason,
        )


class PipelineStage(StrEnum):
    """Stage of an analysis run that produced a failure."""

    input = "input"
    transcription = "transcription"
    evaluation = "evaluation"


class PipelineError(SpeechCoachError):
    """A stage failure converted at the pipeline boundary.

    Inherits ``detail``, ``code``, ``status_code`` and ``details`` from the
    originating ``SpeechCoachError``; any other exception is reported as an
    internal error of that stage.
    """

    def __init__(self, stage: PipelineStage, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        if isinstance(cause, SpeechCoachError):
            super().__init__(
                detail=cause.detail,
                code=cause.code,
                status_code=cause.status_code,
                details=cause.details,
            )
        else:
            super().__init__(
                detail=f"Speech analysis failed during {stage.value}",
                code="PIPELINE_ERROR",
                status_code=500,
                details=str(cause) or None,
            )
