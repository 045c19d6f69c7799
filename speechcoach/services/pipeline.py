"""Speech analysis pipeline: transcription followed by rubric evaluation.

Each stage returns either its value or a ``PipelineError`` tagged with the
stage, and the sequence stops at the first failure, so a run publishes a
complete ``AnalysisResult`` or nothing.

Usage::

    from speechcoach.services.pipeline import create_pipeline

    pipeline = create_pipeline()
    outcome = await pipeline.analyze(artifact, topic)
    if isinstance(outcome, PipelineError):
        ...
"""

import logging
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from speechcoach.core.config import Settings, get_settings
from speechcoach.core.exceptions import MissingInputError, PipelineError, PipelineStage
from speechcoach.core.models import AnalysisResult, AudioArtifact, EvaluationResult
from speechcoach.services.evaluation import SpeechEvaluator
from speechcoach.services.llm import create_llm
from speechcoach.services.transcription import TranscriptionClient, create_stt

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Only network-level causes are worth another attempt."""
    return isinstance(exc.__cause__, ConnectionError | TimeoutError)


class AnalysisPipeline:
    """Runs one transcription and one evaluation per recording.

    Args:
        transcriber: Client for the speech-to-text service.
        evaluator: Client for the LLM evaluation service.
        max_attempts: Attempts per stage for transient failures
            (default 1, i.e. no retry).
    """

    def __init__(
        self,
        transcriber: TranscriptionClient,
        evaluator: SpeechEvaluator,
        max_attempts: int = 1,
    ) -> None:
        self._transcriber = transcriber
        self._evaluator = evaluator
        self._max_attempts = max(1, max_attempts)

    async def analyze(
        self, artifact: AudioArtifact | None, topic: str | None
    ) -> AnalysisResult | PipelineError:
        """Analyze one recording against its topic.

        Never raises for stage failures: the returned ``PipelineError``
        carries the failing stage and its cause.
        """
        if artifact is None or not topic or not topic.strip():
            return PipelineError(PipelineStage.input, MissingInputError())

        logger.info("Received audio file: %s, size: %d bytes", artifact.filename, artifact.size)
        logger.info("Topic: %s", topic)

        logger.info("Starting transcription...")
        transcript = await self._step(
            PipelineStage.transcription, self._transcriber.transcribe, artifact
        )
        if isinstance(transcript, PipelineError):
            return transcript
        logger.info("Transcription completed: %d characters", len(transcript))

        logger.info("Starting analysis...")
        evaluation = await self._step(
            PipelineStage.evaluation, self._evaluator.evaluate, topic, transcript
        )
        if isinstance(evaluation, PipelineError):
            return evaluation
        logger.info(
            "Analysis completed: overall score %d", evaluation.overall_effectiveness.score
        )

        return AnalysisResult.from_evaluation(topic, transcript, evaluation)

    async def run(self, artifact: AudioArtifact | None, topic: str | None) -> AnalysisResult:
        """Like ``analyze`` but raises the ``PipelineError`` (for the API layer)."""
        outcome = await self.analyze(artifact, topic)
        if isinstance(outcome, PipelineError):
            raise outcome
        return outcome

    async def _step(
        self,
        stage: PipelineStage,
        call: Callable[..., Awaitable[str | EvaluationResult]],
        *args,
    ) -> str | EvaluationResult | PipelineError:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                retry=retry_if_exception(_is_transient),
                reraise=True,
            ):
                with attempt:
                    return await call(*args)
        except Exception as exc:
            logger.warning("Pipeline stage %s failed: %s", stage.value, exc)
            return PipelineError(stage, exc)


def create_pipeline(settings: Settings | None = None) -> AnalysisPipeline:
    """Build a pipeline from the configured STT and LLM providers."""
    settings = settings or get_settings()
    return AnalysisPipeline(
        transcriber=TranscriptionClient(create_stt(provider=settings.stt_provider)),
        evaluator=SpeechEvaluator(create_llm(provider=settings.llm_provider)),
        max_attempts=settings.pipeline_max_attempts,
    )
