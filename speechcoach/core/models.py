"""
Pydantic v2 models and value types shared by the API, services and UI.

Evaluation models serialize with camelCase aliases (``keyPoints``,
``overallEffectiveness`` ...) because the display layer reads those names.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Score = Annotated[int, Field(ge=0, le=100)]

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AudioArtifact:
    """A finished recording handed from the recorder to the pipeline.

    ``artifact_id`` is the identity token the client session uses to match
    an analysis outcome to the recording that started it.
    """

    data: bytes
    content_type: str = "audio/wav"
    filename: str = "audio.wav"
    artifact_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data


# ---------------------------------------------------------------------------
# Evaluation rubric
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentEvaluation(_CamelModel):
    """Depth and relevance of what was said."""

    depth: Score = 0
    relevance: Score = 0
    key_points: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class StructureEvaluation(_CamelModel):
    """Organization and flow of ideas."""

    score: Score = 0
    feedback: str = ""


class ToneEvaluation(_CamelModel):
    """Tone and delivery."""

    score: Score = 0
    feedback: str = ""


class LanguageEvaluation(_CamelModel):
    """Vocabulary and language use."""

    score: Score = 0
    feedback: str = ""
    notable_expressions: list[str] = Field(default_factory=list)


class PronunciationEvaluation(_CamelModel):
    """Pronunciation and fluency."""

    score: Score = 0
    issues: list[str] = Field(default_factory=list)


class GrammarEvaluation(_CamelModel):
    """Grammar and syntax."""

    score: Score = 0
    errors: list[str] = Field(default_factory=list)


class OverallEffectiveness(_CamelModel):
    """Overall assessment; its score feeds the session history."""

    score: Score = 0
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)


class EvaluationResult(_CamelModel):
    """The seven-section rubric returned by the evaluation step."""

    content: ContentEvaluation = Field(default_factory=ContentEvaluation)
    structure: StructureEvaluation = Field(default_factory=StructureEvaluation)
    tone: ToneEvaluation = Field(default_factory=ToneEvaluation)
    language: LanguageEvaluation = Field(default_factory=LanguageEvaluation)
    pronunciation: PronunciationEvaluation = Field(default_factory=PronunciationEvaluation)
    grammar: GrammarEvaluation = Field(default_factory=GrammarEvaluation)
    overall_effectiveness: OverallEffectiveness = Field(default_factory=OverallEffectiveness)


class AnalysisResult(EvaluationResult):
    """Combined pipeline output: rubric sections spread next to topic and transcript.

    This flat shape is the ``POST /api/analyze-speech`` response body.
    """

    topic: str
    transcription: str

    @classmethod
    def from_evaluation(
        cls, topic: str, transcription: str, evaluation: EvaluationResult
    ) -> "AnalysisResult":
        return cls(topic=topic, transcription=transcription, **dict(evaluation))


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned by the API for every non-2xx response."""

    error: str
    details: str | None = None
    code: str | None = None
    stage: str | None = None
