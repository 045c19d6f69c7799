"""
Rubric evaluation of a spoken answer.

Sends the topic and transcript to the configured LLM with a fixed rubric
prompt and turns the JSON reply into an ``EvaluationResult``. Replies that
are not JSON objects are rejected; missing or out-of-range fields inside a
JSON object are filled with empty values and clamped scores.
"""

import json
import logging
import math

from speechcoach.core.exceptions import EvaluationFailedError, MalformedEvaluationError
from speechcoach.core.models import (
    ContentEvaluation,
    EvaluationResult,
    GrammarEvaluation,
    LanguageEvaluation,
    OverallEffectiveness,
    PronunciationEvaluation,
    StructureEvaluation,
    ToneEvaluation,
)
from speechcoach.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant that evaluates speech. Provide a detailed analysis "
    "of the given transcription based on the topic. Your analysis should be "
    "thorough, constructive, and tailored to the specific topic.\n\n"
    "Output ONLY a single valid JSON object, no markdown fences or extra text. "
    "Every score is an integer between 0 and 100."
)

RESPONSE_TEMPLATE = """{
  "content": {
    "depth": <integer 0-100>,
    "relevance": <integer 0-100>,
    "keyPoints": [<string>, ...],
    "suggestions": [<string>, ...]
  },
  "structure": {
    "score": <integer 0-100>,
    "feedback": <string>
  },
  "tone": {
    "score": <integer 0-100>,
    "feedback": <string>
  },
  "language": {
    "score": <integer 0-100>,
    "feedback": <string>,
    "notableExpressions": [<string>, ...]
  },
  "pronunciation": {
    "score": <integer 0-100>,
    "issues": [<string>, ...]
  },
  "grammar": {
    "score": <integer 0-100>,
    "errors": [<string>, ...]
  },
  "overallEffectiveness": {
    "score": <integer 0-100>,
    "strengths": [<string>, ...],
    "areasForImprovement": [<string>, ...]
  }
}"""

RUBRIC = """Please analyze the transcription based on the given topic. Provide a comprehensive assessment covering the following aspects:

1. Content:
   - Evaluate the depth and relevance of the content in relation to the topic.
   - Assess the speaker's understanding and knowledge of the subject matter.
   - Identify any key points or arguments made.
   - Suggest areas where the content could be improved or expanded.

2. Structure and Coherence:
   - Evaluate the overall organization and flow of ideas.
   - Assess the clarity and logical progression of the speech.

3. Tone and Delivery:
   - Analyze the speaker's tone and how well it suits the topic.
   - Evaluate the effectiveness of the delivery in engaging the audience.

4. Language Use:
   - Assess the vocabulary and language complexity in relation to the topic.
   - Identify any notable phrases or expressions used.

5. Pronunciation and Fluency:
   - Evaluate the speaker's pronunciation and articulation as far as the transcription shows it.
   - Assess the overall fluency and smoothness of speech.

6. Grammar and Syntax:
   - Identify any grammatical errors or awkward sentence structures.
   - Suggest improvements for better clarity and correctness.

7. Overall Effectiveness:
   - Provide an overall assessment of how well the speech addresses the given topic.
   - Suggest key areas for improvement.

If the transcription is empty or unrelated to the topic, give correspondingly low scores.

Respond with a JSON object in exactly this format, using these field names:

"""


def build_user_prompt(topic: str, transcript: str) -> str:
    """Embed the topic and transcript verbatim ahead of the rubric."""
    return f"Topic: {topic}\n\nTranscription: {transcript}\n\n{RUBRIC}{RESPONSE_TEMPLATE}"


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def _score(value) -> int:
    """Coerce a model-provided score to an integer in [0, 100].

    Out-of-range numbers of any magnitude are clamped; booleans, NaN and
    non-numeric values become 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return 0
    if isinstance(value, int):
        return max(0, min(100, value))
    if not isinstance(value, float) or math.isnan(value):
        return 0
    return round(max(0.0, min(100.0, value)))


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _string_list(value) -> list[str]:
    """Keep the string items of a list in order; anything else becomes []."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def normalize_evaluation(data: dict) -> EvaluationResult:
    """Build an ``EvaluationResult`` from parsed model output, filling gaps."""
    content = _section(data, "content")
    structure = _section(data, "structure")
    tone = _section(data, "tone")
    language = _section(data, "language")
    pronunciation = _section(data, "pronunciation")
    grammar = _section(data, "grammar")
    overall = _section(data, "overallEffectiveness")

    return EvaluationResult(
        content=ContentEvaluation(
            depth=_score(content.get("depth")),
            relevance=_score(content.get("relevance")),
            key_points=_string_list(content.get("keyPoints")),
            suggestions=_string_list(content.get("suggestions")),
        ),
        structure=StructureEvaluation(
            score=_score(structure.get("score")),
            feedback=_text(structure.get("feedback")),
        ),
        tone=ToneEvaluation(
            score=_score(tone.get("score")),
            feedback=_text(tone.get("feedback")),
        ),
        language=LanguageEvaluation(
            score=_score(language.get("score")),
            feedback=_text(language.get("feedback")),
            notable_expressions=_string_list(language.get("notableExpressions")),
        ),
        pronunciation=PronunciationEvaluation(
            score=_score(pronunciation.get("score")),
            issues=_string_list(pronunciation.get("issues")),
        ),
        grammar=GrammarEvaluation(
            score=_score(grammar.get("score")),
            errors=_string_list(grammar.get("errors")),
        ),
        overall_effectiveness=OverallEffectiveness(
            score=_score(overall.get("score")),
            strengths=_string_list(overall.get("strengths")),
            areas_for_improvement=_string_list(overall.get("areasForImprovement")),
        ),
    )


class SpeechEvaluator:
    """Scores a transcript against a topic with an LLM provider.

    One completion request per call: no streaming, no follow-up turns and
    no retries.
    """

    def __init__(self, llm: BaseLLM) -> None:
        """Initialize with the configured LLM provider.

        Args:
            llm: An LLM provider implementing ``BaseLLM``.
        """
        self._llm = llm

    async def evaluate(self, topic: str, transcript: str) -> EvaluationResult:
        """Evaluate one spoken answer.

        Args:
            topic: The prompt the speaker was answering.
            transcript: What the speaker said; may be empty.

        Returns:
            An ``EvaluationResult`` with every score in [0, 100] and every
            list present.

        Raises:
            EvaluationFailedError: If the LLM call itself fails.
            MalformedEvaluationError: If the reply is not a JSON object.
        """
        try:
            raw_response = await self._llm.generate(
                build_user_prompt(topic, transcript),
                system=SYSTEM_PROMPT,
                json_mode=True,
            )
        except Exception as exc:
            raise EvaluationFailedError(exc) from exc

        try:
            data = json.loads(raw_response)
        except (ValueError, TypeError) as exc:  # includes JSONDecodeError and int digit limits
            logger.warning("Evaluation response is not valid JSON: %r", str(raw_response)[:500])
            raise MalformedEvaluationError(str(raw_response)) from exc

        if not isinstance(data, dict):
            logger.warning("Evaluation response is not a JSON object: %r", raw_response[:500])
            raise MalformedEvaluationError(raw_response, reason="Response JSON is not an object")

        return normalize_evaluation(data)
