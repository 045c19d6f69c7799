"""Shared pytest fixtures for the SpeechCoach test suite.

Provides mock LLM/STT providers, a canned evaluation payload and audio
artifacts used across unit and integration tests.
"""

import io
import json
import math
from unittest.mock import AsyncMock

import numpy as np
import pytest
import soundfile as sf

# ---------------------------------------------------------------------------
# Evaluation payloads
# ---------------------------------------------------------------------------


def make_evaluation_payload(overall: int = 78) -> dict:
    """A complete rubric reply in the camelCase shape the LLM is asked for."""
    return {
        "content": {
            "depth": 70,
            "relevance": 85,
            "keyPoints": ["Solar and wind are getting cheaper"],
            "suggestions": ["Add a concrete example"],
        },
        "structure": {"score": 72, "feedback": "Clear opening, abrupt ending."},
        "tone": {"score": 80, "feedback": "Confident and engaged."},
        "language": {
            "score": 75,
            "feedback": "Good range of vocabulary.",
            "notableExpressions": ["energy transition"],
        },
        "pronunciation": {"score": 82, "issues": []},
        "grammar": {"score": 77, "errors": ["'less emissions' should be 'fewer emissions'"]},
        "overallEffectiveness": {
            "score": overall,
            "strengths": ["Stayed on topic"],
            "areasForImprovement": ["Stronger conclusion"],
        },
    }


@pytest.fixture
def evaluation_payload():
    return make_evaluation_payload()


# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm(evaluation_payload):
    """Create a mock LLM provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface whose
        ``generate`` returns a complete rubric JSON reply.
    """
    from speechcoach.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = json.dumps(evaluation_payload)
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcript.
    """
    from speechcoach.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = "  Renewable energy matters because it is clean.  "
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


def _wav_bytes(samples: np.ndarray, sample_rate: int = 16000) -> bytes:
    buffer = io.BytesIO()
    sf.write(buffer, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


@pytest.fixture
def sample_wav_bytes():
    """1 second of a 440Hz sine wave as a 16kHz mono WAV file."""
    t = np.arange(16000) / 16000
    return _wav_bytes((0.5 * np.sin(2 * math.pi * 440.0 * t)).astype(np.float32))


@pytest.fixture
def silent_wav_bytes():
    """3 seconds of silence as a 16kHz mono WAV file."""
    return _wav_bytes(np.zeros(3 * 16000, dtype=np.float32))


@pytest.fixture
def sample_artifact(sample_wav_bytes):
    from speechcoach.core.models import AudioArtifact

    return AudioArtifact(data=sample_wav_bytes)


@pytest.fixture
def empty_artifact():
    from speechcoach.core.models import AudioArtifact

    return AudioArtifact(data=b"")
