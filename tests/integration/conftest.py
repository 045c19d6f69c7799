"""Integration test fixtures for SpeechCoach.

Provides an async HTTP client against a fresh app whose analysis pipeline
is built from mocked STT/LLM providers, so requests exercise the real
route, pipeline, clients and error handlers.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from speechcoach.api.app import create_app
from speechcoach.api.routes.analysis import get_pipeline
from speechcoach.services.evaluation import SpeechEvaluator
from speechcoach.services.pipeline import AnalysisPipeline
from speechcoach.services.transcription import TranscriptionClient


@pytest.fixture
def pipeline(mock_stt, mock_llm):
    return AnalysisPipeline(
        transcriber=TranscriptionClient(mock_stt),
        evaluator=SpeechEvaluator(mock_llm),
    )


@pytest.fixture
def app(pipeline):
    """Create a fresh FastAPI application using the mocked pipeline."""
    app = create_app()
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    return app


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
