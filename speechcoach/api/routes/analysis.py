"""
Speech analysis endpoint.

Accepts a multipart form with the recorded ``audio`` and the ``topic`` it
answers, and returns the flattened analysis. Both fields are declared
optional so that their absence is reported by the pipeline as a 400
``Missing audio or topic`` instead of a schema error.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, File, Form, UploadFile

from speechcoach.core.models import AnalysisResult, AudioArtifact, ErrorResponse
from speechcoach.services.pipeline import AnalysisPipeline, create_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@lru_cache
def get_pipeline() -> AnalysisPipeline:
    """Return the process-wide pipeline built from settings."""
    return create_pipeline()


@router.post(
    "/analyze-speech",
    response_model=AnalysisResult,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def analyze_speech(
    audio: UploadFile | None = File(None),
    topic: str | None = Form(None),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalysisResult:
    """Transcribe the recording and evaluate it against the topic."""
    artifact = None
    if audio is not None:
        artifact = AudioArtifact(
            data=await audio.read(),
            content_type=audio.content_type or "application/octet-stream",
            filename=audio.filename or "audio.wav",
        )
        await audio.close()
    return await pipeline.run(artifact, topic)
