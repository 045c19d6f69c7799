"""End-to-end tests for ``POST /api/analyze-speech`` with mocked AI services."""

TOPIC = "The importance of renewable energy"


def _upload(data: bytes, filename: str = "audio.wav") -> dict:
    return {"audio": (filename, data, "audio/wav")}


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------


async def test_returns_flat_camel_case_result(async_client, sample_wav_bytes):
    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(sample_wav_bytes), data={"topic": TOPIC}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["topic"] == TOPIC
    assert body["transcription"] == "Renewable energy matters because it is clean."
    assert body["overallEffectiveness"]["score"] == 78
    assert body["content"]["keyPoints"] == ["Solar and wind are getting cheaper"]
    assert body["language"]["notableExpressions"] == ["energy transition"]
    assert set(body) == {
        "topic",
        "transcription",
        "content",
        "structure",
        "tone",
        "language",
        "pronunciation",
        "grammar",
        "overallEffectiveness",
    }


async def test_audio_bytes_reach_transcription(async_client, mock_stt, sample_wav_bytes):
    await async_client.post(
        "/api/analyze-speech", files=_upload(sample_wav_bytes, "take.wav"), data={"topic": TOPIC}
    )

    artifact = mock_stt.transcribe.call_args.args[0]
    assert artifact.data == sample_wav_bytes
    assert artifact.filename == "take.wav"
    assert artifact.content_type == "audio/wav"


async def test_silent_clip_yields_structurally_valid_result(
    async_client, mock_stt, silent_wav_bytes
):
    mock_stt.transcribe.return_value = ""

    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(silent_wav_bytes), data={"topic": TOPIC}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["transcription"] == ""
    assert 0 <= body["overallEffectiveness"]["score"] <= 100


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------


async def test_missing_topic(async_client, mock_stt, sample_wav_bytes):
    resp = await async_client.post("/api/analyze-speech", files=_upload(sample_wav_bytes))

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing audio or topic"
    assert resp.json()["stage"] == "input"
    mock_stt.transcribe.assert_not_awaited()


async def test_missing_audio(async_client):
    resp = await async_client.post("/api/analyze-speech", data={"topic": TOPIC})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing audio or topic"


async def test_empty_audio(async_client, mock_stt):
    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(b""), data={"topic": TOPIC}
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_AUDIO"
    mock_stt.transcribe.assert_not_awaited()


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------


async def test_transcription_failure(async_client, mock_stt, mock_llm, sample_wav_bytes):
    mock_stt.transcribe.side_effect = RuntimeError("OpenAI transcription error: 500")

    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(sample_wav_bytes), data={"topic": TOPIC}
    )

    assert resp.status_code == 502
    body = resp.json()
    assert body["error"] == "Transcription failed. Please try again."
    assert body["details"] == "OpenAI transcription error: 500"
    assert body["stage"] == "transcription"
    mock_llm.generate.assert_not_awaited()


async def test_malformed_evaluation_hides_raw_reply(async_client, mock_llm, sample_wav_bytes):
    mock_llm.generate.return_value = '{"content": {"depth": 70, "confidential draft'

    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(sample_wav_bytes), data={"topic": TOPIC}
    )

    assert resp.status_code == 502
    assert resp.json()["code"] == "MALFORMED_EVALUATION"
    assert "confidential" not in resp.text


async def test_evaluation_service_failure(async_client, mock_llm, sample_wav_bytes):
    mock_llm.generate.side_effect = ConnectionError("Failed to connect to OpenAI API")

    resp = await async_client.post(
        "/api/analyze-speech", files=_upload(sample_wav_bytes), data={"topic": TOPIC}
    )

    assert resp.status_code == 502
    assert resp.json()["code"] == "EVALUATION_FAILED"
    assert resp.json()["stage"] == "evaluation"
