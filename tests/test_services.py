"""External backend clients with stubbed transports."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from jose import jwt

from akawo.config.settings import BedrockConfig, GeminiConfig, SecurityConfig, WhisperConfig
from akawo.domain.models import Language
from akawo.pipelines.voice import NormalizedAudio, resolve_content_type, transcribe_audio, validate_upload
from akawo.pipelines.voice.errors import (
    BackendUnavailableError,
    LlmInvocationError,
    TranscriptionError,
    UploadRejectedError,
)
from akawo.services.llm_client import BedrockLlmClient, GeminiLlmClient
from akawo.services.transcribe import TranscriptionService, WhisperTranscriptionService
from akawo.utils import AuthenticationError, decode_access_token

WHISPER_URL = "https://whisper.example.test/models/whisper"


def _whisper(handler) -> WhisperTranscriptionService:
    config = WhisperConfig(WHISPER_ENDPOINT_URL=WHISPER_URL, HUGGINGFACE_API_KEY="hf_test")
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WhisperTranscriptionService(config, client=client)


@pytest.mark.anyio
async def test_whisper_posts_wav_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"text": "  Ada paid 2000  "})

    text = await _whisper(handler).transcribe(b"RIFF-wav", Language.EN)

    assert text == "Ada paid 2000"
    assert seen[0].headers["Authorization"] == "Bearer hf_test"
    assert seen[0].headers["Content-Type"] == "audio/wav"
    assert seen[0].content == b"RIFF-wav"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"error": "Model is loading"}),
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json={"text": "   "}),
        httpx.Response(200, json=["not", "a", "dict"]),
    ],
)
async def test_whisper_unusable_responses_are_none(response: httpx.Response) -> None:
    assert await _whisper(lambda request: response).transcribe(b"wav", Language.YO) is None


@pytest.mark.anyio
async def test_whisper_connection_failure_is_backend_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUnavailableError) as excinfo:
        await _whisper(handler).transcribe(b"wav", Language.EN)

    assert excinfo.value.backend == "whisper"


class FailingTranscriber(TranscriptionService):
    name = "failing"

    async def transcribe(self, audio, language):
        raise TranscriptionError("rejected")


@pytest.mark.anyio
async def test_transcription_stage_turns_rejections_into_none() -> None:
    audio = NormalizedAudio(b"wav", 16000, 16000, 1.0, Path("/tmp/x.wav"))

    assert await transcribe_audio(FailingTranscriber(), audio, Language.HA) is None


class FakeBedrock:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.anyio
async def test_bedrock_joins_text_blocks() -> None:
    bedrock = FakeBedrock(
        response={"output": {"message": {"content": [{"text": "query_"}, {"image": {}}, {"text": "debtors"}]}}}
    )
    client = BedrockLlmClient(bedrock, BedrockConfig())

    text = await client.invoke(system_prompt="classify", user_prompt="who owes me")

    assert text == "query_\ndebtors"
    call = bedrock.calls[0]
    assert call["system"] == [{"text": "classify"}]
    assert call["messages"][0]["content"] == [{"text": "who owes me"}]
    assert call["inferenceConfig"]["temperature"] == 0.0


@pytest.mark.anyio
async def test_bedrock_errors_are_classified() -> None:
    throttled = ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "Converse")
    offline = EndpointConnectionError(endpoint_url="https://bedrock-runtime.us-east-1.amazonaws.com")

    with pytest.raises(LlmInvocationError):
        await BedrockLlmClient(FakeBedrock(error=throttled), BedrockConfig()).invoke(
            system_prompt="s", user_prompt="u"
        )
    with pytest.raises(BackendUnavailableError):
        await BedrockLlmClient(FakeBedrock(error=offline), BedrockConfig()).invoke(
            system_prompt="s", user_prompt="u"
        )


@pytest.mark.anyio
async def test_bedrock_empty_output_is_none() -> None:
    bedrock = FakeBedrock(response={"output": {"message": {"content": []}}})

    assert await BedrockLlmClient(bedrock, BedrockConfig()).invoke(system_prompt="s", user_prompt="u") is None


@pytest.mark.anyio
async def test_gemini_passes_system_instruction() -> None:
    calls: list[dict] = []

    async def generate_content(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(text=json.dumps([]))

    fake = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
    client = GeminiLlmClient(fake, GeminiConfig(model_name="gemini-test"))

    assert await client.invoke(system_prompt="extract", user_prompt="Ada paid") == "[]"
    assert calls[0]["model"] == "gemini-test"
    assert calls[0]["config"]["system_instruction"] == "extract"


@pytest.mark.parametrize(
    ("content_type", "filename", "expected"),
    [
        ("audio/ogg; codecs=opus", None, "audio/ogg"),
        ("", "voice.mp3", "audio/mpeg"),
        (None, None, ""),
    ],
)
def test_resolve_content_type(content_type, filename, expected) -> None:
    assert resolve_content_type(content_type, filename) == expected


def test_validate_upload_accepts_generic_types() -> None:
    validate_upload(b"bytes", "application/octet-stream", 10)
    validate_upload(b"bytes", "", 10)

    with pytest.raises(UploadRejectedError):
        validate_upload(b"bytes", "image/png", 10)


def test_decode_access_token() -> None:
    security = SecurityConfig(JWT_SECRET="unit-test-secret")
    token = jwt.encode({"sub": "trader-5"}, "unit-test-secret", algorithm="HS256")

    assert decode_access_token(token, security).sub == "trader-5"

    with pytest.raises(AuthenticationError):
        decode_access_token(jwt.encode({"sub": "  "}, "unit-test-secret", algorithm="HS256"), security)
    with pytest.raises(AuthenticationError):
        decode_access_token(jwt.encode({"sub": "trader-5"}, "other-secret", algorithm="HS256"), security)
