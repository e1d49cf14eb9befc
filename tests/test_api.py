"""HTTP surface: /process-audio and the ledger endpoints."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from akawo.config.settings import settings
from akawo.controllers.dependencies import get_current_owner, get_voice_pipeline
from akawo.domain.models import (
    CommandKind,
    CommandResult,
    Intent,
    TransactionRecord,
    TransactionType,
)
from akawo.main import app
from akawo.pipelines.voice import VoiceCommandError

RECORD = TransactionRecord(
    id=UUID("8f14e45f-ceea-467a-9575-3e2b4a1c0d11"),
    owner="trader-1",
    customer="Ada",
    details="rice",
    amount=2000,
    type=TransactionType.INCOME,
    created_at=datetime(2024, 5, 1, 9, 30),
)


class FakePipeline:
    def __init__(self) -> None:
        self.error: VoiceCommandError | None = None
        self.submitted: list[tuple] = []
        self.deleted_days: list[tuple[str, date]] = []

    async def submit(self, owner_id, language, audio_bytes, content_type):
        self.submitted.append((owner_id, language, audio_bytes, content_type))
        if self.error is not None:
            raise self.error
        return CommandResult(
            kind=CommandKind.TRANSACTION_LOGGED,
            intent=Intent.LOG_TRANSACTION,
            transcript="Ada paid 2000 for rice",
            confirmation_text="Alright. I've recorded that Ada paid ₦2,000 for rice.",
            audio_content="QVVESU8=",
            transactions=[RECORD],
        )

    async def list_transactions(self, owner_id):
        return [RECORD] if owner_id == RECORD.owner else []

    async def delete_transaction(self, owner_id, record_id):
        return owner_id == RECORD.owner and record_id == RECORD.id

    async def delete_transactions_on(self, owner_id, day):
        self.deleted_days.append((owner_id, day))
        return 3


@pytest.fixture
def pipeline() -> FakePipeline:
    return FakePipeline()


@pytest.fixture
def client(pipeline: FakePipeline):
    async def fake_owner() -> str:
        return "trader-1"

    app.dependency_overrides[get_current_owner] = fake_owner
    app.dependency_overrides[get_voice_pipeline] = lambda: pipeline

    yield TestClient(app)

    app.dependency_overrides.clear()


def _upload(content_type: str = "audio/ogg"):
    return {"audio": ("voice.ogg", b"OggS-fake-bytes", content_type)}


def test_process_audio_success(client: TestClient, pipeline: FakePipeline) -> None:
    response = client.post("/api/v1/akawo/process-audio", files=_upload(), data={"language": "yo"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["confirmationText"] == "Alright. I've recorded that Ada paid ₦2,000 for rice."
    assert payload["audioContent"] == "QVVESU8="
    assert payload["transactions"][0]["createdAt"].startswith("2024-05-01T09:30")
    owner_id, language, audio_bytes, content_type = pipeline.submitted[0]
    assert (owner_id, language.value, audio_bytes, content_type) == (
        "trader-1",
        "yo",
        b"OggS-fake-bytes",
        "audio/ogg",
    )


def test_language_defaults_to_english(client: TestClient, pipeline: FakePipeline) -> None:
    client.post("/api/v1/akawo/process-audio", files=_upload())

    assert pipeline.submitted[0][1].value == "en"


@pytest.mark.parametrize(("kind", "status_code"), [("input", 400), ("backend", 502)])
def test_pipeline_errors_map_to_status(
    client: TestClient, pipeline: FakePipeline, kind: str, status_code: int
) -> None:
    pipeline.error = VoiceCommandError(kind, "Sorry, I did not understand.", "U09SUlk=")

    response = client.post("/api/v1/akawo/process-audio", files=_upload())

    assert response.status_code == status_code
    assert response.json()["detail"] == {
        "message": "Sorry, I did not understand.",
        "audioContent": "U09SUlk=",
    }


def test_missing_audio_field_is_rejected(client: TestClient) -> None:
    response = client.post("/api/v1/akawo/process-audio", data={"language": "en"})

    assert response.status_code == 422


def test_list_transactions(client: TestClient) -> None:
    response = client.get("/api/v1/akawo/transactions")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [str(RECORD.id)]


def test_delete_transaction(client: TestClient) -> None:
    assert client.delete(f"/api/v1/akawo/transactions/{RECORD.id}").status_code == 200
    assert client.delete(f"/api/v1/akawo/transactions/{uuid4()}").status_code == 404


def test_delete_transactions_by_date(client: TestClient, pipeline: FakePipeline) -> None:
    response = client.delete("/api/v1/akawo/transactions", params={"date": "2024-05-01"})

    assert response.status_code == 200
    assert response.json()["deletedCount"] == 3
    assert pipeline.deleted_days == [("trader-1", date(2024, 5, 1))]


def test_delete_by_date_requires_valid_date(client: TestClient) -> None:
    response = client.delete("/api/v1/akawo/transactions", params={"date": "yesterday"})

    assert response.status_code == 422


def test_requests_without_token_are_unauthorized(pipeline: FakePipeline) -> None:
    app.dependency_overrides[get_voice_pipeline] = lambda: pipeline
    try:
        client = TestClient(app)
        assert client.get("/api/v1/akawo/transactions").status_code == 401
        bad = client.get(
            "/api/v1/akawo/transactions",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert bad.status_code == 401
    finally:
        app.dependency_overrides.clear()


def test_valid_token_resolves_owner(pipeline: FakePipeline) -> None:
    token = jwt.encode(
        {"sub": "trader-1"},
        settings.security.jwt_secret_key.get_secret_value(),
        algorithm=settings.security.jwt_algorithm,
    )
    app.dependency_overrides[get_voice_pipeline] = lambda: pipeline
    try:
        response = TestClient(app).get(
            "/api/v1/akawo/transactions",
            headers={"Authorization": f"Bearer {token}"},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_pipeline_missing_returns_503() -> None:
    async def fake_owner() -> str:
        return "trader-1"

    app.dependency_overrides[get_current_owner] = fake_owner
    try:
        response = TestClient(app).get("/api/v1/akawo/transactions")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503


def test_health_and_metrics() -> None:
    client = TestClient(app)

    assert client.get("/health").json()["status"] == "healthy"
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "akawo_voice_commands" in metrics.text
