"""End-to-end voice command pipeline with in-process fakes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest

from akawo.application.interfaces import IntentClassifier, TransactionLedgerInterface
from akawo.domain.models import (
    CommandKind,
    Intent,
    Language,
    TransactionRecord,
    TransactionType,
)
from akawo.pipelines.voice import (
    CommandContext,
    NormalizedAudio,
    PipelineState,
    VoiceCommandError,
    VoiceCommandPipeline,
)
from akawo.pipelines.voice.errors import (
    AudioNormalizationError,
    BackendUnavailableError,
    SpeechSynthesisError,
)
from akawo.services.intent_detector import LexicalIntentClassifier
from akawo.services.speech import SpeechSynthesizer
from akawo.services.template_renderer import DEFAULT_RENDERER
from akawo.services.transaction_parser import PatternTransactionExtractor
from akawo.services.transcribe import TranscriptionService

WAV = b"RIFF" + b"\x00" * 64


class FakeNormalizer:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.opened = 0
        self.released = 0

    @asynccontextmanager
    async def normalize(self, raw_audio, content_type=None):
        if self.error is not None:
            raise self.error
        self.opened += 1
        try:
            yield NormalizedAudio(
                wav_bytes=WAV,
                sample_rate=16000,
                sample_count=16000,
                duration_seconds=1.0,
                path=Path("/tmp/fake.wav"),
            )
        finally:
            self.released += 1


class FakeTranscriber(TranscriptionService):
    name = "fake"

    def __init__(self, transcript=None, error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error

    async def transcribe(self, audio, language):
        if self.error is not None:
            raise self.error
        return self.transcript


class FixedClassifier(IntentClassifier):
    def __init__(self, intent: Intent | None = None, error: Exception | None = None) -> None:
        self.intent = intent
        self.error = error

    async def classify(self, text):
        if self.error is not None:
            raise self.error
        return self.intent


class MemoryLedger(TransactionLedgerInterface):
    def __init__(self) -> None:
        self.records: list[TransactionRecord] = []

    async def add_many(self, owner, transactions):
        created = [
            TransactionRecord(
                id=uuid4(),
                owner=owner,
                customer=tx.customer,
                details=tx.details,
                amount=tx.amount,
                type=tx.type,
                created_at=datetime(2024, 5, 1, 9, 30),
            )
            for tx in transactions
        ]
        self.records.extend(created)
        return created

    async def list_for_owner(self, owner, tx_type=None):
        return [
            record
            for record in self.records
            if record.owner == owner and (tx_type is None or record.type == tx_type)
        ]

    async def customers(self, owner):
        return sorted({record.customer for record in self.records if record.owner == owner})

    async def total(self, owner, tx_type, customer=None):
        return sum(
            record.amount
            for record in await self.list_for_owner(owner, tx_type)
            if customer is None or record.customer.lower() == customer.lower()
        )

    async def delete(self, owner, record_id):
        before = len(self.records)
        self.records = [r for r in self.records if not (r.owner == owner and r.id == record_id)]
        return len(self.records) < before

    async def delete_on(self, owner, day):
        before = len(self.records)
        self.records = [
            r for r in self.records if not (r.owner == owner and r.created_at.date() == day)
        ]
        return before - len(self.records)


class FakeSynthesizer(SpeechSynthesizer):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.spoken: list[tuple[str, Language]] = []

    async def synthesize(self, text, language, owner_id):
        if self.error is not None:
            raise self.error
        self.spoken.append((text, language))
        return "QVVESU8="


def _pipeline(
    *,
    transcript="Ngozi paid one thousand for akpụ, remaining two thousand",
    transcriber=None,
    classifier=None,
    normalizer=None,
    ledger=None,
    synthesizer=None,
    max_upload_bytes=1_000_000,
):
    return VoiceCommandPipeline(
        normalizer=normalizer or FakeNormalizer(),
        transcriber=transcriber or FakeTranscriber(transcript),
        classifier=classifier or LexicalIntentClassifier.from_directory(),
        extractor=PatternTransactionExtractor(),
        ledger=ledger if ledger is not None else MemoryLedger(),
        synthesizer=synthesizer or FakeSynthesizer(),
        max_upload_bytes=max_upload_bytes,
    )


@pytest.mark.anyio
async def test_igbo_payment_and_remaining_balance_are_logged() -> None:
    ledger = MemoryLedger()
    synthesizer = FakeSynthesizer()
    normalizer = FakeNormalizer()
    pipeline = _pipeline(ledger=ledger, synthesizer=synthesizer, normalizer=normalizer)

    result = await pipeline.submit("trader-1", "ig", b"ogg-bytes", "audio/ogg")

    assert result.kind == CommandKind.TRANSACTION_LOGGED
    assert result.intent == Intent.LOG_TRANSACTION
    assert [(r.customer, r.details, r.amount, r.type) for r in ledger.records] == [
        ("Ngozi", "akpụ", 1000, TransactionType.INCOME),
        ("Ngozi", "Remaining balance for akpụ", 2000, TransactionType.DEBT),
    ]
    assert result.confirmation_text == "Ọ dị mma. Edeela m: ịkwụ ụgwọ ₦1,000 na ụgwọ ₦2,000 maka Ngozi."
    assert result.audio_content == "QVVESU8="
    assert synthesizer.spoken == [(result.confirmation_text, Language.IG)]
    assert normalizer.opened == normalizer.released == 1


@pytest.mark.anyio
async def test_debtor_query_reads_only_the_owners_debts() -> None:
    ledger = MemoryLedger()
    await ledger.add_many("trader-1", PatternTransactionExtractor().parse("Ada owes 3000", "en"))
    await ledger.add_many("trader-2", PatternTransactionExtractor().parse("Bola owes 900", "en"))
    pipeline = _pipeline(transcript="Who owes me money?", ledger=ledger)

    result = await pipeline.submit("trader-1", "en", b"bytes", "audio/mpeg")

    assert result.kind == CommandKind.QUERY_RESPONSE
    assert result.confirmation_text == "Here are the people who owe you money: Ada, ₦3,000."


@pytest.mark.anyio
async def test_total_query_scoped_to_named_customer() -> None:
    ledger = MemoryLedger()
    await ledger.add_many("trader-1", PatternTransactionExtractor().parse("Ada paid 1000, Bola paid 500", "en"))
    pipeline = _pipeline(
        transcript="how much has Ada paid",
        classifier=FixedClassifier(Intent.QUERY_TOTAL_INCOME),
        ledger=ledger,
    )

    result = await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert result.confirmation_text == "Your total income from Ada is ₦1,000."


@pytest.mark.anyio
async def test_capabilities_reply() -> None:
    pipeline = _pipeline(transcript="Sannu", classifier=FixedClassifier(Intent.ASK_CAPABILITIES))

    result = await pipeline.submit("trader-1", "ha", b"bytes", None)

    assert result.kind == CommandKind.INFO_RESPONSE
    assert result.confirmation_text == DEFAULT_RENDERER.capabilities(Language.HA)


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("audio", "content_type", "limit"),
    [(b"", "audio/wav", 1000), (b"x" * 2000, "audio/wav", 1000), (b"hello", "text/plain", 1000)],
)
async def test_rejected_uploads_are_input_errors(audio, content_type, limit) -> None:
    normalizer = FakeNormalizer()
    pipeline = _pipeline(normalizer=normalizer, max_upload_bytes=limit)

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "yo", audio, content_type)

    assert excinfo.value.kind == "input"
    assert excinfo.value.message == DEFAULT_RENDERER.not_understood(Language.YO)
    assert excinfo.value.audio_content == "QVVESU8="
    assert normalizer.opened == 0


@pytest.mark.anyio
async def test_undecodable_audio_is_an_input_error() -> None:
    pipeline = _pipeline(normalizer=FakeNormalizer(error=AudioNormalizationError("bad container")))

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"junk", "audio/webm")

    assert excinfo.value.kind == "input"


@pytest.mark.anyio
@pytest.mark.parametrize("transcript", [None, ""])
async def test_silence_is_an_input_error(transcript) -> None:
    pipeline = _pipeline(transcriber=FakeTranscriber(transcript))

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert excinfo.value.kind == "input"
    assert excinfo.value.message.startswith("Sorry, I did not understand")


@pytest.mark.anyio
async def test_transcription_outage_is_a_backend_error() -> None:
    normalizer = FakeNormalizer()
    pipeline = _pipeline(
        normalizer=normalizer,
        transcriber=FakeTranscriber(error=BackendUnavailableError("whisper")),
    )

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "ig", b"bytes", "audio/wav")

    assert excinfo.value.kind == "backend"
    assert excinfo.value.message == DEFAULT_RENDERER.apology(Language.IG)
    assert normalizer.released == 1


@pytest.mark.anyio
async def test_classifier_outage_is_a_backend_error() -> None:
    pipeline = _pipeline(classifier=FixedClassifier(error=BackendUnavailableError("bedrock")))

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert excinfo.value.kind == "backend"


@pytest.mark.anyio
async def test_unknown_intent_replies_with_info() -> None:
    ledger = MemoryLedger()
    pipeline = _pipeline(transcript="the weather is nice", ledger=ledger)

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert excinfo.value.kind == "input"
    assert excinfo.value.message == DEFAULT_RENDERER.info(Language.EN)
    assert ledger.records == []


@pytest.mark.anyio
async def test_statement_without_amounts_writes_nothing() -> None:
    ledger = MemoryLedger()
    pipeline = _pipeline(
        transcript="I sold three red palm oils to Emma",
        classifier=FixedClassifier(Intent.LOG_TRANSACTION),
        ledger=ledger,
    )

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert excinfo.value.kind == "input"
    assert ledger.records == []


@pytest.mark.anyio
async def test_speech_failure_is_a_backend_error_without_audio() -> None:
    pipeline = _pipeline(synthesizer=FakeSynthesizer(error=SpeechSynthesisError("voice missing")))

    with pytest.raises(VoiceCommandError) as excinfo:
        await pipeline.submit("trader-1", "en", b"bytes", "audio/wav")

    assert excinfo.value.kind == "backend"
    assert excinfo.value.audio_content is None


@pytest.mark.anyio
async def test_unknown_language_code_answers_in_english() -> None:
    pipeline = _pipeline(transcript="Hello", classifier=FixedClassifier(Intent.ASK_CAPABILITIES))

    result = await pipeline.submit("trader-1", "fr", b"bytes", "audio/wav")

    assert result.confirmation_text == DEFAULT_RENDERER.capabilities(Language.EN)


def test_context_rejects_illegal_transitions() -> None:
    context = CommandContext(owner_id="trader-1", language=Language.EN)

    context.advance(PipelineState.NORMALIZING)
    with pytest.raises(RuntimeError):
        context.advance(PipelineState.COMPOSING_RESPONSE)

    context.advance(PipelineState.FAILED)
    assert context.states == [PipelineState.IDLE, PipelineState.NORMALIZING, PipelineState.FAILED]
    with pytest.raises(RuntimeError):
        context.advance(PipelineState.FAILED)


@pytest.mark.anyio
async def test_deletes_are_owner_scoped() -> None:
    ledger = MemoryLedger()
    (record,) = await ledger.add_many("trader-1", PatternTransactionExtractor().parse("Ada paid 500", "en"))
    pipeline = _pipeline(ledger=ledger)

    assert await pipeline.delete_transaction("trader-2", record.id) is False
    assert await pipeline.delete_transaction("trader-1", record.id) is True
    assert await pipeline.delete_transactions_on("trader-1", record.created_at.date()) == 0
