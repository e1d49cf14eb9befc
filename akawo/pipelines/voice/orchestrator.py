"""Per-request driver for the voice command pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from akawo.application.interfaces import (
    IntentClassifier,
    TransactionExtractor,
    TransactionLedgerInterface,
)
from akawo.domain.models import (
    CommandKind,
    CommandResult,
    Intent,
    Language,
    TransactionRecord,
    TransactionType,
)
from akawo.services.speech import SpeechSynthesizer
from akawo.services.template_renderer import DEFAULT_RENDERER, TemplateRenderer, match_customer
from akawo.services.transcribe import TranscriptionService
from akawo.telemetry import observe_stage, record_command

from .errors import (
    AudioNormalizationError,
    BackendUnavailableError,
    ErrorKind,
    SpeechSynthesisError,
    UploadRejectedError,
    VoiceCommandError,
)
from .flow import PipelineState, can_transition
from .ingestion import validate_upload
from .normalization import AudioNormalizer
from .transcription import transcribe_audio

logger = logging.getLogger("akawo.pipeline")

_ROUTES = {
    Intent.LOG_TRANSACTION: PipelineState.LOGGING_TRANSACTION,
    Intent.QUERY_DEBTORS: PipelineState.QUERYING_DEBTORS,
    Intent.QUERY_TOTAL_INCOME: PipelineState.QUERYING_AGGREGATE,
    Intent.QUERY_TOTAL_DEBT: PipelineState.QUERYING_AGGREGATE,
    Intent.ASK_CAPABILITIES: PipelineState.RESPONDING_CAPABILITIES,
}


@dataclass
class CommandContext:
    """Mutable state of one voice command; never shared between requests."""

    owner_id: str
    language: Language
    request_id: str = field(default_factory=lambda: uuid4().hex[:12])
    state: PipelineState = PipelineState.IDLE
    history: List[Tuple[PipelineState, float]] = field(default_factory=list)
    transcript: Optional[str] = None
    intent: Optional[Intent] = None
    _entered_at: float = field(default_factory=time.perf_counter, repr=False)

    def advance(self, target: PipelineState) -> None:
        if not can_transition(self.state, target):
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {target.value}")
        now = time.perf_counter()
        elapsed = now - self._entered_at
        observe_stage(self.state.value, elapsed)
        self.history.append((self.state, elapsed))
        logger.info(
            "request=%s owner=%s %s -> %s (%.3fs)",
            self.request_id,
            self.owner_id,
            self.state.value,
            target.value,
            elapsed,
        )
        self.state = target
        self._entered_at = now

    @property
    def states(self) -> List[PipelineState]:
        """States visited so far, including the current one."""

        return [state for state, _ in self.history] + [self.state]


class _Abort(Exception):
    """Internal signal carrying the failure kind and whether speech is usable."""

    def __init__(self, kind: ErrorKind, message: str, *, speak: bool = True) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.speak = speak


class VoiceCommandPipeline:
    """Turn one spoken command into ledger changes and a spoken answer."""

    def __init__(
        self,
        *,
        normalizer: AudioNormalizer,
        transcriber: TranscriptionService,
        classifier: IntentClassifier,
        extractor: TransactionExtractor,
        ledger: TransactionLedgerInterface,
        synthesizer: SpeechSynthesizer,
        renderer: TemplateRenderer = DEFAULT_RENDERER,
        max_upload_bytes: int = 1_000_000,
    ) -> None:
        self._normalizer = normalizer
        self._transcriber = transcriber
        self._classifier = classifier
        self._extractor = extractor
        self._ledger = ledger
        self._synthesizer = synthesizer
        self._renderer = renderer
        self._max_upload_bytes = max_upload_bytes

    async def submit(
        self,
        owner_id: str,
        language: Language | str | None,
        audio_bytes: bytes,
        content_type: str | None = None,
    ) -> CommandResult:
        """Run the full pipeline; failures raise ``VoiceCommandError``."""

        context = CommandContext(owner_id=owner_id, language=Language.resolve(language))
        try:
            result = await self._run(context, audio_bytes, content_type)
        except _Abort as abort:
            raise await self._fail(context, abort) from abort

        context.advance(PipelineState.DONE)
        record_command(context.intent.value if context.intent else None, "ok")
        return result

    async def _run(
        self,
        context: CommandContext,
        audio_bytes: bytes,
        content_type: str | None,
    ) -> CommandResult:
        lang = context.language
        try:
            validate_upload(audio_bytes, content_type, self._max_upload_bytes)
        except UploadRejectedError as exc:
            logger.info("request=%s upload rejected: %s", context.request_id, exc)
            raise _Abort("input", self._renderer.not_understood(lang)) from exc

        context.advance(PipelineState.NORMALIZING)
        try:
            async with self._normalizer.normalize(audio_bytes, content_type) as audio:
                context.advance(PipelineState.TRANSCRIBING)
                transcript = await transcribe_audio(self._transcriber, audio, lang)
        except AudioNormalizationError as exc:
            logger.info("request=%s normalization failed: %s", context.request_id, exc)
            raise _Abort("input", self._renderer.not_understood(lang)) from exc
        except BackendUnavailableError as exc:
            logger.error("request=%s transcription backend down: %s", context.request_id, exc)
            raise _Abort("backend", self._renderer.apology(lang)) from exc

        if transcript is None:
            raise _Abort("input", self._renderer.not_understood(lang))
        context.transcript = transcript

        context.advance(PipelineState.CLASSIFYING_INTENT)
        try:
            intent = await self._classifier.classify(transcript)
        except BackendUnavailableError as exc:
            logger.error("request=%s intent backend down: %s", context.request_id, exc)
            raise _Abort("backend", self._renderer.apology(lang)) from exc
        context.intent = intent
        logger.info("request=%s intent=%s transcript=%r", context.request_id, intent.value, transcript)

        if intent not in _ROUTES:
            raise _Abort("input", self._renderer.info(lang))

        context.advance(_ROUTES[intent])
        records: List[TransactionRecord] = []
        if intent == Intent.LOG_TRANSACTION:
            records = await self._log_transactions(context, transcript)
            kind = CommandKind.TRANSACTION_LOGGED
            text = self._renderer.confirmation(records, lang)
        elif intent == Intent.QUERY_DEBTORS:
            debts = await self._ledger.list_for_owner(context.owner_id, TransactionType.DEBT)
            kind = CommandKind.QUERY_RESPONSE
            text = self._renderer.debtor_list(debts, lang)
        elif intent in (Intent.QUERY_TOTAL_INCOME, Intent.QUERY_TOTAL_DEBT):
            tx_type = (
                TransactionType.INCOME if intent == Intent.QUERY_TOTAL_INCOME else TransactionType.DEBT
            )
            customer = match_customer(transcript, await self._ledger.customers(context.owner_id))
            total = await self._ledger.total(context.owner_id, tx_type, customer)
            kind = CommandKind.QUERY_RESPONSE
            text = self._renderer.total(total, tx_type, lang, customer)
        else:
            kind = CommandKind.INFO_RESPONSE
            text = self._renderer.capabilities(lang)

        context.advance(PipelineState.COMPOSING_RESPONSE)
        try:
            audio_content = await self._synthesizer.synthesize(text, lang, context.owner_id)
        except (SpeechSynthesisError, BackendUnavailableError) as exc:
            logger.error("request=%s speech synthesis failed: %s", context.request_id, exc)
            raise _Abort("backend", self._renderer.apology(lang), speak=False) from exc

        return CommandResult(
            kind=kind,
            intent=intent,
            transcript=transcript,
            confirmation_text=text,
            audio_content=audio_content,
            transactions=records,
        )

    async def _log_transactions(self, context: CommandContext, transcript: str) -> List[TransactionRecord]:
        try:
            parsed = await self._extractor.extract(transcript, context.language)
        except BackendUnavailableError as exc:
            logger.error("request=%s extraction backend down: %s", context.request_id, exc)
            raise _Abort("backend", self._renderer.apology(context.language)) from exc

        if not parsed:
            raise _Abort("input", self._renderer.not_understood(context.language))
        return await self._ledger.add_many(context.owner_id, parsed)

    async def _fail(self, context: CommandContext, abort: _Abort) -> VoiceCommandError:
        audio_content: Optional[str] = None
        if abort.speak:
            try:
                audio_content = await self._synthesizer.synthesize(
                    abort.message, context.language, context.owner_id
                )
            except (SpeechSynthesisError, BackendUnavailableError) as exc:
                logger.warning("request=%s could not speak failure message: %s", context.request_id, exc)

        context.advance(PipelineState.FAILED)
        record_command(context.intent.value if context.intent else None, abort.kind)
        return VoiceCommandError(abort.kind, abort.message, audio_content)

    async def list_transactions(self, owner_id: str) -> List[TransactionRecord]:
        return await self._ledger.list_for_owner(owner_id)

    async def delete_transaction(self, owner_id: str, record_id: UUID) -> bool:
        """Delete one record; ``False`` when it is missing or belongs to someone else."""

        deleted = await self._ledger.delete(owner_id, record_id)
        logger.info("owner=%s delete record=%s deleted=%s", owner_id, record_id, deleted)
        return deleted

    async def delete_transactions_on(self, owner_id: str, day: date) -> int:
        count = await self._ledger.delete_on(owner_id, day)
        logger.info("owner=%s delete day=%s count=%s", owner_id, day.isoformat(), count)
        return count


__all__ = ["CommandContext", "VoiceCommandPipeline"]
