"""Startup wiring: build the voice pipeline from configuration."""

from __future__ import annotations

import logging

import spitch
from google import genai

from akawo.config.settings import Settings
from akawo.database import session_scope
from akawo.infrastructure.persistence.transactions_sqlalchemy import SQLAlchemyTransactionLedger
from akawo.pipelines.voice.errors import ConfigurationError
from akawo.pipelines.voice.extraction import LlmTransactionExtractor
from akawo.pipelines.voice.intent import LlmIntentClassifier
from akawo.pipelines.voice.normalization import AudioNormalizer
from akawo.pipelines.voice.orchestrator import VoiceCommandPipeline
from akawo.services.aws import create_boto3_client
from akawo.services.intent_detector import LexicalIntentClassifier
from akawo.services.llm_client import BedrockLlmClient, GeminiLlmClient, TextGenerationClient
from akawo.services.numerals import NumeralNormalizer
from akawo.services.speech import PollySpeechSynthesizer, SpeechSynthesizer, SpitchSpeechSynthesizer
from akawo.services.transaction_parser import PatternTransactionExtractor
from akawo.services.transcribe import (
    GeminiTranscriptionService,
    TranscriptionService,
    WhisperTranscriptionService,
)

logger = logging.getLogger(__name__)


def _gemini_client(config: Settings) -> genai.Client:
    if config.gemini.api_key is None:
        raise ConfigurationError("GEMINI_API_KEY is required for the Gemini backends")
    return genai.Client(api_key=config.gemini.api_key.get_secret_value())


def _needs_llm(config: Settings) -> bool:
    pipeline = config.pipeline
    return pipeline.intent_strategy == "llm" or pipeline.extraction_strategy == "llm"


def build_transcriber(config: Settings) -> TranscriptionService:
    if config.pipeline.transcription_backend == "gemini":
        return GeminiTranscriptionService(_gemini_client(config), config.gemini)
    if config.whisper.api_key is None:
        raise ConfigurationError("HUGGINGFACE_API_KEY is required for Whisper transcription")
    return WhisperTranscriptionService(config.whisper)


def build_llm_client(config: Settings) -> TextGenerationClient:
    if config.pipeline.llm_backend == "gemini":
        return GeminiLlmClient(_gemini_client(config), config.gemini)
    client = create_boto3_client("bedrock-runtime", region_name=config.bedrock.region, aws=config.aws)
    return BedrockLlmClient(client, config.bedrock)


def build_synthesizer(config: Settings) -> SpeechSynthesizer:
    if config.pipeline.speech_backend == "polly":
        client = create_boto3_client("polly", region_name=config.polly.region, aws=config.aws)
        return PollySpeechSynthesizer(client, config.polly)
    if config.spitch.api_key is None:
        raise ConfigurationError("SPITCH_API_KEY is required for Spitch speech synthesis")
    return SpitchSpeechSynthesizer(spitch.Spitch(api_key=config.spitch.api_key.get_secret_value()))


def build_pipeline(config: Settings) -> VoiceCommandPipeline:
    """Create every collaborator once; raises ``ConfigurationError`` on missing credentials."""

    llm_client = build_llm_client(config) if _needs_llm(config) else None

    if config.pipeline.intent_strategy == "llm":
        classifier = LlmIntentClassifier(llm_client)
    else:
        classifier = LexicalIntentClassifier.from_directory()

    if config.pipeline.extraction_strategy == "llm":
        extractor = LlmTransactionExtractor(llm_client)
    else:
        extractor = PatternTransactionExtractor(NumeralNormalizer())

    pipeline = VoiceCommandPipeline(
        normalizer=AudioNormalizer(config.pipeline.ffmpeg_binary),
        transcriber=build_transcriber(config),
        classifier=classifier,
        extractor=extractor,
        ledger=SQLAlchemyTransactionLedger(session_scope),
        synthesizer=build_synthesizer(config),
        max_upload_bytes=config.pipeline.max_upload_bytes,
    )
    logger.info(
        "Voice pipeline ready transcription=%s llm=%s intent=%s extraction=%s speech=%s",
        config.pipeline.transcription_backend,
        config.pipeline.llm_backend if llm_client else "none",
        config.pipeline.intent_strategy,
        config.pipeline.extraction_strategy,
        config.pipeline.speech_backend,
    )
    return pipeline


__all__ = [
    "build_llm_client",
    "build_pipeline",
    "build_synthesizer",
    "build_transcriber",
]
