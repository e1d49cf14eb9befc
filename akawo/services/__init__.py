"""Service layer helpers for external integrations."""

from .errors import (
    BackendUnavailableError,
    LlmInvocationError,
    SpeechSynthesisError,
    TranscriptionError,
)
from .intent_detector import LexicalIntentClassifier
from .llm_client import BedrockLlmClient, GeminiLlmClient, TextGenerationClient
from .numerals import NumeralNormalizer
from .speech import PollySpeechSynthesizer, SpeechSynthesizer, SpitchSpeechSynthesizer
from .template_renderer import ResponseKind, TemplateRenderer
from .transaction_parser import PatternTransactionExtractor
from .transcribe import (
    GeminiTranscriptionService,
    TranscriptionService,
    WhisperTranscriptionService,
)
from .voices import VoiceSelector

__all__ = [
    "BackendUnavailableError",
    "BedrockLlmClient",
    "GeminiLlmClient",
    "GeminiTranscriptionService",
    "LexicalIntentClassifier",
    "LlmInvocationError",
    "NumeralNormalizer",
    "PatternTransactionExtractor",
    "PollySpeechSynthesizer",
    "ResponseKind",
    "SpeechSynthesisError",
    "SpeechSynthesizer",
    "SpitchSpeechSynthesizer",
    "TemplateRenderer",
    "TextGenerationClient",
    "TranscriptionError",
    "TranscriptionService",
    "VoiceSelector",
    "WhisperTranscriptionService",
]
