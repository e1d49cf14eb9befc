"""Voice command pipeline package.

Modules are organised by the order in which `/process-audio` executes:

1. `ingestion` - content type and size checks on the upload.
2. `normalization` - ffmpeg conversion to mono 16 kHz WAV in scoped temp files.
3. `transcription` - speech-to-text through the configured backend.
4. `intent` - model-backed intent classification.
5. `extraction` - model-backed transaction extraction with pronoun binding.
6. `orchestrator` - the per-request state machine tying the stages together.
7. `flow` - states and allowed transitions.
"""

from .errors import VoiceCommandError
from .extraction import LlmTransactionExtractor, bind_pronoun_customers
from .flow import PipelineState
from .ingestion import read_audio_bytes, resolve_content_type, validate_upload
from .intent import LlmIntentClassifier
from .normalization import AudioNormalizer, NormalizedAudio
from .orchestrator import CommandContext, VoiceCommandPipeline
from .transcription import transcribe_audio

__all__ = [
    "AudioNormalizer",
    "CommandContext",
    "LlmIntentClassifier",
    "LlmTransactionExtractor",
    "NormalizedAudio",
    "PipelineState",
    "VoiceCommandError",
    "VoiceCommandPipeline",
    "bind_pronoun_customers",
    "read_audio_bytes",
    "resolve_content_type",
    "transcribe_audio",
    "validate_upload",
]
