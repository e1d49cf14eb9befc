"""High-level map of the voice command pipeline.

``VoiceCommandPipeline.submit`` in ``orchestrator`` drives the states below;
this module documents the canonical execution order so contributors can
navigate the stages:

1. ``ingestion`` - validate the upload type and size.
2. ``normalization`` - convert it to mono 16 kHz PCM WAV with ffmpeg.
3. ``transcription`` - call the configured speech-to-text backend.
4. ``intent`` - classify the transcript into the closed intent set.
5. ``extraction`` - turn a transaction statement into ledger entries.
6. ledger read or write, then response composition.
7. speech synthesis of the localized response.
"""

from __future__ import annotations

from enum import Enum


class PipelineState(str, Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    TRANSCRIBING = "transcribing"
    CLASSIFYING_INTENT = "classifying_intent"
    LOGGING_TRANSACTION = "logging_transaction"
    QUERYING_DEBTORS = "querying_debtors"
    QUERYING_AGGREGATE = "querying_aggregate"
    RESPONDING_CAPABILITIES = "responding_capabilities"
    COMPOSING_RESPONSE = "composing_response"
    DONE = "done"
    FAILED = "failed"


# Allowed forward transitions; any state may also move to FAILED.
TRANSITIONS = {
    PipelineState.IDLE: {PipelineState.NORMALIZING},
    PipelineState.NORMALIZING: {PipelineState.TRANSCRIBING},
    PipelineState.TRANSCRIBING: {PipelineState.CLASSIFYING_INTENT},
    PipelineState.CLASSIFYING_INTENT: {
        PipelineState.LOGGING_TRANSACTION,
        PipelineState.QUERYING_DEBTORS,
        PipelineState.QUERYING_AGGREGATE,
        PipelineState.RESPONDING_CAPABILITIES,
    },
    PipelineState.LOGGING_TRANSACTION: {PipelineState.COMPOSING_RESPONSE},
    PipelineState.QUERYING_DEBTORS: {PipelineState.COMPOSING_RESPONSE},
    PipelineState.QUERYING_AGGREGATE: {PipelineState.COMPOSING_RESPONSE},
    PipelineState.RESPONDING_CAPABILITIES: {PipelineState.COMPOSING_RESPONSE},
    PipelineState.COMPOSING_RESPONSE: {PipelineState.DONE},
    PipelineState.DONE: set(),
    PipelineState.FAILED: set(),
}


def can_transition(current: PipelineState, target: PipelineState) -> bool:
    if target is PipelineState.FAILED:
        return current not in (PipelineState.DONE, PipelineState.FAILED)
    return target in TRANSITIONS[current]


__all__ = ["PipelineState", "TRANSITIONS", "can_transition"]
