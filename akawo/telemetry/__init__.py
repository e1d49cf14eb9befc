"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_LATENCY,
    VOICE_COMMANDS,
    observe_request,
    observe_stage,
    record_command,
)

__all__ = [
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_LATENCY",
    "VOICE_COMMANDS",
    "observe_request",
    "observe_stage",
    "record_command",
]
