"""Prometheus metrics for the HTTP surface and the voice pipeline."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "akawo_http_requests_total",
    "HTTP requests handled, by route template and status code",
    ("method", "route", "status"),
)

# Voice uploads dominate latency; buckets stretch to the transcription timeout.
REQUEST_LATENCY = Histogram(
    "akawo_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

ERROR_COUNTER = Counter(
    "akawo_http_internal_errors_total",
    "Requests that ended with a 5xx response",
    ("method", "route"),
)

VOICE_COMMANDS = Counter(
    "akawo_voice_commands_total",
    "Voice commands processed, by classified intent and outcome",
    ("intent", "outcome"),
)

STAGE_LATENCY = Histogram(
    "akawo_pipeline_stage_duration_seconds",
    "Time spent in each voice pipeline state",
    ("stage",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


def observe_request(method: str, route: str, status_code: int, duration_seconds: float) -> None:
    """Record one finished HTTP request."""

    method = method or "UNKNOWN"
    route = route or "unmatched"
    REQUEST_COUNT.labels(method=method, route=route, status=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method, route=route).observe(max(duration_seconds, 0.0))
    if status_code >= 500:
        ERROR_COUNTER.labels(method=method, route=route).inc()


def observe_stage(stage: str, duration_seconds: float) -> None:
    STAGE_LATENCY.labels(stage=stage).observe(max(duration_seconds, 0.0))


def record_command(intent: str | None, outcome: str) -> None:
    """Count a finished voice command; ``outcome`` is ok, input or backend."""

    VOICE_COMMANDS.labels(intent=intent or "none", outcome=outcome).inc()
