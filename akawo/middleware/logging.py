"""Per-request access log lines for the Akawo API."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from akawo.utils import owner_from_authorization

logger = logging.getLogger("akawo.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"

_FIELDS = ("timestamp", "method", "path", "status", "duration_ms", "client_ip", "owner_id")


def status_color(status: int) -> str:
    if status >= 500:
        return COLOR_RED
    if status >= 400:
        return COLOR_YELLOW
    if 200 <= status < 300:
        return COLOR_GREEN
    return COLOR_CYAN


def format_access_line(entry: dict[str, Any]) -> str:
    """Render `key=value` pairs in a fixed order, `-` for missing values."""

    body = ", ".join(
        f"{name}={'-' if entry.get(name) is None else entry[name]}" for name in _FIELDS
    )
    return f"{status_color(entry.get('status') or 0)}{body}{COLOR_RESET}"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, latency and the trader id of every request.

    The owner id is read from the bearer token on a best-effort basis; an
    invalid token is logged as ``owner_id=-`` and rejected later by the
    route dependency.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "owner_id": owner_from_authorization(request.headers.get("authorization")),
        }

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - defensive
            entry["status"] = 500
            entry["duration_ms"] = _elapsed_ms(started)
            logger.exception(format_access_line(entry))
            raise

        entry["status"] = response.status_code
        entry["duration_ms"] = _elapsed_ms(started)
        logger.info(format_access_line(entry))
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
