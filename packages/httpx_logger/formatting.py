"""Formatting of finished request records into loggable values."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Tuple

from .record import RequestData

Formatter = Callable[[RequestData], Sequence[Any]]

# Rendered in place of status and reason when no HTTP response exists,
# e.g. connection refused or DNS failure.
MISSING = "-"


def _response_of(record: RequestData) -> Any:
    if record.response is not None:
        return record.response
    if record.error is not None:
        return getattr(record.error, "response", None)
    return None


def _status_of(response: Any) -> Tuple[Optional[Any], Optional[Any]]:
    if response is None:
        return None, None
    status = getattr(response, "status_code", None)
    if status is None:
        status = getattr(response, "status", None)
    # httpx exposes ``reason_phrase``, requests exposes ``reason``.
    reason = getattr(response, "reason_phrase", None)
    if reason is None:
        reason = getattr(response, "reason", None)
    return status, reason


def format_default(record: RequestData) -> list[Any]:
    """Return ``[METHOD, "status/(reason)", "Nms", url, details]``.

    ``details`` carries the raw ``config``, ``data``, ``response`` and
    ``error`` so sinks that understand structured values can use them.
    """

    status, reason = _status_of(_response_of(record))
    status = MISSING if status is None else status
    reason = MISSING if reason is None else reason
    elapsed = record.elapsed_ms or 0.0
    return [
        (record.method or "").upper(),
        f"{status}/({reason})",
        f"{elapsed:.0f}ms",
        record.url,
        {
            "config": record.config,
            "data": record.data,
            "response": record.response,
            "error": record.error,
        },
    ]
