"""Per-call records handed to formatters and logger sinks."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class RequestData:
    """Identity, timing and outcome of a single outbound call.

    ``response`` and ``error`` are both ``None`` while the call is in flight;
    once the interceptor finalizes the record exactly one of them is set.
    ``start_time`` and ``end_time`` are :func:`time.perf_counter` readings,
    ``timestamp`` is the wall-clock start of the call.
    """

    method: str
    url: str
    data: Any = None
    config: Any = None
    response: Any = None
    error: Optional[BaseException] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None

    @property
    def finished(self) -> bool:
        return self.end_time is not None

    @property
    def succeeded(self) -> bool:
        return self.finished and self.error is None

    @property
    def elapsed_ms(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time) * 1000
