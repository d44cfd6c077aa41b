"""结构化日志：JSON line 格式，输出前统一脱敏"""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional

from tripchat.infrastructure.redact import redact_sensitive


class StructuredLogger:
    """Emit one JSON object per line with a trace id and timestamp."""

    def __init__(self, trace_id: Optional[str] = None, output=None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output or sys.stderr
        # (step, trip_id) -> start time
        self._timers: dict[tuple[str, Any], float] = {}

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        try:
            line = redact_sensitive(json.dumps(data, ensure_ascii=False, default=str))
            self._output.write(line + "\n")
            self._output.flush()
        except (OSError, ValueError) as exc:
            # 输出流不可用时退回 stderr
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")

    def step_start(self, step: str, **extra: Any) -> None:
        self._timers[(step, extra.get("trip_id"))] = time.time()
        self._emit({"event": "step_start", "step": step, **extra})

    def step_end(self, step: str, **extra: Any) -> None:
        start = self._timers.pop((step, extra.get("trip_id")), time.time())
        duration_ms = round((time.time() - start) * 1000, 1)
        self._emit({"event": "step_end", "step": step, "duration_ms": duration_ms, **extra})

    def event(self, name: str, **extra: Any) -> None:
        self._emit({"event": name, **extra})

    def error(self, step: str, error: str, **extra: Any) -> None:
        self._emit({"event": "error", "step": step, "error": error, **extra})

    def warning(self, step: str, message: str, **extra: Any) -> None:
        self._emit({"event": "warning", "step": step, "message": message, **extra})


# 全局 logger
_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger


__all__ = ["StructuredLogger", "get_logger"]
