"""
In-process counters for the HTTP and stdio transports.

Counts requests, rate-limit rejections, tool outcomes, contract-query auth
types and uses of the deprecated permit fallback. Values live in one process
only; nothing is aggregated across workers.
"""

from __future__ import annotations

from collections import Counter, OrderedDict
from threading import Lock
from typing import Dict

MAX_RECENT_DURATIONS = 100


class MetricsRecorder:
    def __init__(self, max_recent: int = MAX_RECENT_DURATIONS) -> None:
        self._lock = Lock()
        self._max_recent = max_recent
        self._counters: Counter[str] = Counter()
        self._tool_outcomes: Dict[bool, Counter[str]] = {True: Counter(), False: Counter()}
        self._auth_types: Counter[str] = Counter()
        self._durations: "OrderedDict[str, float]" = OrderedDict()

    def _bump(self, name: str) -> None:
        with self._lock:
            self._counters[name] += 1

    def incr_request(self) -> None:
        self._bump("requests")

    def incr_rate_limited(self) -> None:
        self._bump("rate_limited")

    def incr_legacy_permit_fallback(self) -> None:
        self._bump("legacy_permit_fallbacks")

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        """Keep the most recent request durations; older entries are dropped."""
        with self._lock:
            self._durations[request_id] = duration_ms
            self._durations.move_to_end(request_id)
            while len(self._durations) > self._max_recent:
                self._durations.popitem(last=False)

    def record_tool(self, tool: str, *, success: bool) -> None:
        with self._lock:
            self._tool_outcomes[success][tool] += 1

    def record_auth(self, auth_type: str) -> None:
        """Count contract queries per auth type (none / viewing_key / permit)."""
        with self._lock:
            self._auth_types[auth_type] += 1

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "requests": self._counters["requests"],
                "rate_limited": self._counters["rate_limited"],
                "legacy_permit_fallbacks": self._counters["legacy_permit_fallbacks"],
                "tool_success": dict(self._tool_outcomes[True]),
                "tool_error": dict(self._tool_outcomes[False]),
                "auth_types": dict(self._auth_types),
                "recent_request_durations_ms": dict(self._durations),
            }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            for outcomes in self._tool_outcomes.values():
                outcomes.clear()
            self._auth_types.clear()
            self._durations.clear()


default_metrics = MetricsRecorder()
