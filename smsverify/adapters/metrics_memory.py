from __future__ import annotations

import threading
from typing import Dict, FrozenSet, List, Mapping, Tuple

from smsverify.domain.ports import MetricsPort

CounterKey = Tuple[str, FrozenSet[Tuple[str, str]]]


class InMemoryMetrics(MetricsPort):
    """Thread-safe counter registry keyed by metric name and tag set."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Dict[CounterKey, int] = {}

    def increment(self, name: str, tags: Mapping[str, str], amount: int = 1) -> None:
        key = (name, frozenset((str(k), str(v)) for k, v in tags.items()))
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def count(self, name: str, **tags: str) -> int:
        """Sum of every counter named ``name`` whose tags include ``tags``."""
        wanted = set(tags.items())
        with self._lock:
            return sum(
                value
                for (metric, tag_set), value in self._counters.items()
                if metric == name and wanted <= tag_set
            )

    def snapshot(self) -> List[Dict[str, object]]:
        with self._lock:
            items = list(self._counters.items())
        return [
            {"name": metric, "tags": dict(sorted(tag_set)), "value": value}
            for (metric, tag_set), value in sorted(items, key=lambda kv: (kv[0][0], sorted(kv[0][1])))
        ]

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
