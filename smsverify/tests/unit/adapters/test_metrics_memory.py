from __future__ import annotations

import threading

from smsverify.adapters.metrics_memory import InMemoryMetrics


def test_counts_are_keyed_by_name_and_tags() -> None:
    metrics = InMemoryMetrics()
    metrics.increment("sent", {"channel": "sms"})
    metrics.increment("sent", {"channel": "sms"})
    metrics.increment("sent", {"channel": "voice"})
    metrics.increment("other", {"channel": "sms"}, amount=5)

    assert metrics.count("sent") == 3
    assert metrics.count("sent", channel="sms") == 2
    assert metrics.count("sent", channel="fax") == 0
    assert metrics.snapshot()[0] == {"name": "other", "tags": {"channel": "sms"}, "value": 5}

    metrics.reset()
    assert metrics.snapshot() == []


def test_increment_is_thread_safe() -> None:
    metrics = InMemoryMetrics()

    def _work() -> None:
        for _ in range(1000):
            metrics.increment("hits", {"k": "v"})

    threads = [threading.Thread(target=_work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert metrics.count("hits", k="v") == 8000
