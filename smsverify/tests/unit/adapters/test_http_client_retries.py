from __future__ import annotations

from typing import Any, Dict, List

import pytest
from requests import exceptions as req_exc

from smsverify.adapters.api_errors import ApiError, ApiTimeoutError
from smsverify.adapters.http_client import HttpConfig, RetryingSession


class _FlakySession:
    def __init__(self, failures: List[Exception], response: Any = "ok") -> None:
        self._failures = list(failures)
        self._response = response
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, *, data=None, headers=None, timeout=None) -> Any:
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self._failures:
            raise self._failures.pop(0)
        return self._response

    def close(self) -> None:
        self.closed = True


def test_post_form_encodes_fields_and_merges_headers() -> None:
    stub = _FlakySession([])
    session = RetryingSession(HttpConfig(request_timeout_s=7), session=stub)
    try:
        session.post_form(
            "http://provider/x",
            fields={"To": "+1 555", "Status": "approved"},
            headers={"Authorization": "Basic abc"},
        )
    finally:
        session.close()

    call = stub.calls[0]
    assert call["data"] == "To=%2B1+555&Status=approved"
    assert call["timeout"] == 7
    assert call["headers"] == {
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
        "Authorization": "Basic abc",
    }
    assert stub.closed


def test_post_form_retries_timeouts_then_raises_typed_error() -> None:
    stub = _FlakySession([req_exc.Timeout(), req_exc.ConnectionError(), req_exc.Timeout()])
    session = RetryingSession(HttpConfig(retries=2), session=stub)
    try:
        with pytest.raises(ApiTimeoutError) as info:
            session.post_form("http://provider/x", fields={})
    finally:
        session.close()

    assert len(stub.calls) == 3
    assert info.value.context == "POST http://provider/x"


def test_post_form_does_not_retry_other_request_errors() -> None:
    stub = _FlakySession([req_exc.InvalidURL("bad url")])
    session = RetryingSession(HttpConfig(retries=3), session=stub)
    try:
        with pytest.raises(ApiError) as info:
            session.post_form("http://provider/x", fields={})
    finally:
        session.close()

    assert not isinstance(info.value, ApiTimeoutError)
    assert len(stub.calls) == 1


def test_post_form_async_returns_future_with_response() -> None:
    stub = _FlakySession([req_exc.Timeout()], response="second-try")
    session = RetryingSession(HttpConfig(retries=1, max_workers=2), session=stub)
    try:
        future = session.post_form_async("http://provider/x", fields={"a": "1"})
        assert future.result(timeout=5) == "second-try"
    finally:
        session.close()
