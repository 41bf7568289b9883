"""Shared HTTP transport for the verification provider adapter.

This module provides a thin wrapper around ``requests.Session`` that owns the
timeout policy, the retry loop and a worker pool, so adapters can issue a
single form POST and get a ``concurrent.futures.Future`` back.

Dependencies:
    - ``requests`` for network I/O.
    - ``smsverify.adapters.api_errors`` for typed transport failures.

Call context:
    - Constructed by the composition root (``smsverify/app/main.py``) or by
      ``VerifyRestAdapter`` when no transport is injected.
    - Used only inside adapter methods; use cases interact through ports.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests
from requests import exceptions as req_exc

from smsverify.adapters.api_errors import ApiError, ApiTimeoutError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout, retry and pool configuration for provider calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for one attempt.
        retries: Number of retry attempts after the initial request.
        max_workers: Threads available for in-flight requests.
    """
    request_timeout_s: int = 10
    retries: int = 2
    max_workers: int = 8


class RetryingSession:
    """Requests wrapper with a retry loop and an async submission API.

    This class is intentionally transport-only. Callers provide endpoint URLs,
    authentication headers and decide how to interpret non-2xx responses.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        session: Optional[Any] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        """Create a retry-enabled session.

        Args:
            cfg: Shared timeout, retry and pool settings.
            session: Optional pre-built ``requests.Session`` (or test double).
            executor: Optional executor; a private thread pool is created
                when omitted.

        Side Effects:
            Creates a persistent ``requests.Session`` and, unless supplied, a
            ``ThreadPoolExecutor``.
        """
        self.session = session if session is not None else requests.Session()
        self.cfg = cfg
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=cfg.max_workers, thread_name_prefix="smsverify-http"
        )

    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": FORM_CONTENT_TYPE}
        if extra:
            headers.update(extra)
        return headers

    def post_form(
        self,
        url: str,
        *,
        fields: Mapping[str, str],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a form-encoded POST with retries on transport failures.

        Args:
            url: Absolute endpoint URL.
            fields: Form fields, encoded into the request body string.
            headers: Extra headers such as ``Authorization``.
            timeout: Optional timeout override in seconds.

        Returns:
            ``requests.Response`` from the first attempt that got an answer.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
            ApiError: For any other ``requests`` failure.
        """
        context = f"POST {url}"
        body = urlencode(list(fields.items()))
        last_err: Optional[ApiError] = None
        attempts = self.cfg.retries + 1
        for attempt in range(attempts):
            try:
                return self.session.post(
                    url,
                    data=body,
                    headers=self._headers(headers),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                log.debug("%s attempt %d/%d failed: %s", context, attempt + 1, attempts, exc)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        if last_err is None:
            raise ApiError("Unexpected request failure", context=context)
        raise last_err

    def post_form_async(
        self,
        url: str,
        *,
        fields: Mapping[str, str],
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> "Future[requests.Response]":
        """Submit :meth:`post_form` to the worker pool and return its future."""
        return self._executor.submit(
            self.post_form, url, fields=dict(fields), headers=headers, timeout=timeout
        )

    def close(self) -> None:
        """Release the pool (when owned) and the underlying session."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        close = getattr(self.session, "close", None)
        if callable(close):
            close()


__all__ = ["FORM_CONTENT_TYPE", "HttpConfig", "RetryingSession"]
