# smsverify/adapters/verify_rest.py
from __future__ import annotations

import base64
import logging
from concurrent.futures import CancelledError, Future
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TypeVar
from urllib.parse import quote

import requests

from smsverify.config import VerifyConfig
from smsverify.domain.locales import SUPPORTED_VERIFY_LOCALES, RangeLike, find_best_locale
from smsverify.domain.ports import MetricsPort, VerificationPort
from smsverify.domain.user_agent import platform_tag
from smsverify.domain.util import mask_destination
from smsverify.domain.verification_models import (
    CHANNELS,
    WIRE_CHANNELS,
    Channel,
    VerificationId,
    VerifyFailure,
    VerifyOutcome,
    VerifySuccess,
    VerifyTransportError,
)

from .api_errors import body_snippet
from .http_client import HttpConfig, RetryingSession

log = logging.getLogger(__name__)

T = TypeVar("T")

FAILED_REQUEST_COUNTER = "smsverify.verify.failed_request"
VERIFICATION_SUCCEEDED_COUNTER = "smsverify.verify.verification_succeeded"
TRANSPORT_FAILURE_COUNTER = "smsverify.verify.transport_failure"

SERVICE_TAG = "service"
STATUS_CODE_TAG = "statusCode"
ERROR_CODE_TAG = "errorCode"
CONTEXT_TAG = "context"
PLATFORM_TAG = "platform"
OPERATION_TAG = "operation"

_UNKNOWN = "unknown"


class VerifyRestAdapter(VerificationPort):
    """REST adapter for the provider's Verify v2 API.

    Endpoints:
      - POST {base}/v2/Services/{sid}/Verifications
              form: To, CustomCode, Channel, CustomFriendlyName, [Locale], [AppHash]
              -> {"sid": "VE...", "status": "pending"}
      - POST {base}/v2/Services/{sid}/Verifications/{verification_sid}
              form: Status=approved
              -> {"sid": "VE...", "status": "approved"}
      - Errors: {"status": 404, "code": 60200, "message": "..."}

    Notes:
      - Every public call returns a future that resolves to ``None``/``False``
        on transport, provider or parse failures; nothing is raised through it.
      - Retries belong to ``RetryingSession``; this adapter sends exactly one
        request per call.
    """

    def __init__(
        self,
        config: VerifyConfig,
        *,
        metrics: MetricsPort,
        session: Optional[RetryingSession] = None,
        supported_locales=SUPPORTED_VERIFY_LOCALES,
    ) -> None:
        self.config = config
        self.metrics = metrics
        self.session = session or RetryingSession(
            HttpConfig(
                request_timeout_s=config.request_timeout_s,
                retries=config.retries,
                max_workers=config.max_workers,
            )
        )
        self.supported_locales = frozenset(supported_locales)
        self.verify_service_uri = config.verify_service_uri
        self.verify_approval_base_uri = f"{config.verify_service_uri}/"
        self._auth_header = self._basic_auth(config.account_id, config.account_token)

    # ---------- VerificationPort ----------

    def send_code(
        self,
        destination: str,
        channel: Channel,
        code: str,
        client_type: Optional[str],
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]":
        if channel not in CHANNELS:
            raise ValueError(f"Unsupported verification channel: {channel!r}")
        fields = self.build_verification_fields(
            channel, destination, code, self.find_best_locale(language_ranges), client_type
        )
        pending = self._post(self.verify_service_uri, fields)
        return _then(
            pending,
            lambda resp, exc: self._extract_verification_sid(
                self._to_outcome(resp, exc), destination
            ),
        )

    def deliver_sms_verification(
        self,
        destination: str,
        client_type: Optional[str],
        code: str,
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]":
        return self.send_code(destination, "sms", code, client_type, language_ranges)

    def deliver_voice_verification(
        self,
        destination: str,
        code: str,
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]":
        return self.send_code(destination, "voice", code, None, language_ranges)

    def confirm_approved(
        self,
        verification_id: VerificationId,
        user_agent: Optional[str],
        context: str,
    ) -> "Future[bool]":
        sid = str(verification_id or "").strip()
        if not sid:
            raise ValueError("verification_id is required")
        url = self.verify_approval_base_uri + quote(sid, safe="")
        pending = self._post(url, {"Status": "approved"})
        return _then(
            pending,
            lambda resp, exc: self._process_approval(
                self._to_outcome(resp, exc), user_agent, context
            ),
        )

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------
    def find_best_locale(self, language_ranges: Sequence[RangeLike]) -> Optional[str]:
        try:
            return find_best_locale(language_ranges or (), self.supported_locales)
        except ValueError as exc:
            log.debug("Ignoring malformed language ranges %r: %s", language_ranges, exc)
            return None

    def build_verification_fields(
        self,
        channel: Channel,
        destination: str,
        code: str,
        locale: Optional[str],
        client_type: Optional[str],
    ) -> Dict[str, str]:
        fields = {
            "To": destination,
            "CustomCode": code,
            "Channel": WIRE_CHANNELS[channel],
            "CustomFriendlyName": self.config.verify_service_friendly_name,
        }
        if locale:
            fields["Locale"] = locale
        if client_type and client_type.startswith("android"):
            fields["AppHash"] = self.config.android_app_hash
        return fields

    def _post(self, url: str, fields: Mapping[str, str]) -> "Future[requests.Response]":
        try:
            return self.session.post_form_async(
                url, fields=fields, headers={"Authorization": self._auth_header}
            )
        except Exception as exc:
            # A shut-down executor counts as a transport failure.
            failed: Future = Future()
            failed.set_exception(exc)
            return failed

    @staticmethod
    def _basic_auth(account_id: str, account_token: str) -> str:
        raw = f"{account_id}:{account_token}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------
    def _to_outcome(
        self, resp: Optional[requests.Response], exc: Optional[BaseException]
    ) -> VerifyOutcome:
        if exc is not None:
            return VerifyTransportError(exc)
        return parse_response(resp)

    def _extract_verification_sid(
        self, outcome: VerifyOutcome, destination: str
    ) -> Optional[VerificationId]:
        if isinstance(outcome, VerifyTransportError):
            log.warning("Failed to send verification request: %s", outcome.error)
            self._record(TRANSPORT_FAILURE_COUNTER, {OPERATION_TAG: "send"})
            return None

        if isinstance(outcome, VerifyFailure):
            self._record(
                FAILED_REQUEST_COUNTER,
                {
                    SERVICE_TAG: "verify",
                    STATUS_CODE_TAG: _tag(outcome.status, fallback=outcome.http_status),
                    ERROR_CODE_TAG: _tag(outcome.code),
                },
            )
            log.info(
                "Verification request failed with code=%s, destination=%s",
                outcome.code,
                mask_destination(destination),
            )
            return None

        return outcome.sid

    def _process_approval(
        self, outcome: VerifyOutcome, user_agent: Optional[str], context: str
    ) -> bool:
        if isinstance(outcome, VerifyTransportError):
            log.warning("Failed to send verification succeeded: %s", outcome.error)
            self._record(TRANSPORT_FAILURE_COUNTER, {OPERATION_TAG: "approve"})
            return False

        tags = {CONTEXT_TAG: str(context), PLATFORM_TAG: platform_tag(user_agent)}

        if isinstance(outcome, VerifySuccess) and outcome.is_approved:
            self._record(VERIFICATION_SUCCEEDED_COUNTER, tags)
            return True

        if isinstance(outcome, VerifyFailure):
            tags[ERROR_CODE_TAG] = _tag(outcome.code)
            tags[STATUS_CODE_TAG] = _tag(outcome.status, fallback=outcome.http_status)
        else:
            # 2xx whose body is not "approved" (pending/canceled or unreadable).
            tags[ERROR_CODE_TAG] = _UNKNOWN
            tags[STATUS_CODE_TAG] = _tag(outcome.http_status)
            log.info("Approval response carried status=%s", outcome.status)
        self._record(VERIFICATION_SUCCEEDED_COUNTER, tags)
        return False

    def _record(self, name: str, tags: Mapping[str, str]) -> None:
        # A failing metrics sink must not change the verification result.
        try:
            self.metrics.increment(name, dict(tags))
        except Exception:
            log.exception("Failed to record metric %s", name)

    def close(self) -> None:
        self.session.close()


def parse_response(resp: Any) -> VerifyOutcome:
    """Classify a provider response into a success or failure variant.

    JSON bodies are only read when the response declares an
    ``application/json`` media type; anything else, or a body that fails to
    parse, yields the variant with empty fields.
    """
    status_code = int(getattr(resp, "status_code", 0) or 0)
    is_json = _media_type(resp) == "application/json"

    if 200 <= status_code < 300:
        if not is_json:
            return VerifySuccess(http_status=status_code)
        body = _json_object(resp, "success")
        return VerifySuccess(
            sid=_as_str(body.get("sid")),
            status=_as_str(body.get("status")),
            http_status=status_code,
        )

    if not is_json:
        return VerifyFailure(http_status=status_code)
    body = _json_object(resp, "failure")
    return VerifyFailure(
        status=_as_int(body.get("status")),
        code=_as_int(body.get("code")),
        message=_as_str(body.get("message")),
        http_status=status_code,
    )


def _media_type(resp: Any) -> Optional[str]:
    headers = getattr(resp, "headers", None) or {}
    raw = headers.get("Content-Type") or headers.get("content-type")
    if not raw:
        return None
    return str(raw).split(";", 1)[0].strip().lower()


def _json_object(resp: Any, kind: str) -> Dict[str, Any]:
    try:
        data = resp.json()
    except Exception as exc:
        log.warning(
            "Error parsing verify %s response: %s (body=%r)", kind, exc, body_snippet(resp)
        )
        return {}
    if not isinstance(data, dict):
        log.warning("Unexpected verify %s response shape: %r", kind, body_snippet(resp))
        return {}
    return data


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _tag(value: Any, *, fallback: Any = None) -> str:
    if value is None:
        value = fallback
    return _UNKNOWN if value is None else str(value)


def _then(
    source: "Future[Any]",
    handle: Callable[[Any, Optional[BaseException]], T],
) -> "Future[T]":
    """Chain ``handle(result, error)`` onto ``source`` without blocking."""
    result: "Future[T]" = Future()

    def _done(fut: "Future[Any]") -> None:
        error = CancelledError() if fut.cancelled() else fut.exception()
        try:
            value = handle(None if error is not None else fut.result(), error)
        except Exception as exc:
            log.exception("Verify response handler failed")
            result.set_exception(exc)
            return
        result.set_result(value)

    source.add_done_callback(_done)
    return result


__all__ = [
    "FAILED_REQUEST_COUNTER",
    "TRANSPORT_FAILURE_COUNTER",
    "VERIFICATION_SUCCEEDED_COUNTER",
    "VerifyRestAdapter",
    "parse_response",
]
