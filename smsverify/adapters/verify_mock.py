from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set
from uuid import uuid4

from smsverify.domain.locales import RangeLike, find_best_locale
from smsverify.domain.ports import VerificationPort
from smsverify.domain.verification_models import Channel, VerificationId


def _done(value: Any) -> Future:
    fut: Future = Future()
    fut.set_result(value)
    return fut


def _locale_for(language_ranges: Sequence[RangeLike]) -> Optional[str]:
    try:
        return find_best_locale(language_ranges or ())
    except ValueError:
        # Same as the REST adapter: malformed ranges mean no locale.
        return None


@dataclass
class VerifyMock(VerificationPort):
    """Offline substitute for ``VerifyRestAdapter`` with deterministic responses.

    Destinations listed in ``failing_destinations`` resolve to ``None``; every
    other send resolves to a fresh ``VE...`` sid that ``confirm_approved``
    accepts exactly once.
    """

    failing_destinations: Set[str] = field(default_factory=set)
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._pending: Dict[VerificationId, Dict[str, Any]] = {}

    # ---------- VerificationPort ----------

    def send_code(
        self,
        destination: str,
        channel: Channel,
        code: str,
        client_type: Optional[str],
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]":
        locale = _locale_for(language_ranges)
        self.calls.append(
            {
                "method": "send_code",
                "destination": destination,
                "channel": channel,
                "code": code,
                "client_type": client_type,
                "locale": locale,
            }
        )
        if destination in self.failing_destinations:
            return _done(None)
        sid = f"VE{uuid4().hex}"
        self._pending[sid] = {"destination": destination, "code": code}
        return _done(sid)

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
        self.calls.append(
            {
                "method": "confirm_approved",
                "verification_id": verification_id,
                "user_agent": user_agent,
                "context": context,
            }
        )
        return _done(self._pending.pop(verification_id, None) is not None)
