from __future__ import annotations
from concurrent.futures import Future
from typing import Mapping, Optional, Protocol, Sequence

from .locales import RangeLike
from .verification_models import Channel, VerificationId


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (caller-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Ports (Hexagonal boundaries) ----
class VerificationPort(Protocol):
    """Send codes through, and report outcomes to, the verification provider.

    Every call returns immediately with a future; failures resolve to ``None``
    or ``False`` instead of raising.
    """

    def send_code(
        self,
        destination: str,
        channel: Channel,
        code: str,
        client_type: Optional[str],
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]": ...
    def deliver_sms_verification(
        self,
        destination: str,
        client_type: Optional[str],
        code: str,
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]": ...
    def deliver_voice_verification(
        self,
        destination: str,
        code: str,
        language_ranges: Sequence[RangeLike],
    ) -> "Future[Optional[VerificationId]]": ...
    def confirm_approved(
        self,
        verification_id: VerificationId,
        user_agent: Optional[str],
        context: str,
    ) -> "Future[bool]": ...


class MetricsPort(Protocol):
    """Counter sink; tag values are always strings."""

    def increment(self, name: str, tags: Mapping[str, str], amount: int = 1) -> None: ...
