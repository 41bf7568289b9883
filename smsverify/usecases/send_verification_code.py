from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Optional

from smsverify.domain.locales import LanguageRange
from smsverify.domain.ports import UseCaseError, VerificationPort
from smsverify.domain.verification_models import CHANNELS, VerificationId, VerificationRequest


@dataclass
class SendVerificationCode:
    """Validate a ``VerificationRequest`` and hand it to the provider port."""

    port: VerificationPort

    def __call__(self, request: VerificationRequest) -> "Future[Optional[VerificationId]]":
        destination = (request.destination or "").strip()
        code = (request.code or "").strip()
        if not destination:
            raise UseCaseError("INVALID_REQUEST", "Destination is required.")
        if not code:
            raise UseCaseError("INVALID_REQUEST", "Verification code is required.")
        if request.channel not in CHANNELS:
            raise UseCaseError(
                "INVALID_REQUEST", f"Unsupported channel '{request.channel}'."
            )
        for item in request.language_ranges:
            if not isinstance(item, (str, LanguageRange)):
                raise UseCaseError(
                    "INVALID_REQUEST", f"Invalid language range {item!r}."
                )

        ranges = list(request.language_ranges)
        if request.channel == "voice":
            return self.port.deliver_voice_verification(destination, code, ranges)
        return self.port.deliver_sms_verification(
            destination, request.client_type, code, ranges
        )
