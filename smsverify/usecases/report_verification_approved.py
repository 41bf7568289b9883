from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Optional

from smsverify.domain.ports import UseCaseError, VerificationPort


@dataclass
class ReportVerificationApproved:
    """Tell the provider that a verification finished successfully on our side."""

    port: VerificationPort
    default_context: str = "registration"

    def __call__(
        self,
        verification_id: str,
        user_agent: Optional[str] = None,
        context: Optional[str] = None,
    ) -> "Future[bool]":
        sid = (verification_id or "").strip()
        if not sid:
            raise UseCaseError("INVALID_REQUEST", "Verification id is required.")
        label = (context or "").strip() or self.default_context
        return self.port.confirm_approved(sid, user_agent, label)
