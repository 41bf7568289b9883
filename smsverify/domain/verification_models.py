"""Typed domain objects for verification requests and provider responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from .locales import RangeLike


Channel = Literal["sms", "voice"]
VerificationId = str

CHANNELS: Tuple[Channel, ...] = ("sms", "voice")

# Provider wire values for each delivery channel.
WIRE_CHANNELS = {"sms": "sms", "voice": "call"}


@dataclass(frozen=True)
class VerificationRequest:
    """One "send a code" request as issued by the registration flow."""

    destination: str
    code: str
    channel: Channel = "sms"
    client_type: Optional[str] = None
    language_ranges: Tuple[RangeLike, ...] = ()


@dataclass(frozen=True)
class VerifySuccess:
    """2xx response; fields stay ``None`` when the body could not be read."""

    sid: Optional[str] = None
    status: Optional[str] = None
    http_status: Optional[int] = None

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"


@dataclass(frozen=True)
class VerifyFailure:
    """Non-2xx response with the provider's structured error, if any."""

    status: Optional[int] = None
    code: Optional[int] = None
    message: Optional[str] = None
    http_status: Optional[int] = None


@dataclass(frozen=True)
class VerifyTransportError:
    """The request never produced an HTTP response."""

    error: BaseException


VerifyOutcome = Union[VerifySuccess, VerifyFailure, VerifyTransportError]


__all__ = [
    "CHANNELS",
    "Channel",
    "VerificationId",
    "VerificationRequest",
    "VerifyFailure",
    "VerifyOutcome",
    "VerifySuccess",
    "VerifyTransportError",
    "WIRE_CHANNELS",
]
