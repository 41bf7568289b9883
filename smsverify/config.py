"""Runtime configuration for the verification provider client.

Values come either from explicit construction (tests, embedding services) or
from ``SMSVERIFY_*`` environment variables via :meth:`VerifyConfig.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URI = "https://verify.twilio.com"

_ENV_PREFIX = "SMSVERIFY_"
_REQUIRED_ENV = {
    "account_id": "SMSVERIFY_ACCOUNT_ID",
    "account_token": "SMSVERIFY_ACCOUNT_TOKEN",
    "verify_service_sid": "SMSVERIFY_SERVICE_SID",
}


@dataclass(frozen=True)
class VerifyConfig:
    """Credentials, service identifiers and transport tuning.

    Attributes:
        account_id: Provider account SID, the Basic auth user name.
        account_token: Provider auth token, the Basic auth password.
        verify_service_sid: Verify service the verifications are created under.
        android_app_hash: Hash sent as ``AppHash`` for Android clients.
        verify_service_friendly_name: Sent as ``CustomFriendlyName``.
        base_uri: Provider origin without trailing slash.
        request_timeout_s: Per-request timeout in seconds.
        retries: Retry attempts after the first one on transport failures.
        max_workers: Size of the transport thread pool.
    """

    account_id: str
    account_token: str
    verify_service_sid: str
    android_app_hash: str = ""
    verify_service_friendly_name: str = ""
    base_uri: str = DEFAULT_BASE_URI
    request_timeout_s: int = 10
    retries: int = 2
    max_workers: int = 8

    def __post_init__(self) -> None:
        for name in _REQUIRED_ENV:
            value = str(getattr(self, name) or "").strip()
            if not value:
                raise ValueError(f"VerifyConfig.{name} must be a non-empty string")
            object.__setattr__(self, name, value)
        base = str(self.base_uri or "").strip().rstrip("/")
        if not base.startswith(("http://", "https://")):
            raise ValueError(f"VerifyConfig.base_uri must be an http(s) URL, got {self.base_uri!r}")
        object.__setattr__(self, "base_uri", base)
        if self.request_timeout_s <= 0:
            raise ValueError("VerifyConfig.request_timeout_s must be positive")
        if self.retries < 0:
            raise ValueError("VerifyConfig.retries must be >= 0")
        if self.max_workers <= 0:
            raise ValueError("VerifyConfig.max_workers must be positive")

    @property
    def verify_service_uri(self) -> str:
        return f"{self.base_uri}/v2/Services/{self.verify_service_sid}/Verifications"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VerifyConfig":
        """Build a config from ``SMSVERIFY_*`` variables.

        Raises:
            ValueError: If a required variable is missing or a number is malformed.
        """
        env = os.environ if environ is None else environ
        missing = [var for var in _REQUIRED_ENV.values() if not env.get(var, "").strip()]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        return cls(
            account_id=env[_REQUIRED_ENV["account_id"]],
            account_token=env[_REQUIRED_ENV["account_token"]],
            verify_service_sid=env[_REQUIRED_ENV["verify_service_sid"]],
            android_app_hash=env.get(f"{_ENV_PREFIX}ANDROID_APP_HASH", "").strip(),
            verify_service_friendly_name=env.get(f"{_ENV_PREFIX}FRIENDLY_NAME", "").strip(),
            base_uri=env.get(f"{_ENV_PREFIX}BASE_URI", "").strip() or DEFAULT_BASE_URI,
            request_timeout_s=_coerce_int(env, "REQUEST_TIMEOUT_S", 10),
            retries=_coerce_int(env, "RETRIES", 2),
            max_workers=_coerce_int(env, "MAX_WORKERS", 8),
        )


def _coerce_int(env: Mapping[str, str], suffix: str, fallback: int) -> int:
    var = f"{_ENV_PREFIX}{suffix}"
    raw = env.get(var, "").strip()
    if not raw:
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from exc


__all__ = ["DEFAULT_BASE_URI", "VerifyConfig"]
