"""Domain package exports for verification value objects and ports."""

from .locales import (
    SUPPORTED_VERIFY_LOCALES,
    LanguageRange,
    find_best_locale,
    parse_language_ranges,
)
from .ports import MetricsPort, UseCaseError, VerificationPort
from .user_agent import platform_tag
from .verification_models import (
    CHANNELS,
    Channel,
    VerificationId,
    VerificationRequest,
    VerifyFailure,
    VerifyOutcome,
    VerifySuccess,
    VerifyTransportError,
)

__all__ = [
    "CHANNELS",
    "Channel",
    "LanguageRange",
    "MetricsPort",
    "SUPPORTED_VERIFY_LOCALES",
    "UseCaseError",
    "VerificationId",
    "VerificationPort",
    "VerificationRequest",
    "VerifyFailure",
    "VerifyOutcome",
    "VerifySuccess",
    "VerifyTransportError",
    "find_best_locale",
    "parse_language_ranges",
    "platform_tag",
]
