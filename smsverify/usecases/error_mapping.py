"""Translate use-case, wait and configuration errors into UseCaseError instances."""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from smsverify.domain.ports import UseCaseError


def map_api_error(
    exc: BaseException,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map errors seen by callers to stable UseCaseError codes.

    Transport failures never reach this point: the adapter resolves them to
    ``None``/``False``. What remains is waiting too long on a result, bad
    input and configuration errors.

    Args:
        exc: Exception raised by a use case, ``Future.result`` or config loading.
        default_code: Code used when the exception type is not recognised.
        default_message: Message used when the exception carries none.

    Returns:
        UseCaseError: Caller-presentable error with a stable code.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, FutureTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Timed out waiting for the provider.")
    if isinstance(exc, ValueError):
        return UseCaseError("INVALID_INPUT", _compose_error_message("Invalid input", str(exc)))

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]
