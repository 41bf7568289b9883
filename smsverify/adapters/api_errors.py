from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for provider transport failures."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message)
        self.context = context


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


def body_snippet(resp: Any, *, limit: int = 400) -> Optional[str]:
    """Best-effort response text for log lines, never raising."""
    try:
        text = getattr(resp, "text", "") or ""
    except Exception:
        return None
    text = str(text).strip()
    if not text:
        return None
    return text[:limit]


__all__ = ["ApiError", "ApiTimeoutError", "body_snippet"]
