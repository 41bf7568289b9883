from __future__ import annotations

from typing import Optional


def mask_destination(destination: Optional[str], visible: int = 4) -> str:
    """
    Hide everything but the leading ``visible`` characters of a phone number.

    ``+4915112345678`` -> ``+491**********``; keeps the country prefix readable
    in logs without leaking the subscriber number.
    """
    text = str(destination or "").strip()
    if not text:
        return "<empty>"
    if len(text) <= visible:
        return "*" * len(text)
    return text[:visible] + "*" * (len(text) - visible)


__all__ = ["mask_destination"]
