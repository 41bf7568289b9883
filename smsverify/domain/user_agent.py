from __future__ import annotations

import re
from typing import Optional

UNRECOGNIZED = "unrecognized"

_AGENT_RE = re.compile(r"^Signal-(Android|iOS|Desktop)/([^ ]+)(?: (.*))?$", re.IGNORECASE)


def platform_tag(user_agent: Optional[str]) -> str:
    """
    Reduce a client user agent to a low-cardinality platform label.

    ``Signal-Android/5.12.3 Android/30`` -> ``android``. Empty or foreign
    agents map to ``unrecognized``.
    """
    if not isinstance(user_agent, str):
        return UNRECOGNIZED
    text = user_agent.strip()
    if not text:
        return UNRECOGNIZED
    match = _AGENT_RE.match(text)
    if match is None:
        return UNRECOGNIZED
    return match.group(1).lower()


__all__ = ["UNRECOGNIZED", "platform_tag"]
