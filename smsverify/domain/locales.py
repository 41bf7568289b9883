"""Locale negotiation against the provider's fixed language allow-list.

Matching follows the RFC 4647 *lookup* scheme: ranges are consulted in
priority order and each range is progressively truncated until it names an
allow-listed tag exactly (case-insensitive). ``*`` never matches in lookup, and
ranges weighted ``q=0`` exclude every tag they match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Union


SUPPORTED_VERIFY_LOCALES: FrozenSet[str] = frozenset(
    {
        "af",
        "ar",
        "ca",
        "zh",
        "zh-CN",
        "zh-HK",
        "hr",
        "cs",
        "da",
        "nl",
        "en",
        "en-GB",
        "fi",
        "fr",
        "de",
        "el",
        "he",
        "hi",
        "hu",
        "id",
        "it",
        "ja",
        "ko",
        "ms",
        "nb",
        "pl",
        "pt",
        "pt-BR",
        "ro",
        "ru",
        "es",
        "sv",
        "tl",
        "th",
        "tr",
        "vi",
    }
)

MAX_WEIGHT = 1.0
MIN_WEIGHT = 0.0

_RANGE_RE = re.compile(r"^(\*|[a-z]{1,8})(-(\*|[a-z0-9]{1,8}))*$")
_WEIGHT_RE = re.compile(r"^q=(0(\.[0-9]{0,3})?|1(\.0{0,3})?)$")


@dataclass(frozen=True)
class LanguageRange:
    """A lower-cased language range with its ``q`` weight."""

    range: str
    weight: float = MAX_WEIGHT

    def __post_init__(self) -> None:
        normalized = str(self.range or "").strip().lower()
        if not _RANGE_RE.match(normalized):
            raise ValueError(f"Invalid language range: {self.range!r}")
        if not MIN_WEIGHT <= float(self.weight) <= MAX_WEIGHT:
            raise ValueError(f"Weight out of range for {self.range!r}: {self.weight}")
        object.__setattr__(self, "range", normalized)
        object.__setattr__(self, "weight", float(self.weight))


RangeLike = Union[str, LanguageRange]


def parse_language_ranges(header: str) -> List[LanguageRange]:
    """Parse an ``Accept-Language`` style value into a priority list.

    Entries keep their relative order among equal weights and are sorted by
    descending weight, so ranges weighted ``q=0`` ("not acceptable") end up
    last. They are kept because lookup uses them to exclude tags.

    Raises:
        ValueError: If any entry is not a well-formed range or weight.
    """
    text = str(header or "").strip()
    if not text:
        return []

    parsed: List[LanguageRange] = []
    for raw_entry in text.split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        tag, _, params = entry.partition(";")
        weight = MAX_WEIGHT
        params = params.replace(" ", "")
        if params:
            if not _WEIGHT_RE.match(params.lower()):
                raise ValueError(f"Invalid weight in language range: {entry!r}")
            weight = float(params[2:])
        parsed.append(LanguageRange(tag.strip(), weight))

    return sorted(parsed, key=lambda lr: lr.weight, reverse=True)


def find_best_locale(
    language_ranges: Iterable[RangeLike],
    supported: Iterable[str] = SUPPORTED_VERIFY_LOCALES,
) -> Optional[str]:
    """Return the allow-listed tag that best satisfies ``language_ranges``.

    Args:
        language_ranges: Caller preferences, most preferred first. Plain strings
            are treated as ranges of weight 1.0. Zero-weight ranges mark tags
            as not acceptable; a truncated range never falls back onto them.
        supported: Allow-listed tags; the canonical spelling is returned.

    Returns:
        The matching allow-listed tag, or ``None`` when nothing matches.
    """
    ranges = [_coerce_range(item) for item in language_ranges]
    ranges = sorted(ranges, key=lambda lr: lr.weight, reverse=True)
    excluded = [lr.range.split("-") for lr in ranges if lr.weight <= MIN_WEIGHT]
    by_lower = {
        tag.lower(): tag
        for tag in supported
        if not any(_matches(zero, tag.lower().split("-")) for zero in excluded)
    }

    for language_range in ranges:
        if language_range.weight <= MIN_WEIGHT or language_range.range == "*":
            continue
        subtags = language_range.range.split("-")
        while subtags:
            match = _lookup(subtags, by_lower)
            if match is not None:
                return match
            subtags = _truncate(subtags)
    return None


def _coerce_range(item: RangeLike) -> LanguageRange:
    if isinstance(item, LanguageRange):
        return item
    return LanguageRange(str(item))


def _matches(subtags: List[str], candidate: List[str]) -> bool:
    if len(candidate) != len(subtags):
        return False
    return all(want in ("*", have) for want, have in zip(subtags, candidate))


def _lookup(subtags: List[str], by_lower: dict) -> Optional[str]:
    if "*" not in subtags:
        return by_lower.get("-".join(subtags))
    for lowered, tag in sorted(by_lower.items()):
        if _matches(subtags, lowered.split("-")):
            return tag
    return None


def _truncate(subtags: List[str]) -> List[str]:
    trimmed = subtags[:-1]
    # A singleton subtag never ends a lookup candidate.
    if trimmed and len(trimmed[-1]) == 1:
        trimmed = trimmed[:-1]
    return trimmed


__all__ = [
    "LanguageRange",
    "SUPPORTED_VERIFY_LOCALES",
    "find_best_locale",
    "parse_language_ranges",
]
