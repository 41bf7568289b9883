from __future__ import annotations

from typing import List, Optional

import pytest

from smsverify.domain.locales import (
    SUPPORTED_VERIFY_LOCALES,
    LanguageRange,
    find_best_locale,
    parse_language_ranges,
)


@pytest.mark.parametrize(
    "ranges, expected",
    [
        (["de"], "de"),
        (["de-DE"], "de"),
        (["en-US", "de"], "en"),
        (["en-GB"], "en-GB"),
        (["en-gb-oxendict"], "en-GB"),
        (["ZH-cn"], "zh-CN"),
        (["zh-TW"], "zh"),
        (["zh-Hant-TW"], "zh"),
        (["de-x-private"], "de"),
        (["tlh", "xx", "pt-BR", "pt"], "pt-BR"),
        (["pt-PT"], "pt"),
    ],
)
def test_find_best_locale_lookup(ranges: List[str], expected: str) -> None:
    assert find_best_locale(ranges) == expected


@pytest.mark.parametrize("ranges", [[], ["tlh"], ["*"], ["xx-YY", "qaa"]])
def test_find_best_locale_without_match(ranges: List[str]) -> None:
    assert find_best_locale(ranges) is None


def test_find_best_locale_honours_weights_over_order() -> None:
    ranges = [LanguageRange("fr", 0.5), LanguageRange("es", 0.9)]

    assert find_best_locale(ranges) == "es"


def test_zero_weight_ranges_never_match() -> None:
    assert find_best_locale([LanguageRange("fr", 0.0)]) is None


def test_wildcard_subtag_matches_deterministically() -> None:
    assert find_best_locale(["zh-*"]) == "zh-CN"


def test_custom_allow_list() -> None:
    assert find_best_locale(["de-AT", "en"], supported={"en", "de-AT"}) == "de-AT"


def test_allow_list_is_immutable() -> None:
    assert isinstance(SUPPORTED_VERIFY_LOCALES, frozenset)
    assert {"en", "en-GB", "zh-HK", "pt-BR", "vi"} <= SUPPORTED_VERIFY_LOCALES


def test_parse_language_ranges_sorts_by_weight_and_keeps_zero_last() -> None:
    parsed = parse_language_ranges("de-DE, en;q=0.8, fr;q=0, es;q=0.9, it")

    assert [(lr.range, lr.weight) for lr in parsed] == [
        ("de-de", 1.0),
        ("it", 1.0),
        ("es", 0.9),
        ("en", 0.8),
        ("fr", 0.0),
    ]


@pytest.mark.parametrize("header", [None, "", "   "])
def test_parse_language_ranges_empty(header: Optional[str]) -> None:
    assert parse_language_ranges(header) == []  # type: ignore[arg-type]


@pytest.mark.parametrize("header", ["en_US", "en;q=2", "en;q=0.1234", "toolongsubtag", "en;x=1"])
def test_parse_language_ranges_rejects_malformed(header: str) -> None:
    with pytest.raises(ValueError):
        parse_language_ranges(header)


def test_parsed_header_feeds_lookup() -> None:
    assert find_best_locale(parse_language_ranges("tlh;q=1, sv-SE;q=0.7, en;q=0.5")) == "sv"


def test_zero_weight_header_excludes_truncated_fallback() -> None:
    assert find_best_locale(parse_language_ranges("en-US,en;q=0")) is None


def test_zero_weight_range_excludes_tag_regardless_of_position() -> None:
    ranges = [LanguageRange("en-us"), LanguageRange("en", 0.0)]

    assert find_best_locale(ranges) is None
    assert find_best_locale(ranges + [LanguageRange("de", 0.5)]) == "de"


def test_zero_weight_wildcard_excludes_matching_tags() -> None:
    ranges = [LanguageRange("zh-*", 0.0), LanguageRange("zh-TW")]

    assert find_best_locale(ranges) == "zh"
    assert find_best_locale([LanguageRange("zh-*", 0.0), "zh-HK"]) == "zh"
