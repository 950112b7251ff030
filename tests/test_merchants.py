from __future__ import annotations

import pytest

from statement_ledger.merchants import (
    DEFAULT_MERCHANT_ALIASES,
    Category,
    MerchantAliases,
    clean_merchant,
    suggest_category,
)


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("STARBUCKS STORE #123", "Starbucks"),
        ("AMZN Mktp US*2K4", "Amazon"),
        ("WAL-MART #4410", "Walmart"),
        ("STEAMGAMES.COM 4259522985", "Steam"),
        ("LOCAL DINER #12   BROOKLYN", "LOCAL DINER BROOKLYN"),
    ],
)
def test_clean_merchant_default_aliases(description, expected):
    assert clean_merchant(description) == expected


def test_aliases_are_injectable_and_read_only():
    aliases = MerchantAliases.from_pairs([("Joe's", "Joe's Coffee")])
    assert clean_merchant("JOE'S #3", aliases) == "Joe's Coffee"
    assert clean_merchant("STARBUCKS", aliases) == "STARBUCKS"
    assert list(aliases) == ["joe's"]
    with pytest.raises(TypeError):
        aliases["x"] = "y"  # type: ignore[index]
    assert "starbucks" in DEFAULT_MERCHANT_ALIASES


CATEGORIES = [
    Category(1, "Other"),
    Category(2, "Coffee", keywords=("starbucks", "dunkin")),
    Category(3, "Streaming", keywords=("netflix", "spotify")),
    Category(4, "Amazon"),
]


def test_suggest_category_by_keyword_and_name():
    assert suggest_category("STARBUCKS STORE #9", CATEGORIES) == 2
    assert suggest_category("NETFLIX.COM", CATEGORIES) == 3
    assert suggest_category("AMZN MKTP", CATEGORIES) == 4


def test_suggest_category_fallbacks():
    assert suggest_category("MYSTERY VENDOR", CATEGORIES) == 1
    assert suggest_category("MYSTERY VENDOR", CATEGORIES[1:]) is None
    assert suggest_category("anything", []) is None
