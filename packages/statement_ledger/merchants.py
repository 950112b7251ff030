"""Merchant-name cleanup and keyword category suggestions.

This sits beside the ledger, not inside it: suggestions are returned to the
caller (the category-assignment collaborator) and never written to storage.
The alias table is an immutable value passed in by the caller, so tests and
deployments can swap in their own.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType


class MerchantAliases(Mapping[str, str]):
    """Ordered, read-only ``lowercase substring -> clean merchant`` table."""

    __slots__ = ("_table",)

    def __init__(self, table: Mapping[str, str]) -> None:
        self._table = MappingProxyType({k.lower(): v for k, v in table.items()})

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> MerchantAliases:
        return cls(dict(pairs))

    def __getitem__(self, key: str) -> str:
        return self._table[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"MerchantAliases({dict(self._table)!r})"


DEFAULT_MERCHANT_ALIASES = MerchantAliases.from_pairs(
    [
        ("starbucks", "Starbucks"),
        ("cvs", "CVS"),
        ("wal-mart", "Walmart"),
        ("stop & shop", "Stop & Shop"),
        ("e-zpass", "E-ZPass"),
        ("uber", "Uber"),
        ("lyft", "Lyft"),
        ("doordash", "DoorDash"),
        ("netflix", "Netflix"),
        ("spotify", "Spotify"),
        ("openai", "OpenAI"),
        ("amazon", "Amazon"),
        ("amzn", "Amazon"),
        ("steamgames", "Steam"),
        ("exitlag", "ExitLag"),
    ]
)

_STORE_NUMBER = re.compile(r"#\d+")
_WS = re.compile(r"\s+")


def clean_merchant(
    description: str, aliases: Mapping[str, str] = DEFAULT_MERCHANT_ALIASES
) -> str:
    """Return the aliased merchant name, or the description minus store numbers."""

    lowered = description.lower()
    for pattern, clean in aliases.items():
        if pattern in lowered:
            return clean
    return _WS.sub(" ", _STORE_NUMBER.sub("", description)).strip()


@dataclass(frozen=True, slots=True)
class Category:
    id: int
    name: str
    keywords: tuple[str, ...] = field(default=())


_OTHER = "other"


def suggest_category(
    description: str,
    categories: Sequence[Category],
    aliases: Mapping[str, str] = DEFAULT_MERCHANT_ALIASES,
) -> int | None:
    """Return the id of the first category whose name or keyword matches.

    Matching is a case-insensitive substring test against the cleaned merchant
    name. Falls back to the "Other" category, or ``None`` when there is none.
    """

    merchant = clean_merchant(description, aliases).lower()
    fallback: int | None = None
    for category in categories:
        name = category.name.lower()
        if name == _OTHER:
            fallback = category.id
            continue
        if name in merchant:
            return category.id
        if any(k.lower() in merchant for k in category.keywords if k.strip()):
            return category.id
    return fallback


__all__ = [
    "Category",
    "DEFAULT_MERCHANT_ALIASES",
    "MerchantAliases",
    "clean_merchant",
    "suggest_category",
]
