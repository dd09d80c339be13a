"""
Reference resolution: human-entered codes and names -> internal identifiers.

The caller supplies dealers (``{"code", "id"}``) and users (``{"name", "id"}``)
already fetched from the host system; ``ReferenceIndex.build`` indexes them
once per import call so each row lookup is a dict hit rather than a scan.
Matching is case-insensitive and exact. Misses resolve to ``None`` here;
turning a miss into a warning is the transformer's job.

ZERO I/O. Nothing is cached across calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping


def _key(value: Any) -> str:
    return str(value).strip().casefold() if value is not None else ""


def _attr(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _index(items: Iterable[Any], key_attr: str) -> dict[str, Any]:
    """Index items by ``key_attr``; the first occurrence of a key wins, like a linear scan would."""
    index: dict[str, Any] = {}
    for item in items:
        key = _key(_attr(item, key_attr))
        if key and key not in index:
            index[key] = _attr(item, "id")
    return index


def _reverse(items: Iterable[Any], key_attr: str) -> dict[Any, str]:
    reverse: dict[Any, str] = {}
    for item in items:
        ident = _attr(item, "id")
        label = _attr(item, key_attr)
        if ident is not None and label is not None and ident not in reverse:
            reverse[ident] = str(label)
    return reverse


@dataclass(frozen=True)
class ReferenceIndex:
    """Read-only lookup tables for one import call."""

    dealers: Mapping[str, Any] = field(default_factory=dict)  # casefolded code -> id
    users: Mapping[str, Any] = field(default_factory=dict)  # casefolded name -> id
    factories: Mapping[str, str] = field(default_factory=dict)  # upper code -> label
    dealer_codes: Mapping[Any, str] = field(default_factory=dict)  # id -> code
    user_names: Mapping[Any, str] = field(default_factory=dict)  # id -> name

    @classmethod
    def build(
        cls,
        dealers: Iterable[Any] = (),
        users: Iterable[Any] = (),
        factories: Mapping[str, str] | None = None,
    ) -> "ReferenceIndex":
        dealers = list(dealers or ())
        users = list(users or ())
        return cls(
            dealers=MappingProxyType(_index(dealers, "code")),
            users=MappingProxyType(_index(users, "name")),
            factories=MappingProxyType({k.upper(): v for k, v in (factories or {}).items()}),
            dealer_codes=MappingProxyType(_reverse(dealers, "code")),
            user_names=MappingProxyType(_reverse(users, "name")),
        )

    def resolve_dealer(self, code: str | None) -> Any | None:
        return resolve_dealer(code, self.dealers)

    def resolve_estimator(self, name: str | None) -> Any | None:
        return resolve_estimator(name, self.users)

    def resolve_factory(self, code: str) -> str:
        return resolve_factory(code, self.factories)

    def dealer_code_for(self, dealer_id: Any) -> str | None:
        return self.dealer_codes.get(dealer_id) if dealer_id is not None else None

    def estimator_name_for(self, user_id: Any) -> str | None:
        return self.user_names.get(user_id) if user_id is not None else None


def resolve_dealer(code: str | None, dealers: Mapping[str, Any]) -> Any | None:
    """Dealer id for a dealer code, or None."""
    key = _key(code)
    return dealers.get(key) if key else None


def resolve_estimator(name: str | None, users: Mapping[str, Any]) -> Any | None:
    """User id for an estimator's display name, or None."""
    key = _key(name)
    return users.get(key) if key else None


def resolve_factory(code: str, factories: Mapping[str, str]) -> str:
    """Canonical factory label; an unrecognized code passes through unchanged."""
    return factories.get(code.strip().upper(), code)
