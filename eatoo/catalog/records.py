from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

UNCATEGORIZED = "Uncategorized"

_PRICE_RE = re.compile(r"-?\d+(?:\.\d+)?")


# ── Record normalization ────────────────────────────────────────────────


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def normalize_id(value: Any) -> str | None:
    """Return ``value`` as a stripped string id, or ``None`` if blank."""
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def clean_text(value: Any) -> str | None:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def ensure_list(value: Any) -> list[Any]:
    """Wrap scalars in a list and turn missing values into an empty one."""
    if _is_missing(value):
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [v for v in value if not _is_missing(v)]
    return [value]


def first_id(record: Mapping[str, Any], *keys: str) -> str | None:
    """Return the first non-blank id found under ``keys``, in order."""
    for key in keys:
        value = normalize_id(record.get(key))
        if value:
            return value
    return None


def resolve_id(record: Mapping[str, Any]) -> str | None:
    return first_id(record, "$id", "id")


def _nested_id(value: Any) -> str | None:
    if isinstance(value, Mapping):
        return resolve_id(value)
    return normalize_id(value)


def resolve_restaurant_id(record: Mapping[str, Any]) -> str | None:
    """Read the owning restaurant id from any of the accepted key spellings."""
    for key in ("restaurant_id", "restaurantId", "restaurant"):
        rid = _nested_id(record.get(key))
        if rid:
            return rid
    return None


def resolve_menu_id(record: Mapping[str, Any]) -> str | None:
    for key in ("menu_id", "menuId", "menu"):
        mid = _nested_id(record.get(key))
        if mid:
            return mid
    return None


def parse_price(record: Mapping[str, Any]) -> float | None:
    """Return the item price as a float; strings like ``"RM25"`` are parsed."""
    for key in ("price_rm", "priceRM", "price"):
        value = record.get(key)
        if _is_missing(value) or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return float(value)
        match = _PRICE_RE.search(str(value))
        if match:
            return float(match.group())
    return None


def _tag_set(value: Any) -> frozenset[str]:
    return frozenset(t for t in (clean_text(v) for v in ensure_list(value)) if t)


# ── Catalog entities ────────────────────────────────────────────────────


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    restaurant_id: str
    type: str | None = None
    cuisine: str | None = None
    tags: frozenset[str] = frozenset()
    price: float | None = None
    menu_id: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Item | None:
        """Build an item, or return ``None`` when it has no id or restaurant."""
        item_id = resolve_id(record)
        restaurant_id = resolve_restaurant_id(record)
        if item_id is None or restaurant_id is None:
            return None
        return cls(
            id=item_id,
            name=clean_text(record.get("name")) or "Item",
            restaurant_id=restaurant_id,
            type=clean_text(record.get("type")),
            cuisine=clean_text(record.get("cuisine")),
            tags=_tag_set(record.get("tags")),
            price=parse_price(record),
            menu_id=resolve_menu_id(record),
        )


@dataclass(frozen=True)
class Menu:
    id: str
    name: str
    restaurant_id: str
    items: tuple[Item, ...] = ()


@dataclass(frozen=True)
class OrphanBucket:
    """Holds a restaurant's items whose menu id does not resolve to one of its menus."""

    items: tuple[Item, ...] = ()

    @property
    def name(self) -> str:
        return UNCATEGORIZED


MenuSection = Menu | OrphanBucket


@dataclass(frozen=True)
class Restaurant:
    id: str
    name: str
    cuisines: frozenset[str] = frozenset()
    ambience: frozenset[str] = frozenset()
    menus: tuple[MenuSection, ...] = ()
    location: str | None = None
    rating: float | None = None

    @property
    def items(self) -> Iterator[Item]:
        for menu in self.menus:
            yield from menu.items

    @property
    def orphan_bucket(self) -> OrphanBucket | None:
        for menu in self.menus:
            if isinstance(menu, OrphanBucket):
                return menu
        return None


@dataclass(frozen=True)
class Foodlist:
    id: str | None
    owner_id: str | None
    item_ids: frozenset[str] = frozenset()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Foodlist:
        item_ids: set[str] = set()
        for key in ("item_ids", "itemIds"):
            item_ids.update(i for i in map(normalize_id, ensure_list(record.get(key))) if i)
        # Lists may embed item records instead of plain ids
        for entry in ensure_list(record.get("items")):
            item_id = resolve_id(entry) if isinstance(entry, Mapping) else normalize_id(entry)
            if item_id:
                item_ids.add(item_id)
        owner = first_id(record, "owner_id", "ownerId")
        return cls(id=resolve_id(record), owner_id=owner, item_ids=frozenset(item_ids))


def _parse_rating(value: Any) -> float | None:
    if _is_missing(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def restaurant_fields(record: Mapping[str, Any]) -> dict[str, Any]:
    """Extract the scalar and tag fields of a raw restaurant record."""
    return {
        "name": clean_text(record.get("name")) or "Restaurant",
        "cuisines": _tag_set(record.get("cuisines")),
        "ambience": _tag_set(record.get("ambience")),
        "location": clean_text(record.get("location")),
        "rating": _parse_rating(record.get("rating")),
    }
