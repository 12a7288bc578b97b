"""
Catalog assembly.

Joins flat restaurant, menu and item records into one nested graph per
restaurant. Assembly is best effort: records with missing or malformed keys
are dropped or orphaned and counted on the returned report, never raised.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .records import (
    Item,
    Menu,
    MenuSection,
    OrphanBucket,
    Restaurant,
    clean_text,
    resolve_id,
    resolve_restaurant_id,
    restaurant_fields,
)

Record = Mapping[str, Any]


@dataclass
class AssemblyReport:
    dropped_restaurants: int = 0
    dropped_menus: int = 0
    dropped_items: int = 0
    orphaned_items: int = 0

    @property
    def has_degradations(self) -> bool:
        return bool(
            self.dropped_restaurants or self.dropped_menus or self.dropped_items or self.orphaned_items
        )


@dataclass
class Catalog:
    restaurants: dict[str, Restaurant] = field(default_factory=dict)
    item_index: dict[str, str] = field(default_factory=dict)
    report: AssemblyReport = field(default_factory=AssemblyReport)

    def __len__(self) -> int:
        return len(self.restaurants)


def _build_menus(
    restaurant_id: str,
    menu_records: list[Record],
    items: list[Item],
    report: AssemblyReport,
) -> tuple[MenuSection, ...]:
    names: dict[str, str] = {}
    for raw in menu_records:
        menu_id = resolve_id(raw)
        if menu_id in names:
            report.dropped_menus += 1
            continue
        names[menu_id] = clean_text(raw.get("name")) or "Menu"

    grouped: dict[str, list[Item]] = {menu_id: [] for menu_id in names}
    orphans: list[Item] = []
    for item in items:
        if item.menu_id in grouped:
            grouped[item.menu_id].append(item)
        else:
            orphans.append(item)

    sections: list[MenuSection] = [
        Menu(id=menu_id, name=name, restaurant_id=restaurant_id, items=tuple(grouped[menu_id]))
        for menu_id, name in names.items()
    ]
    if orphans:
        report.orphaned_items += len(orphans)
        sections.append(OrphanBucket(items=tuple(orphans)))
    return tuple(sections)


def assemble_catalog(
    restaurants: Iterable[Record],
    menus: Iterable[Record],
    items: Iterable[Record],
) -> Catalog:
    """
    Build the restaurant graph and the item -> restaurant index.

    Items attach to a menu only when their menu id names one of their own
    restaurant's menus; everything else lands in that restaurant's
    "Uncategorized" bucket. Items without an id or restaurant, and items whose
    restaurant is not in the catalog, are counted as dropped.
    """
    report = AssemblyReport()

    menus_by_restaurant: dict[str, list[Record]] = defaultdict(list)
    for raw in menus:
        if not isinstance(raw, Mapping):
            report.dropped_menus += 1
            continue
        restaurant_id = resolve_restaurant_id(raw)
        if restaurant_id is None or resolve_id(raw) is None:
            report.dropped_menus += 1
            continue
        menus_by_restaurant[restaurant_id].append(raw)

    items_by_restaurant: dict[str, list[Item]] = defaultdict(list)
    for raw in items:
        item = Item.from_record(raw) if isinstance(raw, Mapping) else None
        if item is None:
            report.dropped_items += 1
            continue
        items_by_restaurant[item.restaurant_id].append(item)

    catalog = Catalog(report=report)
    for raw in restaurants:
        restaurant_id = resolve_id(raw) if isinstance(raw, Mapping) else None
        if restaurant_id is None or restaurant_id in catalog.restaurants:
            report.dropped_restaurants += 1
            continue
        restaurant = Restaurant(
            id=restaurant_id,
            menus=_build_menus(
                restaurant_id,
                menus_by_restaurant.pop(restaurant_id, []),
                items_by_restaurant.pop(restaurant_id, []),
                report,
            ),
            **restaurant_fields(raw),
        )
        catalog.restaurants[restaurant_id] = restaurant
        for item in restaurant.items:
            catalog.item_index.setdefault(item.id, restaurant_id)

    # Whatever is left points at restaurants that do not exist
    report.dropped_menus += sum(len(v) for v in menus_by_restaurant.values())
    report.dropped_items += sum(len(v) for v in items_by_restaurant.values())
    return catalog
