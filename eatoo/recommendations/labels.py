from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..catalog.records import Foodlist


def positive_restaurant_ids(
    user_id: str | None,
    lists: Iterable[Foodlist | Mapping[str, Any]],
    item_index: Mapping[str, str],
) -> set[str]:
    """
    Return the ids of restaurants the user implicitly likes.

    A restaurant is liked when any item from it appears in one of the user's
    food lists. Lists owned by someone else are ignored; lists without an
    owner are trusted to belong to the user, since the list source already
    filtered them. Items missing from ``item_index`` are skipped.
    """
    if not user_id:
        return set()

    item_ids: set[str] = set()
    for entry in lists:
        foodlist = entry if isinstance(entry, Foodlist) else Foodlist.from_record(entry)
        if foodlist.owner_id is not None and foodlist.owner_id != user_id:
            continue
        item_ids |= foodlist.item_ids

    return {item_index[item_id] for item_id in item_ids if item_id in item_index}
