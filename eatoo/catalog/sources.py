"""Collaborator ports feeding the recommender, plus the bundled adapters."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .records import resolve_id

CATALOG_KINDS = ("restaurants", "menus", "items")
FOODLISTS = "foodlists"


class CatalogSource(ABC):
    """Returns every record of a catalog entity kind, fully paginated."""

    @abstractmethod
    def list_all(self, kind: str) -> list[dict[str, Any]]:
        ...


class ListSource(ABC):
    @abstractmethod
    def list_lists_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Return the food list records owned by ``user_id``."""
        ...


class IdentitySource(ABC):
    @abstractmethod
    def current_user_id(self) -> str | None:
        """Return the signed-in user's id, or ``None`` if there is none."""
        ...


@dataclass(frozen=True)
class StaticIdentity(IdentitySource):
    user_id: str | None

    def current_user_id(self) -> str | None:
        return self.user_id


def _check_kind(kind: str) -> None:
    if kind not in CATALOG_KINDS:
        raise ValueError(f"Unknown catalog kind {kind!r}; expected one of {CATALOG_KINDS}")


# ── Fixture source ──────────────────────────────────────────────────────


class FixtureSource(CatalogSource, ListSource):
    """
    Serves the curated offline dataset stored as CSV files.

    Multi-valued columns hold comma-separated values and are split into lists
    on load, so records look like the ones the document store returns.
    """

    MULTI_VALUED: dict[str, tuple[str, ...]] = {
        "restaurants": ("cuisines", "ambience"),
        "items": ("tags",),
        FOODLISTS: ("item_ids",),
    }
    NUMERIC: dict[str, tuple[str, ...]] = {
        "restaurants": ("rating",),
        "items": ("price",),
    }

    def __init__(self, fixtures_dir: Path | None = None) -> None:
        self.fixtures_dir = Path(fixtures_dir or DEFAULT_CATALOG_CONFIG.fixtures_dir)
        self._frames: dict[str, pd.DataFrame] = {}

    def _load(self, name: str) -> pd.DataFrame:
        df = pd.read_csv(self.fixtures_dir / f"{name}.csv", dtype=str)

        for col in self.NUMERIC.get(name, ()):
            df[col] = pd.to_numeric(df[col], errors="coerce")

        for col in self.MULTI_VALUED.get(name, ()):
            df[col] = (
                df[col]
                .fillna("")
                .apply(lambda s: [v.strip() for v in s.split(",") if v.strip()])
            )
        return df

    def _records(self, name: str) -> list[dict[str, Any]]:
        if name not in self._frames:
            self._frames[name] = self._load(name)
        df = self._frames[name]
        return df.astype(object).where(df.notna(), None).to_dict(orient="records")

    def list_all(self, kind: str) -> list[dict[str, Any]]:
        _check_kind(kind)
        return self._records(kind)

    def list_lists_for_user(self, user_id: str) -> list[dict[str, Any]]:
        return [r for r in self._records(FOODLISTS) if r.get("owner_id") == user_id]


# ── Document store source ───────────────────────────────────────────────


class DocumentClient(Protocol):
    def list_documents(
        self,
        collection: str,
        *,
        limit: int,
        cursor_after: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        ...


class DocumentStoreSource(CatalogSource, ListSource):
    """
    Reads collections from a cursor-paginated document store.

    Pages are requested ``page_size`` documents at a time, each continuing
    after the id of the previous page's last document, until a short page
    comes back. Retries and backoff belong to the client.
    """

    def __init__(self, client: DocumentClient, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> None:
        self.client = client
        self.page_size = config.page_size

    def _list_all_documents(
        self, collection: str, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        documents: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            page = self.client.list_documents(
                collection, limit=self.page_size, cursor_after=cursor, filters=filters,
            )
            documents.extend(page)
            if len(page) < self.page_size:
                break
            cursor = resolve_id(page[-1])
            if cursor is None:
                break
        return documents

    def list_all(self, kind: str) -> list[dict[str, Any]]:
        _check_kind(kind)
        return self._list_all_documents(kind)

    def list_lists_for_user(self, user_id: str) -> list[dict[str, Any]]:
        return self._list_all_documents(FOODLISTS, filters={"owner_id": user_id})
