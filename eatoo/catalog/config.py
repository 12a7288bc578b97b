from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_FIXTURES = Path(__file__).resolve().parent.parent / "data" / "fixtures"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Configuration for catalog sources.
    """

    fixtures_dir: Path = Path(os.getenv("EATOO_FIXTURES_DIR", str(_BUNDLED_FIXTURES)))
    page_size: int = int(os.getenv("EATOO_PAGE_SIZE", "100"))


DEFAULT_CATALOG_CONFIG = CatalogConfig()
