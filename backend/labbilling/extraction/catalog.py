"""
Lab test catalog: the closed table of orderable tests.

The table itself lives in data/lab_catalog.json so it can be audited and
extended without touching the matching code. It is loaded once per process.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .types import CatalogEntry, Category

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "lab_catalog.json"


class Catalog:

    def __init__(self, entries, version=""):
        self.version = version
        self.entries: tuple[CatalogEntry, ...] = tuple(entries)
        self._by_key = {entry.name.lower(): entry for entry in self.entries}

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def lookup(self, name: str) -> CatalogEntry | None:
        """Exact, case-insensitive lookup by test name."""
        return self._by_key.get((name or "").lower())

    @classmethod
    def from_dict(cls, raw: dict) -> "Catalog":
        entries = []
        seen = set()
        for i, item in enumerate(raw.get("entries") or []):
            name = (item.get("name") or "").strip()
            if not name:
                raise ImproperlyConfigured(f"Lab catalog entry #{i} has no name.")

            key = name.lower()
            if key in seen:
                raise ImproperlyConfigured(f"Lab catalog has duplicate test name {name!r}.")
            seen.add(key)

            category = item.get("category")
            if category not in Category.ALL:
                raise ImproperlyConfigured(
                    f"Lab catalog entry {name!r} has unknown category {category!r}."
                )

            try:
                amount = Decimal(str(item.get("standard_amount") or "0"))
            except InvalidOperation:
                raise ImproperlyConfigured(f"Lab catalog entry {name!r} has a non-numeric amount.")
            if not amount.is_finite() or amount < 0:
                raise ImproperlyConfigured(f"Lab catalog entry {name!r} has an invalid amount.")

            entries.append(CatalogEntry(
                name=name,
                standard_amount=amount,
                category=category,
                price_note=(item.get("price_note") or "").strip(),
            ))

        return cls(entries, version=str(raw.get("version") or ""))


def load_catalog(path=None) -> Catalog:
    path = Path(path or DEFAULT_CATALOG_PATH)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ImproperlyConfigured(f"Cannot load lab catalog from {path}: {exc}") from exc

    catalog = Catalog.from_dict(raw)
    logger.info("[Catalog] loaded %d tests (version %s) from %s", len(catalog), catalog.version, path)
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide catalog; LAB_CATALOG_PATH overrides the bundled table."""
    return load_catalog(getattr(settings, "LAB_CATALOG_PATH", "") or None)
