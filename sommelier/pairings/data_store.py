from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

import pandas as pd
from pydantic import ValidationError

from ..errors import CatalogLoadError
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import CatalogPairing

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["name_lower", "matches_lower", "restaurant_lower", "type", "course"]

_catalog: Catalog | None = None


class Catalog:
    """Immutable, ordered set of catalog pairings."""

    def __init__(self, items: Iterable[CatalogPairing]) -> None:
        self._items: tuple[CatalogPairing, ...] = tuple(items)
        self._frame: pd.DataFrame | None = None

    @property
    def items(self) -> tuple[CatalogPairing, ...]:
        return self._items

    @property
    def frame(self) -> pd.DataFrame:
        """Lower-cased search columns, one row per item, in catalog order."""
        if self._frame is None:
            self._frame = _build_frame(self._items)
        return self._frame

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CatalogPairing]:
        return iter(self._items)

    def __getitem__(self, index: int) -> CatalogPairing:
        return self._items[index]


def _build_frame(items: Sequence[CatalogPairing]) -> pd.DataFrame:
    rows = [
        {
            "name_lower": item.name.lower(),
            "matches_lower": tuple(m.lower() for m in item.matches),
            "restaurant_lower": (item.restaurant or "").lower(),
            "type": item.type.value,
            "course": item.course.value if item.course else None,
        }
        for item in items
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def parse_source(records: Any, source: str = "<memory>") -> list[CatalogPairing]:
    """Validate one decoded source: an array of objects with the required fields."""
    if not isinstance(records, list):
        raise CatalogLoadError(f"{source}: expected an array of pairings")

    items: list[CatalogPairing] = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise CatalogLoadError(f"{source}[{position}]: expected an object")
        try:
            items.append(CatalogPairing.model_validate(record))
        except ValidationError as exc:
            raise CatalogLoadError(f"{source}[{position}]: {exc}") from exc
    return items


def _read_source(path: Path) -> list[CatalogPairing]:
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogLoadError(f"{path}: cannot be read") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"{path}: invalid JSON ({exc.msg})") from exc
    return parse_source(records, source=path.name)


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Catalog:
    """Merge the basic and restaurant sources, keeping source and in-source order."""
    basic_path, restaurant_path = config.source_paths
    basic = _read_source(basic_path)
    restaurant = _read_source(restaurant_path)

    catalog = Catalog([*basic, *restaurant])
    logger.info(
        "Loaded pairing catalog: %d basic, %d restaurant", len(basic), len(restaurant)
    )
    return catalog


def get_catalog() -> Catalog:
    """Return the process-wide catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog
