from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CatalogConfig:
    """
    Location of the static pairing sources.

    Sources are merged in a fixed order: basic pairings first, then restaurant pairings.
    """

    data_dir: Path = Path(__file__).resolve().parent.parent / "data"
    basic_filename: str = "pairings.json"
    restaurant_filename: str = "restaurant_pairings.json"

    @property
    def source_paths(self) -> tuple[Path, Path]:
        return (
            self.data_dir / self.basic_filename,
            self.data_dir / self.restaurant_filename,
        )


DEFAULT_CATALOG_CONFIG = CatalogConfig()
