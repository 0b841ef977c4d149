from __future__ import annotations

import pandas as pd

from .data_store import Catalog
from .models import COURSE_CATEGORIES, TYPE_CATEGORIES, CatalogPairing, CategoryFilter


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def _category_mask(df: pd.DataFrame, category: CategoryFilter) -> pd.Series:
    if category in TYPE_CATEGORIES:
        return df["type"] == category.value
    if category in COURSE_CATEGORIES:
        # Items without a course never match a course category.
        return df["course"].fillna("") == category.value
    return pd.Series(True, index=df.index)


def _query_mask(df: pd.DataFrame, needle: str) -> pd.Series:
    by_name = df["name_lower"].str.contains(needle, regex=False, na=False)
    by_match = df["matches_lower"].apply(lambda ms: any(needle in m for m in ms)).astype(bool)
    by_restaurant = df["restaurant_lower"].str.contains(needle, regex=False, na=False)
    return by_name | by_match | by_restaurant


def filter_pairings(
    catalog: Catalog,
    query: str | None,
    category: CategoryFilter = CategoryFilter.all,
) -> list[CatalogPairing]:
    """
    Return the catalog items passing both the category and the query predicate.

    Matching is a case-insensitive substring test against the name, each pairing
    partner and the restaurant. Results keep catalog order; nothing is scored.
    """
    if len(catalog) == 0:
        return []

    df = catalog.frame
    mask = _category_mask(df, CategoryFilter(category))

    needle = normalize_query(query)
    if needle:
        mask = mask & _query_mask(df, needle)

    return [catalog[i] for i in df.index[mask.to_numpy(dtype=bool)]]
