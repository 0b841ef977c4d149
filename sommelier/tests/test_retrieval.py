from __future__ import annotations

from sommelier.pairings.data_store import Catalog, load_catalog, parse_source
from sommelier.pairings.models import CategoryFilter
from sommelier.pairings.retrieval import filter_pairings

SCENARIO = Catalog(parse_source([
    {"name": "Steak", "type": "food", "matches": ["Merlot", "Cabernet"], "description": "Grilled."},
    {"name": "Merlot", "type": "wine", "matches": ["Steak"], "description": "Soft red."},
]))

MIXED = Catalog(parse_source([
    {"name": "Salmon", "type": "food", "matches": ["Pinot Noir"], "description": "Fish."},
    {"name": "Pinot Noir", "type": "wine", "matches": ["Salmon", "Duck"], "description": "Light red."},
    {
        "name": "Burrata",
        "type": "food",
        "matches": ["Vermentino"],
        "description": "Creamy.",
        "course": "starter",
        "restaurant": "Osteria Lucca",
    },
    {
        "name": "Duck Breast",
        "type": "food",
        "matches": ["Pinot Noir"],
        "description": "Cherry jus.",
        "course": "main",
        "restaurant": "Osteria Lucca",
    },
    {
        "name": "Lemon Tart",
        "type": "food",
        "matches": ["Sauternes"],
        "description": "Sharp.",
        "course": "dessert",
        "restaurant": "The Harbour Room",
    },
]))


def _names(items):
    return [item.name for item in items]


# ── Query matching ───────────────────────────────────────────────────────


def test_empty_query_returns_full_catalog_in_order():
    assert _names(filter_pairings(MIXED, "", CategoryFilter.all)) == _names(MIXED)


def test_whitespace_query_is_treated_as_empty():
    assert _names(filter_pairings(MIXED, "   ", CategoryFilter.all)) == _names(MIXED)


def test_scenario_name_and_matches():
    result = filter_pairings(SCENARIO, "steak", CategoryFilter.all)
    assert _names(result) == ["Steak", "Merlot"]


def test_scenario_no_match():
    assert filter_pairings(SCENARIO, "nonexistent", CategoryFilter.all) == []


def test_query_is_case_insensitive():
    assert _names(filter_pairings(MIXED, "  SALMON ", CategoryFilter.all)) == ["Salmon", "Pinot Noir"]


def test_query_matches_restaurant():
    result = filter_pairings(MIXED, "harbour", CategoryFilter.all)
    assert _names(result) == ["Lemon Tart"]


def test_query_substring_of_pairing_partner():
    assert _names(filter_pairings(MIXED, "duck", CategoryFilter.all)) == ["Pinot Noir", "Duck Breast"]


def test_query_with_regex_characters_is_literal():
    assert filter_pairings(MIXED, "(.*)", CategoryFilter.all) == []


def test_every_item_found_by_its_lowercased_name():
    catalog = load_catalog()
    for item in catalog:
        assert item in filter_pairings(catalog, item.name.lower(), CategoryFilter.all)


# ── Category filtering ───────────────────────────────────────────────────


def test_type_categories():
    assert _names(filter_pairings(MIXED, "", CategoryFilter.wine)) == ["Pinot Noir"]
    assert "Pinot Noir" not in _names(filter_pairings(MIXED, "", CategoryFilter.food))


def test_course_categories_skip_items_without_course():
    assert _names(filter_pairings(MIXED, "", CategoryFilter.starter)) == ["Burrata"]
    assert _names(filter_pairings(MIXED, "", CategoryFilter.main)) == ["Duck Breast"]
    assert _names(filter_pairings(MIXED, "", CategoryFilter.dessert)) == ["Lemon Tart"]


def test_category_accepts_plain_string():
    assert _names(filter_pairings(MIXED, "", "wine")) == ["Pinot Noir"]


def test_query_and_category_combine():
    assert _names(filter_pairings(MIXED, "pinot", CategoryFilter.food)) == ["Salmon", "Duck Breast"]


def test_category_results_are_subset_of_all():
    for query in ["", "pinot", "duck", "osteria", "x"]:
        everything = filter_pairings(MIXED, query, CategoryFilter.all)
        for category in CategoryFilter:
            assert all(item in everything for item in filter_pairings(MIXED, query, category))


# ── Totality ─────────────────────────────────────────────────────────────


def test_filter_is_idempotent():
    first = filter_pairings(MIXED, "pinot", CategoryFilter.all)
    second = filter_pairings(MIXED, "pinot", CategoryFilter.all)
    assert first == second


def test_empty_catalog_yields_empty_result():
    empty = Catalog([])
    assert filter_pairings(empty, "", CategoryFilter.all) == []
    assert filter_pairings(empty, "steak", CategoryFilter.dessert) == []


def test_none_query_is_treated_as_empty():
    assert len(filter_pairings(MIXED, None, CategoryFilter.all)) == len(MIXED)
