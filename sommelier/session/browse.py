from __future__ import annotations

from ..pairings.models import CategoryFilter
from .models import BrowseView, ExploreTile

TITLE = "Sommelier"
SUBTITLE = "Discover the perfect pairing for your palate."
SEARCH_PLACEHOLDER = "Search for food (e.g., Steak) or wine (e.g., Merlot)..."

_EXPLORE = (
    ("Red meat, bold reds", "Structured reds for steak and lamb.", "steak", CategoryFilter.all),
    ("From the sea", "Crisp whites and bubbles for fish and shellfish.", "oysters", CategoryFilter.all),
    ("Something spicy", "Off-dry wines that calm the heat.", "curry", CategoryFilter.all),
    ("Sweet endings", "Dessert wines for the last course.", "", CategoryFilter.dessert),
    ("Browse the cellar", "Every wine on the list.", "", CategoryFilter.wine),
)


def render_browse_view() -> BrowseView:
    """The curated explore presentation. Depends on constants only."""
    return BrowseView(
        title=TITLE,
        subtitle=SUBTITLE,
        search_placeholder=SEARCH_PLACEHOLDER,
        tiles=tuple(
            ExploreTile(title=title, blurb=blurb, query=query, category=category)
            for title, blurb, query, category in _EXPLORE
        ),
    )
