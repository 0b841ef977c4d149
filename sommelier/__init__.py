"""
Sommelier: food and wine pairing lookup.

Responsibilities:
- Load the curated pairing catalog at startup.
- Filter pairings by free-text query and category.
- Fall back to a generative model when nothing local matches.
- Coordinate the Browse / Filtered / AI-augmented view states.
"""
