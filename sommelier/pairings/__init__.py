"""
Pairing catalog and search.

Responsibilities:
- Define the catalog and AI-generated pairing records.
- Load and merge the static pairing sources once at startup.
- Filter the catalog by query text and category, preserving catalog order.
"""
