from __future__ import annotations


class SommelierError(Exception):
    """Base class for errors raised by the sommelier package."""


class CatalogLoadError(SommelierError):
    """A pairing source is missing or malformed. Fatal at startup."""


class CredentialValidationError(SommelierError, ValueError):
    """An API key was rejected before being persisted."""
