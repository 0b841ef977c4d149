"""
Credential storage for the generative model.

Responsibilities:
- Persist the optional API key in a single-slot key-value store.
- Cache the key for the process lifetime and refresh it after each save.
- Reject empty keys before anything is written.
"""
