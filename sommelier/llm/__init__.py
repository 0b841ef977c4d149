"""
LLM integration layer.

Responsibilities:
- Hold Groq model configuration.
- Build the pairing-suggestion prompt for a query with no local match.
- Call Groq once and normalize its reply into AI-generated pairings.
- Classify failures as a missing credential or a degraded service.
"""
