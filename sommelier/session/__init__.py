"""
View-state coordination.

Responsibilities:
- Track the active query, category and results for the single app session.
- Move between Browse, Filtered and AI-augmented views on user triggers.
- Gate the AI consult on an empty result set and allow one call at a time.
- Expose a read-only snapshot for the renderer.
"""
