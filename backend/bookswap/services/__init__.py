"""
Services Layer

Business logic that:
- Accepts domain inputs (IDs, sessions, etc.)
- Returns domain outputs (models) or raises the errors in ``services.errors``
- Does NOT depend on HTTP request/response objects
"""
