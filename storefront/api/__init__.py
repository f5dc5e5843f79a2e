"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses, except exports (file bytes)

Design Decisions:
    - Thin routes delegate to the Services container on app.state
"""
