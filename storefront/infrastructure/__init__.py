"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external failures mapped to the core error hierarchy

Design Decisions:
    - Thin wrappers over raw clients (SQLAlchemy engine, aiosmtplib, jinja2)
"""
