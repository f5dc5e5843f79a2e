"""Services Layer — entity repositories, search, export, notifications and order workflow.

Invariants:
    - One explicit instance per entity/collaborator, built once in container.py
    - Services depend on core Protocols, never on FastAPI

Design Decisions:
    - Composition over subclassing: one EntityRepository class parametrized by model
"""
