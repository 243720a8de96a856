"""Infrastructure Layer — database session management and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All SQLAlchemy failures mapped to core/errors.py types

Design Decisions:
    - unit_of_work lives beside the session manager: both own transaction boundaries
"""
