"""SQLAlchemy Declarative Base — shared metadata for all ORM models.

Invariants:
    - All models inherit from Base; Base.metadata is what Alembic compares against
    - Constraint and index names are deterministic (naming_convention), so
      migrations can drop/alter them by name on every backend
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all TeamBuilder ORM models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
