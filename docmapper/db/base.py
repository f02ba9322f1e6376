"""SQLAlchemy Declarative Base — metadata shared by the store's tables.

Invariants:
    - Every ORM model inherits from Base, so create_schema() sees all tables
    - Constraint and index names are deterministic across SQLite and PostgreSQL

Design Decisions:
    - Base lives apart from the models: the session manager imports the
      metadata without importing the store
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for docmapper's storage tables."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
