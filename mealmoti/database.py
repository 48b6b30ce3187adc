"""Database configuration and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from mealmoti.config import get_settings

settings = get_settings()

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize the database by creating all tables."""
    # Import all models here so they are registered with Base.metadata
    from mealmoti import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def upsert_statement(
    db: Session, model: Any, values: dict, index_elements: list[str], update: dict
):
    """Build an INSERT ... ON CONFLICT DO UPDATE for the session's dialect.

    The conflict target must be backed by a unique constraint on the table.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:
        raise NotImplementedError(f"Upsert not supported for dialect {dialect}")
    return stmt.on_conflict_do_update(index_elements=index_elements, set_=update)
