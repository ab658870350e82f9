"""
Database session management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from presence.core.config import settings
from presence.db.base import Base

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_sqlite_tables() -> None:
    """Create all tables for SQLite databases (local runs); other backends use Alembic."""
    if "sqlite" in settings.DATABASE_URL:
        import presence.models  # noqa: F401  register models on Base.metadata
        Base.metadata.create_all(bind=engine)
