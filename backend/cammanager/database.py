"""
CamManager - Database Configuration
SQLAlchemy setup for the key-value store that keeps the user collection.

Only the user list outlives a restart; cameras, recorders, taxonomies,
maps and the activity log live in memory for the running session.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine with settings appropriate for the backend."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory SQLite: one shared connection or every session sees an empty DB
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,     # Verify connections before use
        pool_recycle=300,       # Recycle connections every 5 minutes
    )


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the given engine."""
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    # Import models so their tables are registered on Base.metadata
    from cammanager.models import settings as _settings  # noqa: F401

    Base.metadata.create_all(engine)
