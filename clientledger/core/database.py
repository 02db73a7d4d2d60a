"""
Database configuration.
Synchronous SQLAlchemy engine backing the key-value storage slots.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from clientledger.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""
    pass


def create_db_engine(database_url: str = settings.DATABASE_URL) -> Engine:
    """
    Create the SQLAlchemy engine.
    
    SQLite connections are shared with the event loop thread, so the
    same-thread check is disabled for them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    
    return create_engine(
        database_url,
        echo=settings.DEBUG and settings.LOG_LEVEL.upper() == "DEBUG",
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = create_db_engine()

SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    expire_on_commit=False,
)


def init_db(bind: Engine = engine) -> None:
    """Create all tables."""
    # Import models so they register on the metadata
    from clientledger import models  # noqa: F401
    
    Base.metadata.create_all(bind=bind)


def close_db(bind: Engine = engine) -> None:
    """Dispose of the engine's connection pool."""
    bind.dispose()
