"""
Database configuration and session management.
"""

import logging
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("haven.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _engine_options(url: str) -> dict:
    """Extra engine options per backend"""
    if url.startswith("sqlite"):
        # A single shared connection keeps an in-memory database alive across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True}


# Create engine
engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    future=True,
    **_engine_options(settings.database_url),
)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database():
    """Verify the backing store is reachable; optionally create the schema.

    Production schema is managed outside the engine, so tables are only
    created when ``db_create_schema`` is set (local development and tests).
    """
    with engine.begin() as conn:
        conn.execute(text("SELECT 1"))
        logger.info("Database connectivity check succeeded")

        if settings.db_create_schema:
            Base.metadata.create_all(bind=conn)
            logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
