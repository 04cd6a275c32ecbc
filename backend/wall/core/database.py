from sqlalchemy import create_engine
from sqlalchemy.orm import registry, sessionmaker
from wall.core.config import settings


def build_engine(url: str, **kwargs):
    """Create an engine, relaxing SQLite's same-thread check for FastAPI's threadpool"""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


# Create database engine - manages connection pool
engine = build_engine(settings.DATABASE_URL)

# Create session factory - each request gets a new session
# autocommit=False: Changes require explicit commit
# autoflush=False: Don't auto-flush before queries
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Entities are plain dataclasses; tables are mapped onto them imperatively
# in wall.repositories.tables so the records carry no persistence details
mapper_registry = registry()
metadata = mapper_registry.metadata


def get_db():
    """
    Dependency for getting database session.

    The session is closed after the request completes, even on error.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
