"""Database session management with connection pooling"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack_gateway.config import settings

if settings.database_url.startswith("sqlite"):
    # SQLite connections are shared across FastAPI worker threads
    engine_options = {"connect_args": {"check_same_thread": False}}
else:
    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    engine_options = {"pool_size": 10, "max_overflow": 10, "pool_recycle": 3600}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    **engine_options,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
