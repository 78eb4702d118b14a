"""Database session management with connection pooling"""

from typing import Generator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from transfer_gateway.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the engine; pool settings only apply to server databases"""
    if settings.database_url.startswith("sqlite"):
        return create_engine(settings.database_url, connect_args={"check_same_thread": False})

    # Recycle connections after an hour to avoid stale connections
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
