# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory."""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from guild_roster.core.config import settings


def build_engine(url: Optional[str] = None) -> Optional[Engine]:
    """Return an engine for ``url`` (defaults to DATABASE_URL), or None when unset."""
    database_url = settings.DATABASE_URL if url is None else url
    if not database_url:
        return None
    if database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )
