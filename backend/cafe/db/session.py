"""Database handle and per-request session dependency.

The engine lives on an explicitly constructed ``Database`` object that the
application factory stores on ``app.state.database``; nothing here opens a
connection at import time.
"""

import logging
from collections.abc import Generator
from typing import Annotated, Any, Dict

from fastapi import Depends, Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cafe.core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns one engine and the session factory bound to it."""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        connect_args: Dict[str, Any] = engine_kwargs.pop("connect_args", {})

        if url.startswith("sqlite"):
            connect_args.setdefault("check_same_thread", False)

        self.engine: Engine = create_engine(
            url,
            connect_args=connect_args,
            echo=echo,
            **engine_kwargs,
        )

        # Enable foreign key enforcement for SQLite
        if url.startswith("sqlite"):
            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if settings.is_sqlite:
            pool_config: Dict[str, Any] = {"pool_pre_ping": True}
        else:
            pool_config = {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_timeout": settings.db_pool_timeout,
                "pool_recycle": settings.db_pool_recycle,
                "pool_pre_ping": True,
            }
        return cls(settings.database_url, echo=False, **pool_config)

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        from cafe.db.base import Base
        import cafe.models  # noqa: F401  register tables on Base.metadata

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from cafe.db.base import Base

        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(
    database: Annotated[Database, Depends(get_database)]
) -> Generator[Session, None, None]:
    """Get database session dependency."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()


# Type alias for dependency injection
DbSession = Annotated[Session, Depends(get_db)]
