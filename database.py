import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def normalize_url(url: str) -> str:
    # Fix if the provider hands out postgres://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Database:
    """Owns the engine and session factory for one application instance.

    Opened by the application lifespan and closed on shutdown, so nothing
    touches the database at import time.
    """

    def __init__(self, url: str, echo: bool = False):
        if not url:
            raise ValueError("DATABASE_URL is not set")
        self.url = normalize_url(url)
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    def open(self, create_schema: bool = True) -> "Database":
        kwargs = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        self.engine = create_engine(self.url, **kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )
        if create_schema:
            import models  # noqa: F401  registers the tables on Base.metadata
            Base.metadata.create_all(bind=self.engine)
        logger.info("Database opened (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database closed")
        self.engine = None
        self.SessionLocal = None

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not open")
        return self.SessionLocal()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
