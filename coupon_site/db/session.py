from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from coupon_site.db.base_class import Base


class Database:
    """Owns the engine and session factory for one application instance.

    Opened by the application lifespan at startup and disposed at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    def _engine_kwargs(self) -> dict:
        if self.url.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False, "timeout": 30}}
        return {
            "poolclass": QueuePool,
            "pool_size": 20,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
        }

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> None:
        if self.is_open:
            return
        self.engine = create_engine(self.url, echo=self.echo, **self._engine_kwargs())
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_tables(self) -> None:
        # Register models with Base.metadata
        import coupon_site.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if not self.is_open:
            raise RuntimeError("Database is not open")
        return self.SessionLocal()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None


def get_db(request: Request):
    """Database session generator for FastAPI dependency injection"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
