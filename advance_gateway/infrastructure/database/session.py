"""Database handle - engine and session factory built from settings"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from advance_gateway.infrastructure.database.models import Base


class Database:
    """
    Owns one engine and its session factory.

    Constructed once by the application factory (or a test fixture) and
    handed down through FastAPI dependencies; nothing in the package keeps
    a module-level engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo, **self._engine_options(url))
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @staticmethod
    def _engine_options(url: str) -> dict:
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            options = {"connect_args": {"check_same_thread": False}}
            if parsed.database in (None, "", ":memory:"):
                # Single shared connection so every session sees the same in-memory database
                options["poolclass"] = StaticPool
            return options
        # Connection pool: recycle after 1 hour to avoid stale connections
        return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 10, "pool_recycle": 3600}

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create any missing tables"""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def session_scope(database: Database) -> Iterator[Session]:
    """Yield a session; roll back on error and always close it"""
    db = database.session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
