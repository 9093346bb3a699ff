from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .schema import Base, Cuisine

logger = logging.getLogger(__name__)


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # SQLite ignores foreign keys and matches LIKE case-insensitively unless told otherwise
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


class Datastore:
    """Engine plus session factory, built once per process and handed to components."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        kwargs: dict = {"echo": echo}
        is_sqlite = url.startswith("sqlite")
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        self.engine: Engine = create_engine(url, **kwargs)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_pragmas)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session; roll back on error and always close."""
        session = self._sessions()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self.engine)

    def seed_cuisines(self, names: Iterable[str]) -> int:
        """Insert any cuisine in *names* that is not stored yet. Returns how many were added."""
        wanted = [n.strip() for n in names if n and n.strip()]
        with self.session() as session:
            existing = set(session.scalars(select(Cuisine.name)).all())
            missing = [n for n in dict.fromkeys(wanted) if n not in existing]
            session.add_all(Cuisine(name=n) for n in missing)
            session.commit()
        if missing:
            logger.info("Seeded %d cuisines", len(missing))
        return len(missing)

    def dispose(self) -> None:
        self.engine.dispose()
