"""Database helpers for the append-only search history."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    Column,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.engine.url import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from cityweather.core.abstractions import HistoryEntry


logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///cityweather.db"
MYSQL_UTC_INIT = "SET time_zone = '+00:00'"

metadata = MetaData()

search_history = Table(
    "search_history",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    Column("city", Text, nullable=False),
    Column("search_time", TIMESTAMP, nullable=False, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)


class PersistenceError(RuntimeError):
    """Raised when the history table cannot be read or written."""


def database_url(url: str) -> URL:
    """Parse ``url``, pinning plain ``mysql://`` URLs to the PyMySQL driver."""

    parsed = make_url(url)
    if parsed.drivername == "mysql":
        parsed = parsed.set(drivername="mysql+pymysql")
    if parsed.get_backend_name() not in ("sqlite", "mysql"):
        raise ValueError(f"Unsupported database scheme: {parsed.drivername}")
    return parsed


def engine_options(url: URL, pool_size: int = 5) -> Dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        # IMMEDIATE takes the write lock up front so concurrent writers wait
        # on the busy timeout instead of failing on lock upgrade.
        connect_args = {"check_same_thread": False, "timeout": 10.0, "isolation_level": "IMMEDIATE"}
        if url.database in (None, "", ":memory:"):
            # every connection to :memory: would open its own database
            return {"connect_args": connect_args, "poolclass": StaticPool}
        return {"connect_args": connect_args, "pool_size": pool_size, "max_overflow": pool_size}

    return {
        # TIMESTAMP values come back in the session zone; keep it UTC
        "connect_args": {"init_command": MYSQL_UTC_INIT, "charset": "utf8mb4"},
        "pool_size": pool_size,
        "max_overflow": pool_size,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def create_history_engine(url: str, pool_size: int = 5) -> Engine:
    parsed = database_url(url)
    return create_engine(parsed, **engine_options(parsed, pool_size))


# ---------------------------------------------------------------------------

def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    # CURRENT_TIMESTAMP is stored without a zone and is UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _entry_from_row(row) -> HistoryEntry:
    mapping = row._mapping
    return HistoryEntry(
        id=int(mapping["id"]),
        city=mapping["city"],
        searched_at=_parse_timestamp(mapping["search_time"]),
    )


class HistoryStore:
    """Append-only log of city searches backed by the ``search_history`` table.

    The table is created on construction when the database is reachable and
    otherwise on the first call that needs it, so an outage at startup only
    affects history reads and writes.
    """

    def __init__(self, url: Optional[str] = None, pool_size: int = 5) -> None:
        self.url = url or DEFAULT_DATABASE_URL
        self.engine = create_history_engine(self.url, pool_size=pool_size)
        self._schema_ready = False
        self._schema_lock = threading.Lock()
        try:
            self.ensure_schema()
        except PersistenceError:
            logger.warning("History database unavailable, will retry on first use", exc_info=True)

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return
            try:
                metadata.create_all(self.engine, checkfirst=True)
            except SQLAlchemyError as exc:
                raise PersistenceError("could not create the search_history table") from exc
            self._schema_ready = True

    def record(self, city: str) -> HistoryEntry:
        self.ensure_schema()
        try:
            with self.engine.begin() as connection:
                result = connection.execute(insert(search_history).values(city=city))
                entry_id = result.inserted_primary_key[0]
                row = connection.execute(
                    select(search_history).where(search_history.c.id == entry_id)
                ).one()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not record search for {city!r}") from exc
        return _entry_from_row(row)

    def recent(self, limit: int) -> List[HistoryEntry]:
        if limit < 1:
            return []
        self.ensure_schema()
        query = select(search_history).order_by(search_history.c.id.desc()).limit(int(limit))
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(query).all()
        except SQLAlchemyError as exc:
            raise PersistenceError("could not read search history") from exc
        return [_entry_from_row(row) for row in rows]

    def count(self) -> int:
        self.ensure_schema()
        try:
            with self.engine.connect() as connection:
                return int(connection.execute(select(func.count()).select_from(search_history)).scalar_one())
        except SQLAlchemyError as exc:
            raise PersistenceError("could not count search history") from exc

    def close(self) -> None:
        self.engine.dispose()


__all__ = [
    "HistoryStore",
    "PersistenceError",
    "create_history_engine",
    "database_url",
    "engine_options",
    "search_history",
]
