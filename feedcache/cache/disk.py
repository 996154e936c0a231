"""
Persistent cache tier backed by a SQLite file.

One database file per namespace (``<directory>/<name>.sqlite3``) holding
opaque byte payloads keyed by string. Entries survive process restarts and
stay until overwritten, removed, expired (when an expiry is configured) or
evicted by the size cap (oldest writes first).
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Generator, List, Optional

from sqlalchemy import Float, Integer, LargeBinary, String, create_engine, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from feedcache.cache.base import CacheBackend
from feedcache.config import DiskCacheConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class CacheEntryRecord(Base):
    """Row holding one cached payload."""

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    # Epoch seconds
    updated_at: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    expires_at: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and time.time() >= self.expires_at


class DiskCache(CacheBackend):
    """
    SQLite cache tier.

    If the database cannot be opened the tier stays usable but empty:
    every read misses and every write returns False.
    """

    def __init__(self, config: Optional[DiskCacheConfig] = None):
        self.config = config or DiskCacheConfig()
        super().__init__(enable_stats=self.config.enable_stats)
        self._lock = Lock()
        self._engine = None
        self._session_factory: Optional[sessionmaker] = None
        self._open()

    @property
    def path(self) -> Path:
        return self.config.database_path

    @property
    def is_available(self) -> bool:
        return self._session_factory is not None

    def _open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                f"sqlite:///{self.path}",
                connect_args={"check_same_thread": False},
            )
            Base.metadata.create_all(bind=engine)
        except (OSError, SQLAlchemyError) as e:
            logger.warning(f"Disk cache '{self.config.name}' unavailable at {self.path}: {e}")
            return

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        try:
            with self._session_factory() as session:
                self._refresh_counts(session)
        except SQLAlchemyError as e:
            self._fail("open", None, e)
        logger.debug(f"Disk cache '{self.config.name}' opened at {self.path}")

    def close(self) -> None:
        """Release the database connection pool."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def _fail(self, operation: str, key: Optional[str], error: Exception) -> None:
        if self.enable_stats:
            self.stats.errors += 1
        target = f" for '{key}'" if key is not None else ""
        logger.warning(f"Disk cache '{self.config.name}' {operation} failed{target}: {error}")

    def _refresh_counts(self, session: Session) -> None:
        if not self.enable_stats:
            return
        count, size = session.execute(
            select(func.count(CacheEntryRecord.key), func.coalesce(func.sum(CacheEntryRecord.size_bytes), 0))
        ).one()
        self.stats.entry_count = count
        self.stats.size_bytes = size

    def _enforce_size_limit(self, session: Session, keep: str) -> int:
        """Evict oldest entries (never ``keep``) until under max_size_bytes."""
        max_size = self.config.max_size_bytes
        total = session.scalar(select(func.coalesce(func.sum(CacheEntryRecord.size_bytes), 0)))
        if not max_size or total <= max_size:
            return 0

        evicted = 0
        oldest_first = session.scalars(
            select(CacheEntryRecord)
            .where(CacheEntryRecord.key != keep)
            .order_by(CacheEntryRecord.updated_at, CacheEntryRecord.key)
        ).all()
        for record in oldest_first:
            if total <= max_size:
                break
            total -= record.size_bytes
            session.delete(record)
            evicted += 1

        if self.enable_stats:
            self.stats.evictions += evicted
        return evicted

    @contextmanager
    def _session(self) -> Generator[Optional[Session], None, None]:
        """Hold the tier lock and yield a session; None once the tier is closed."""
        with self._lock:
            if self._session_factory is None:
                yield None
                return
            with self._session_factory() as session:
                yield session

    def get(self, key: str) -> Optional[bytes]:
        """Get the payload stored under key."""
        try:
            with self._session() as session:
                if session is None:
                    return None

                record = session.get(CacheEntryRecord, key)

                if record is None:
                    if self.enable_stats:
                        self.stats.misses += 1
                    return None

                if record.is_expired:
                    session.delete(record)
                    session.commit()
                    if self.enable_stats:
                        self.stats.misses += 1
                        self.stats.evictions += 1
                    return None

                if self.enable_stats:
                    self.stats.hits += 1
                return record.value
        except SQLAlchemyError as e:
            self._fail("read", key, e)
            return None

    def set(self, key: str, value: bytes) -> bool:
        """Store a payload under key, replacing any previous one."""
        size = len(value)
        if self.config.max_size_bytes and size > self.config.max_size_bytes:
            logger.debug(f"Payload for '{key}' ({size} bytes) exceeds disk cache limit")
            self.delete(key)
            return False

        now = time.time()
        expiry = self.config.expiry_seconds
        try:
            with self._session() as session:
                if session is None:
                    return False

                session.merge(
                    CacheEntryRecord(
                        key=key,
                        value=value,
                        size_bytes=size,
                        updated_at=now,
                        expires_at=now + expiry if expiry else None,
                    )
                )
                session.flush()
                self._enforce_size_limit(session, keep=key)
                session.commit()

                if self.enable_stats:
                    self.stats.sets += 1
                self._refresh_counts(session)
            return True
        except SQLAlchemyError as e:
            self._fail("write", key, e)
            return False

    def delete(self, key: str) -> bool:
        """Delete the payload stored under key."""
        try:
            with self._session() as session:
                if session is None:
                    return False

                result = session.execute(delete(CacheEntryRecord).where(CacheEntryRecord.key == key))
                session.commit()
                removed = result.rowcount > 0
                if self.enable_stats and removed:
                    self.stats.deletes += 1
                self._refresh_counts(session)
                return removed
        except SQLAlchemyError as e:
            self._fail("delete", key, e)
            return False

    def exists(self, key: str) -> bool:
        """Check if a live entry exists under key."""
        try:
            with self._session() as session:
                if session is None:
                    return False

                record = session.get(CacheEntryRecord, key)
                return record is not None and not record.is_expired
        except SQLAlchemyError as e:
            self._fail("lookup", key, e)
            return False

    def clear(self) -> int:
        """Remove every entry."""
        try:
            with self._session() as session:
                if session is None:
                    return 0

                result = session.execute(delete(CacheEntryRecord))
                session.commit()
                self._refresh_counts(session)
                return result.rowcount
        except SQLAlchemyError as e:
            self._fail("clear", None, e)
            return 0

    def remove_expired(self) -> int:
        """Remove entries whose expiry has passed."""
        try:
            with self._session() as session:
                if session is None:
                    return 0

                result = session.execute(
                    delete(CacheEntryRecord).where(
                        CacheEntryRecord.expires_at.is_not(None),
                        CacheEntryRecord.expires_at <= time.time(),
                    )
                )
                session.commit()
                if self.enable_stats:
                    self.stats.evictions += result.rowcount
                self._refresh_counts(session)
                return result.rowcount
        except SQLAlchemyError as e:
            self._fail("expiry sweep", None, e)
            return 0

    def keys(self) -> List[str]:
        """All live keys, oldest write first."""
        try:
            with self._session() as session:
                if session is None:
                    return []

                rows = session.execute(
                    select(CacheEntryRecord.key, CacheEntryRecord.expires_at)
                    .order_by(CacheEntryRecord.updated_at, CacheEntryRecord.key)
                ).all()
            now = time.time()
            return [key for key, expires_at in rows if expires_at is None or expires_at > now]
        except SQLAlchemyError as e:
            self._fail("key listing", None, e)
            return []

    def total_size(self) -> int:
        """Bytes of payload held on disk."""
        try:
            with self._session() as session:
                if session is None:
                    return 0

                return session.scalar(select(func.coalesce(func.sum(CacheEntryRecord.size_bytes), 0)))
        except SQLAlchemyError as e:
            self._fail("size query", None, e)
            return 0
