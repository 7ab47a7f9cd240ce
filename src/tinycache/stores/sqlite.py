"""SQLite object cache.

All operations catch ``aiosqlite.Error`` internally and degrade gracefully:
read failures are reported as a miss, write and delete failures are logged
and ignored. Infrastructure errors never cross the store boundary; the
content is still rendered and returned to the caller.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from tinycache.models.cache import CacheLookup

if TYPE_CHECKING:
    from tinycache.models.cache import CacheNamespace

log = structlog.get_logger()

_CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS object_cache (
    namespace   TEXT NOT NULL,
    cache_key   TEXT NOT NULL,
    value       TEXT NOT NULL,
    stored_at   TEXT NOT NULL,
    expires_at  TEXT NOT NULL,
    PRIMARY KEY (namespace, cache_key)
)
"""

_CREATE_METADATA_TABLE = """
CREATE TABLE IF NOT EXISTS store_metadata (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""

_CREATE_CACHE_INDEX = "CREATE INDEX IF NOT EXISTS idx_cache_expires ON object_cache(expires_at)"

# Only an expired row may be replaced: live rows keep the first writer's value.
_ADD_ENTRY = """INSERT INTO object_cache (namespace, cache_key, value, stored_at, expires_at)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT (namespace, cache_key) DO UPDATE SET
    value = excluded.value,
    stored_at = excluded.stored_at,
    expires_at = excluded.expires_at
WHERE object_cache.expires_at <= excluded.stored_at
"""


def _ts(value: datetime) -> str:
    # Fixed width so that string comparison in SQL matches time order.
    return value.astimezone(UTC).isoformat(timespec="microseconds")


class SqliteCacheStore:
    """SQLite-backed store implementing CacheStore."""

    is_persistent = True

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create tables and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_CACHE_TABLE)
        await self._db.execute(_CREATE_METADATA_TABLE)
        await self._db.execute(_CREATE_CACHE_INDEX)
        await self._db.commit()

    async def get(self, key: int | str, namespace: CacheNamespace) -> CacheLookup:
        """Read a live entry. Returns a miss when absent, expired, or on read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT value FROM object_cache "
                "WHERE namespace = ? AND cache_key = ? AND expires_at > ?",
                (namespace.value, str(key), _ts(datetime.now(UTC))),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", key=f"{namespace}:{key}", exc_info=True)
            return CacheLookup.miss()
        if row is None:
            return CacheLookup.miss()
        return CacheLookup.hit(row[0])

    async def add(
        self, key: int | str, value: str, namespace: CacheNamespace, ttl: timedelta
    ) -> bool:
        """Write an entry unless a live one exists. Non-fatal on failure."""
        try:
            now = datetime.now(UTC)
            cursor = await self._db.execute(
                _ADD_ENTRY,
                (namespace.value, str(key), value, _ts(now), _ts(now + ttl)),
            )
            written = cursor.rowcount > 0
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=f"{namespace}:{key}", exc_info=True)
            return False
        return written

    async def delete(self, key: int | str, namespace: CacheNamespace) -> None:
        """Remove an entry. Non-fatal on failure."""
        try:
            await self._db.execute(
                "DELETE FROM object_cache WHERE namespace = ? AND cache_key = ?",
                (namespace.value, str(key)),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_delete_error", key=f"{namespace}:{key}", exc_info=True)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def cleanup_expired(self) -> None:
        """Delete entries expired more than 7 days ago. Non-fatal on failure."""
        try:
            cutoff = _ts(datetime.now(UTC) - timedelta(days=7))
            cursor = await self._db.execute(
                "DELETE FROM object_cache WHERE expires_at < ?", (cutoff,)
            )
            deleted = cursor.rowcount
            await self._db.commit()
            log.info("cache_cleanup_complete", deleted=deleted)
        except aiosqlite.Error:
            log.warning("cache_cleanup_error", exc_info=True)

    async def cleanup_if_due(self, interval_hours: int) -> None:
        """Run cleanup_expired unless it already ran within ``interval_hours``.

        A failure reading the last run time falls through to a cleanup.
        """
        now = datetime.now(UTC)
        try:
            cursor = await self._db.execute(
                "SELECT value FROM store_metadata WHERE key = 'last_cleanup_at'"
            )
            row = await cursor.fetchone()
            if row is not None:
                last = datetime.fromisoformat(row[0])
                if now - last < timedelta(hours=interval_hours):
                    log.debug("cache_cleanup_skipped", last_cleanup_at=row[0])
                    return
        except aiosqlite.Error:
            log.warning("cache_metadata_read_error", exc_info=True)

        await self.cleanup_expired()

        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO store_metadata (key, value) "
                "VALUES ('last_cleanup_at', ?)",
                (_ts(now),),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_metadata_write_error", exc_info=True)
