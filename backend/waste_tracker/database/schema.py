"""SQLite database schema for the Food Waste Tracker."""
from pathlib import Path

import aiosqlite
import structlog

logger = structlog.get_logger()

# Schema version for migrations
SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Waste entries: One row per analyzed photo
CREATE TABLE IF NOT EXISTS waste_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    image_path TEXT NOT NULL,        -- Public path, e.g. /uploads/<file>
    items JSON NOT NULL,             -- Canonical items array
    estimated_waste JSON NOT NULL,   -- {"weight": ..., "percentage": ...}
    total_estimated_value REAL NOT NULL DEFAULT 0,
    notes TEXT NOT NULL DEFAULT '',
    model TEXT,                      -- Model that produced the analysis
    timestamp TEXT NOT NULL,         -- ISO-8601 UTC capture time
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Schema metadata
CREATE TABLE IF NOT EXISTS schema_info (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Indexes for common queries
CREATE INDEX IF NOT EXISTS idx_waste_entries_timestamp ON waste_entries(timestamp);
"""


async def init_database(db_path: str | Path) -> aiosqlite.Connection:
    """Initialize database with schema.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        Database connection.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("initializing_database", path=str(db_path))

    db = await aiosqlite.connect(str(db_path))

    await db.executescript(SCHEMA_SQL)

    await db.execute(
        "INSERT OR REPLACE INTO schema_info (key, value) VALUES (?, ?)",
        ("version", str(SCHEMA_VERSION))
    )

    await db.commit()

    logger.info("database_initialized", path=str(db_path), version=SCHEMA_VERSION)

    return db


async def get_schema_version(db: aiosqlite.Connection) -> int | None:
    """Get current schema version from database."""
    try:
        cursor = await db.execute(
            "SELECT value FROM schema_info WHERE key = ?",
            ("version",)
        )
        row = await cursor.fetchone()
        return int(row[0]) if row else None
    except aiosqlite.OperationalError:
        return None


async def close_database(db: aiosqlite.Connection) -> None:
    """Close database connection."""
    await db.close()
    logger.info("database_closed")
