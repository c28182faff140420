"""Database repository for waste entries."""
import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

import aiosqlite
import structlog

logger = structlog.get_logger()


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class WasteEntry:
    """Logged waste entry."""
    id: int
    image_path: str
    items: list = field(default_factory=list)
    estimated_waste: dict = field(default_factory=dict)
    total_estimated_value: float = 0.0
    notes: str = ""
    model: str | None = None
    timestamp: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape returned by the API."""
        return {
            "id": self.id,
            "imagePath": self.image_path,
            "items": self.items,
            "estimatedWaste": self.estimated_waste,
            "totalEstimatedValue": self.total_estimated_value,
            "notes": self.notes,
            "model": self.model,
            "timestamp": self.timestamp,
        }


@dataclass
class WasteStats:
    """Aggregated statistics over all waste entries."""
    total_entries: int = 0
    total_items: int = 0
    total_estimated_value: float = 0.0
    average_value_per_entry: float = 0.0
    categories: dict[str, int] = field(default_factory=dict)
    conditions: dict[str, int] = field(default_factory=dict)
    top_items: list[dict[str, Any]] = field(default_factory=list)
    daily: list[dict[str, Any]] = field(default_factory=list)


class WasteRepository:
    """Repository for waste entry database operations."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def log(
        self,
        image_path: str,
        items: list,
        estimated_waste: dict,
        total_estimated_value: float = 0.0,
        notes: str = "",
        model: str | None = None,
        timestamp: str | None = None,
    ) -> WasteEntry:
        """Create a new waste entry."""
        timestamp = timestamp or utc_timestamp()

        cursor = await self.db.execute(
            """
            INSERT INTO waste_entries
                (image_path, items, estimated_waste, total_estimated_value, notes, model, timestamp)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                image_path,
                json.dumps(items),
                json.dumps(estimated_waste),
                float(total_estimated_value),
                notes,
                model,
                timestamp,
            )
        )
        await self.db.commit()

        logger.info("waste_entry_logged", entry_id=cursor.lastrowid, item_count=len(items))

        return WasteEntry(
            id=cursor.lastrowid,
            image_path=image_path,
            items=items,
            estimated_waste=estimated_waste,
            total_estimated_value=float(total_estimated_value),
            notes=notes,
            model=model,
            timestamp=timestamp,
        )

    async def get_by_id(self, entry_id: int) -> WasteEntry | None:
        """Get waste entry by ID."""
        cursor = await self.db.execute(
            "SELECT * FROM waste_entries WHERE id = ?",
            (entry_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_entry(row) if row else None

    async def get_history(
        self,
        limit: int = 50,
        offset: int = 0,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[WasteEntry]:
        """Get entries newest first, optionally within an inclusive date range."""
        where, params = self._date_filter(start_date, end_date)
        cursor = await self.db.execute(
            f"SELECT * FROM waste_entries {where} ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?",
            (*params, limit, offset)
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def count(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> int:
        """Count entries, optionally within an inclusive date range."""
        where, params = self._date_filter(start_date, end_date)
        cursor = await self.db.execute(
            f"SELECT COUNT(*) FROM waste_entries {where}", params
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def delete(self, entry_id: int) -> bool:
        """Delete waste entry."""
        cursor = await self.db.execute(
            "DELETE FROM waste_entries WHERE id = ?",
            (entry_id,)
        )
        await self.db.commit()
        return cursor.rowcount > 0

    async def get_stats(self, top_n: int = 5, days: int = 30) -> WasteStats:
        """Aggregate totals, category/condition counts, top items and daily totals."""
        cursor = await self.db.execute(
            "SELECT COUNT(*), COALESCE(SUM(total_estimated_value), 0) FROM waste_entries"
        )
        total_entries, total_value = await cursor.fetchone()

        cursor = await self.db.execute(
            """
            SELECT COUNT(*) FROM waste_entries w, json_each(w.items) j
            WHERE j.type = 'object'
            """
        )
        (total_items,) = await cursor.fetchone()

        categories = await self._count_item_field("category")
        conditions = await self._count_item_field("condition")

        cursor = await self.db.execute(
            """
            SELECT lower(trim(json_extract(j.value, '$.name'))) AS item_name,
                   COUNT(*) AS count,
                   COALESCE(SUM(json_extract(j.value, '$.estimatedValue')), 0) AS value
            FROM waste_entries w, json_each(w.items) j
            WHERE j.type = 'object'
            GROUP BY item_name
            HAVING item_name IS NOT NULL AND item_name != ''
            ORDER BY count DESC, value DESC
            LIMIT ?
            """,
            (top_n,)
        )
        top_items = [
            {"name": row[0], "count": row[1], "estimatedValue": round(row[2], 2)}
            for row in await cursor.fetchall()
        ]

        cursor = await self.db.execute(
            """
            SELECT substr(timestamp, 1, 10) AS day, COUNT(*), SUM(total_estimated_value)
            FROM waste_entries
            GROUP BY day
            ORDER BY day DESC
            LIMIT ?
            """,
            (days,)
        )
        daily = [
            {"date": row[0], "entries": row[1], "estimatedValue": round(row[2] or 0, 2)}
            for row in await cursor.fetchall()
        ]

        return WasteStats(
            total_entries=total_entries,
            total_items=total_items,
            total_estimated_value=round(total_value, 2),
            average_value_per_entry=round(total_value / total_entries, 2) if total_entries else 0.0,
            categories=categories,
            conditions=conditions,
            top_items=top_items,
            daily=daily,
        )

    async def _count_item_field(self, field_name: str) -> dict[str, int]:
        """Count items grouped by a text field, unknown values as 'unknown'."""
        cursor = await self.db.execute(
            f"""
            SELECT COALESCE(lower(trim(json_extract(j.value, '$.{field_name}'))), 'unknown') AS value,
                   COUNT(*) AS count
            FROM waste_entries w, json_each(w.items) j
            WHERE j.type = 'object'
            GROUP BY value
            ORDER BY count DESC
            """
        )
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}

    def _date_filter(
        self,
        start_date: date | None,
        end_date: date | None,
    ) -> tuple[str, tuple]:
        clauses = []
        params: list[str] = []
        if start_date:
            clauses.append("substr(timestamp, 1, 10) >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("substr(timestamp, 1, 10) <= ?")
            params.append(end_date.isoformat())
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, tuple(params)

    def _row_to_entry(self, row: tuple) -> WasteEntry:
        """Convert database row to WasteEntry object."""
        return WasteEntry(
            id=row[0],
            image_path=row[1],
            items=json.loads(row[2]) if row[2] else [],
            estimated_waste=json.loads(row[3]) if row[3] else {},
            total_estimated_value=row[4],
            notes=row[5],
            model=row[6],
            timestamp=row[7],
            created_at=row[8],
        )
