"""
SQLite-backed encounter store.

Implements the load_encounters_preview backend contract used by the query
controller, plus the write operations the browser offers (delete selected,
favorite).
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from PySide6.QtCore import QMutex, QMutexLocker

from .models import EncounterPreview, EncountersOverview
from .query import Query
from ..utils.logging_config import get_logger

logger = get_logger("encounter_store")


def _fold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


class EncounterStore:
    """
    Encounter database with paginated, filtered preview queries.

    Fetch workers query it from background threads, so every statement runs
    under a mutex on a single shared connection.
    """

    def __init__(self, db_path: Union[Path, str] = ":memory:"):
        """
        Open (and create if needed) the database.

        Args:
            db_path: Database file, or ":memory:" for a private in-memory store
        """
        if db_path != ":memory:":
            db_path = Path(db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self._db_path = db_path
        self._mutex = QMutex()
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.create_function("fold", 1, _fold, deterministic=True)
        self._init_database()
        logger.info(f"Encounter store opened: {db_path}")

    def _init_database(self) -> None:
        """Create database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS encounters (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    boss_name TEXT NOT NULL,
                    fight_start INTEGER NOT NULL,
                    duration INTEGER NOT NULL,
                    cleared INTEGER,
                    favorite INTEGER NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS participants (
                    encounter_id INTEGER NOT NULL,
                    position INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    class_id INTEGER NOT NULL,
                    PRIMARY KEY (encounter_id, position),
                    FOREIGN KEY (encounter_id) REFERENCES encounters(id) ON DELETE CASCADE
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_fight_start ON encounters(fight_start)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_participant_class ON participants(class_id)"
            )
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Serialize access to the shared connection."""
        with QMutexLocker(self._mutex):
            yield self._conn

    def insert_encounter(
        self,
        boss_name: str,
        participants: Iterable[tuple[str, int]],
        fight_start: int,
        duration: int,
        cleared: Optional[bool] = None,
        favorite: bool = False,
    ) -> int:
        """
        Record one encounter.

        Args:
            boss_name: Encounter/boss name
            participants: (display name, class id) pairs in party order
            fight_start: Epoch milliseconds
            duration: Milliseconds
            cleared: Whether the fight was cleared, None if unknown
            favorite: Initial favorite flag

        Returns:
            New encounter id
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO encounters (boss_name, fight_start, duration, cleared, favorite)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    boss_name,
                    fight_start,
                    duration,
                    None if cleared is None else int(cleared),
                    int(favorite),
                ),
            )
            encounter_id = cursor.lastrowid
            conn.executemany(
                """
                INSERT INTO participants (encounter_id, position, name, class_id)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (encounter_id, position, name, class_id)
                    for position, (name, class_id) in enumerate(participants)
                ],
            )
            conn.commit()

        return encounter_id

    def load_encounters_preview(
        self, page: int, page_size: int, search: str, filter: dict[str, Any]
    ) -> EncountersOverview:
        """
        Fetch one page of encounter previews, newest first.

        Args:
            page: Page number (1-based)
            page_size: Rows per page
            search: Substring of the boss name or any participant name
            filter: min_duration, bosses, classes, cleared, favorites

        Returns:
            EncountersOverview with the page and the filtered total
        """
        if page < 1:
            page = 1

        where, params = self._build_where(search, filter)

        with self._get_connection() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) AS count FROM encounters e WHERE {where}", params
            ).fetchone()["count"]

            rows = conn.execute(
                f"""
                SELECT e.* FROM encounters e
                WHERE {where}
                ORDER BY e.fight_start DESC, e.id DESC
                LIMIT ? OFFSET ?
                """,
                params + [page_size, (page - 1) * page_size],
            ).fetchall()

            participants = self._load_participants(conn, [row["id"] for row in rows])

        encounters = tuple(
            self._row_to_preview(row, participants.get(row["id"], []))
            for row in rows
        )
        return EncountersOverview(encounters=encounters, total_encounters=total)

    def load_query(self, query: Query) -> EncountersOverview:
        """Run a canonical Query against the store."""
        return self.load_encounters_preview(**query.to_request())

    def _build_where(
        self, search: str, filter: dict[str, Any]
    ) -> tuple[str, list[Any]]:
        clauses = ["e.duration >= ?"]
        params: list[Any] = [filter.get("min_duration", 0)]

        if search:
            needle = search.casefold()
            clauses.append(
                "(instr(fold(e.boss_name), ?) > 0 OR EXISTS ("
                "SELECT 1 FROM participants p "
                "WHERE p.encounter_id = e.id AND instr(fold(p.name), ?) > 0))"
            )
            params.extend([needle, needle])

        bosses = list(filter.get("bosses") or ())
        if bosses:
            clauses.append(f"e.boss_name IN ({', '.join('?' * len(bosses))})")
            params.extend(bosses)

        classes = list(filter.get("classes") or ())
        if classes:
            clauses.append(
                "EXISTS (SELECT 1 FROM participants p WHERE p.encounter_id = e.id "
                f"AND p.class_id IN ({', '.join('?' * len(classes))}))"
            )
            params.extend(classes)

        if filter.get("cleared"):
            clauses.append("e.cleared = 1")
        if filter.get("favorites"):
            clauses.append("e.favorite = 1")

        return " AND ".join(clauses), params

    def _load_participants(
        self, conn: sqlite3.Connection, encounter_ids: list[int]
    ) -> dict[int, list[sqlite3.Row]]:
        if not encounter_ids:
            return {}

        cursor = conn.execute(
            f"""
            SELECT * FROM participants
            WHERE encounter_id IN ({', '.join('?' * len(encounter_ids))})
            ORDER BY encounter_id, position
            """,
            encounter_ids,
        )
        grouped: dict[int, list[sqlite3.Row]] = {}
        for row in cursor:
            grouped.setdefault(row["encounter_id"], []).append(row)
        return grouped

    def _row_to_preview(
        self, row: sqlite3.Row, participants: list[sqlite3.Row]
    ) -> EncounterPreview:
        """Convert a database row to an EncounterPreview."""
        cleared = row["cleared"]
        return EncounterPreview(
            id=row["id"],
            boss_name=row["boss_name"],
            names=tuple(p["name"] for p in participants),
            classes=tuple(p["class_id"] for p in participants),
            fight_start=row["fight_start"],
            duration=row["duration"],
            cleared=None if cleared is None else bool(cleared),
            favorite=bool(row["favorite"]),
        )

    def delete_encounters(self, encounter_ids: Iterable[int]) -> int:
        """
        Delete encounters and their participants.

        Returns:
            Number of encounters removed
        """
        ids = list(encounter_ids)
        if not ids:
            return 0

        placeholders = ", ".join("?" * len(ids))
        with self._get_connection() as conn:
            conn.execute(
                f"DELETE FROM participants WHERE encounter_id IN ({placeholders})", ids
            )
            cursor = conn.execute(
                f"DELETE FROM encounters WHERE id IN ({placeholders})", ids
            )
            conn.commit()

        logger.info(f"Deleted {cursor.rowcount} encounters")
        return cursor.rowcount

    def set_favorite(self, encounter_id: int, favorite: bool) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "UPDATE encounters SET favorite = ? WHERE id = ?",
                (int(favorite), encounter_id),
            )
            conn.commit()

    def get_total_count(self) -> int:
        """Get total number of encounters, ignoring any filter."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS count FROM encounters").fetchone()
            return row["count"] if row else 0

    def get_boss_names(self) -> list[str]:
        """Get unique boss names for the filter panel."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT DISTINCT boss_name FROM encounters ORDER BY boss_name"
            )
            return [row["boss_name"] for row in cursor]

    def clear(self) -> None:
        """Delete every encounter."""
        with self._get_connection() as conn:
            conn.execute("DELETE FROM participants")
            conn.execute("DELETE FROM encounters")
            conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
