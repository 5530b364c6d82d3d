"""
Persistence for tracks.

``TrackRepository`` wraps one open SQLite connection and exposes the
queries the service layer needs as named methods.  It does not open,
commit or close connections; the caller owns the transaction (see
``core.db.transaction``).  A missing record is reported as ``None`` or
``False``, never as an exception, except for ``save`` which requires
an existing identifier.
"""

import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import List, Optional

_COLUMNS = (
    "id, title, artist, category, description, audio_url, cover_image, "
    "duration, is_favorite, created_at, updated_at"
)


class TrackStoreError(RuntimeError):
    """Raised when a store operation cannot be carried out."""


@dataclass
class TrackRecord:
    """In-memory copy of one row of the ``tracks`` table."""

    title: str
    artist: str
    category: str
    audio_url: str
    duration: int
    description: Optional[str] = None
    cover_image: Optional[str] = None
    is_favorite: bool = False
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _row_to_record(row: sqlite3.Row) -> TrackRecord:
    return TrackRecord(
        id=row["id"],
        title=row["title"],
        artist=row["artist"],
        category=row["category"],
        description=row["description"],
        audio_url=row["audio_url"],
        cover_image=row["cover_image"],
        duration=row["duration"],
        is_favorite=bool(row["is_favorite"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TrackRepository:
    """Query and mutate the ``tracks`` table over a given connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _select(self, where: str = "", params: tuple = ()) -> List[TrackRecord]:
        query = f"SELECT {_COLUMNS} FROM tracks"
        if where:
            query += f" WHERE {where}"
        query += " ORDER BY id"
        rows = self.conn.execute(query, params).fetchall()
        return [_row_to_record(row) for row in rows]

    def insert(self, record: TrackRecord) -> TrackRecord:
        """Store a new track and return it with id and timestamps set.

        The record's own id, timestamps and favorite flag are ignored;
        both timestamps get the same value.
        """
        timestamp = _now()
        cursor = self.conn.execute(
            """
            INSERT INTO tracks (title, artist, category, description, audio_url,
                                cover_image, duration, is_favorite, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.title,
                record.artist,
                record.category,
                record.description,
                record.audio_url,
                record.cover_image,
                record.duration,
                int(record.is_favorite),
                timestamp,
                timestamp,
            ),
        )
        return replace(record, id=cursor.lastrowid, created_at=timestamp, updated_at=timestamp)

    def find_by_id(self, track_id: int) -> Optional[TrackRecord]:
        row = self.conn.execute(
            f"SELECT {_COLUMNS} FROM tracks WHERE id = ?", (track_id,)
        ).fetchone()
        return _row_to_record(row) if row else None

    def find_all(self) -> List[TrackRecord]:
        return self._select()

    def find_by_category(self, category: str) -> List[TrackRecord]:
        # Exact, case-sensitive match
        return self._select("category = ?", (category,))

    def find_by_favorite(self, is_favorite: bool = True) -> List[TrackRecord]:
        return self._select("is_favorite = ?", (int(is_favorite),))

    def search_by_title_or_artist(self, query: str) -> List[TrackRecord]:
        """Return tracks whose title or artist contains ``query``.

        The match is a literal, case-insensitive substring test;
        ``%`` and ``_`` in the query have no special meaning.  Both
        sides are lowercased with ``py_lower`` (see ``core.db``), so
        non-ASCII letters fold too.
        """
        needle = query.lower()
        return self._select(
            "instr(py_lower(title), ?) > 0 OR instr(py_lower(artist), ?) > 0",
            (needle, needle),
        )

    def save(self, record: TrackRecord) -> TrackRecord:
        """Overwrite the stored track with the same id.

        ``created_at`` is never written; ``updated_at`` is refreshed.
        Raises ``TrackStoreError`` if the id is unset or unknown.
        """
        if record.id is None:
            raise TrackStoreError("Cannot save a track without an identifier")
        timestamp = _now()
        if record.created_at and record.created_at > timestamp:
            timestamp = record.created_at
        cursor = self.conn.execute(
            """
            UPDATE tracks
            SET title = ?, artist = ?, category = ?, description = ?, audio_url = ?,
                cover_image = ?, duration = ?, is_favorite = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                record.title,
                record.artist,
                record.category,
                record.description,
                record.audio_url,
                record.cover_image,
                record.duration,
                int(record.is_favorite),
                timestamp,
                record.id,
            ),
        )
        if cursor.rowcount == 0:
            raise TrackStoreError(f"Track {record.id} does not exist")
        return self.find_by_id(record.id)

    def exists_by_id(self, track_id: int) -> bool:
        row = self.conn.execute("SELECT 1 FROM tracks WHERE id = ?", (track_id,)).fetchone()
        return row is not None

    def delete_by_id(self, track_id: int) -> bool:
        """Hard-delete a track.  Returns ``True`` if a row was removed."""
        cursor = self.conn.execute("DELETE FROM tracks WHERE id = ?", (track_id,))
        return cursor.rowcount > 0
