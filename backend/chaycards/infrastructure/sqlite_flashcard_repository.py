"""SQLite-backed flashcard repository.

Stores per-card scheduling state and the append-only review history.
Uses async-safe operations with threading.
"""

import asyncio
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from chaycards.domain.entities.flashcard import CardStatus, Flashcard
from chaycards.domain.value_objects.review_quality import ReviewPerformance
from chaycards.domain.value_objects.spaced_repetition import (
    ReviewHistoryEntry,
    SpacedRepetitionState,
)


def _to_db(value: datetime | None) -> str | None:
    """Normalize to a fixed-width UTC ISO string so text order is time order."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _from_db(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SqliteFlashcardRepository:
    """FlashcardRepository implementation on SQLite.

    Thread-safe async operations using asyncio.Lock and to_thread.
    """

    def __init__(self, db_path: str | Path = "reviews.db"):
        """Initialize the repository.

        Args:
            db_path: Path to SQLite database file

        Database tables are created synchronously on construction.
        """
        self._db_path = Path(db_path)
        self._lock = asyncio.Lock()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with concurrency PRAGMAs.

        The transaction commits on a clean exit; the connection is closed
        either way.
        """
        conn = sqlite3.connect(self._db_path)
        try:
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA temp_store=MEMORY")
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            # WAL mode persists to database file (only needs to be set once)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS cards (
                    id TEXT PRIMARY KEY,
                    deck_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    interval REAL NOT NULL,
                    ease_factor REAL NOT NULL,
                    due_date TEXT NOT NULL,
                    review_count INTEGER NOT NULL DEFAULT 0,
                    last_review_date TEXT,
                    streak INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    modified_at TEXT NOT NULL
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_cards_due
                ON cards(deck_id, status, due_date)
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS review_history (
                    id TEXT PRIMARY KEY,
                    card_id TEXT NOT NULL,
                    review_date TEXT NOT NULL,
                    performance TEXT NOT NULL,
                    previous_interval REAL NOT NULL,
                    new_interval REAL NOT NULL,
                    time_spent_ms INTEGER NOT NULL DEFAULT 0
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_history_card
                ON review_history(card_id, review_date)
            """
            )

    # --- Cards ---

    async def get_card(self, card_id: str) -> Flashcard | None:
        async with self._lock:
            return await asyncio.to_thread(self._get_card_sync, card_id)

    def _get_card_sync(self, card_id: str) -> Flashcard | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
            return self._row_to_card(row) if row else None

    async def save_card(self, card: Flashcard) -> Flashcard:
        """Insert or update a card."""
        async with self._lock:
            await asyncio.to_thread(self._save_card_sync, card)
        return card

    def _save_card_sync(self, card: Flashcard) -> None:
        sr = card.spaced_repetition
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO cards (
                    id, deck_id, status, interval, ease_factor, due_date,
                    review_count, last_review_date, streak, created_at, modified_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    deck_id = excluded.deck_id,
                    status = excluded.status,
                    interval = excluded.interval,
                    ease_factor = excluded.ease_factor,
                    due_date = excluded.due_date,
                    review_count = excluded.review_count,
                    last_review_date = excluded.last_review_date,
                    streak = excluded.streak,
                    modified_at = excluded.modified_at
                """,
                (
                    card.id,
                    card.deck_id,
                    card.status.value,
                    sr.interval,
                    sr.ease_factor,
                    _to_db(sr.due_date),
                    sr.review_count,
                    _to_db(sr.last_review_date),
                    sr.streak,
                    _to_db(card.created_at),
                    _to_db(card.modified_at),
                ),
            )

    async def get_due_cards(self, deck_id: str, now: datetime, limit: int) -> list[Flashcard]:
        """Get active cards due at ``now``, soonest due first."""
        if limit <= 0:
            return []
        async with self._lock:
            return await asyncio.to_thread(self._get_due_sync, deck_id, now, limit)

    def _get_due_sync(self, deck_id: str, now: datetime, limit: int) -> list[Flashcard]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM cards
                WHERE deck_id = ? AND status = ? AND due_date <= ?
                ORDER BY due_date ASC
                LIMIT ?
                """,
                (deck_id, CardStatus.ACTIVE.value, _to_db(now), limit),
            ).fetchall()
            return [self._row_to_card(row) for row in rows]

    # --- Review history ---

    async def add_review_history(self, entry: ReviewHistoryEntry) -> None:
        async with self._lock:
            await asyncio.to_thread(self._add_history_sync, entry)

    def _add_history_sync(self, entry: ReviewHistoryEntry) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO review_history (
                    id, card_id, review_date, performance,
                    previous_interval, new_interval, time_spent_ms
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.card_id,
                    _to_db(entry.review_date),
                    entry.performance.value,
                    entry.previous_interval,
                    entry.new_interval,
                    entry.time_spent_ms,
                ),
            )

    async def get_review_history(self, card_id: str) -> list[ReviewHistoryEntry]:
        """Get history for a card, oldest first."""
        async with self._lock:
            return await asyncio.to_thread(self._get_history_sync, card_id)

    def _get_history_sync(self, card_id: str) -> list[ReviewHistoryEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM review_history
                WHERE card_id = ?
                ORDER BY review_date ASC, rowid ASC
                """,
                (card_id,),
            ).fetchall()
            return [
                ReviewHistoryEntry(
                    id=row["id"],
                    card_id=row["card_id"],
                    review_date=datetime.fromisoformat(row["review_date"]),
                    performance=ReviewPerformance(row["performance"]),
                    previous_interval=row["previous_interval"],
                    new_interval=row["new_interval"],
                    time_spent_ms=row["time_spent_ms"],
                )
                for row in rows
            ]

    @staticmethod
    def _row_to_card(row: sqlite3.Row) -> Flashcard:
        return Flashcard(
            id=row["id"],
            deck_id=row["deck_id"],
            spaced_repetition=SpacedRepetitionState(
                interval=row["interval"],
                ease_factor=row["ease_factor"],
                due_date=datetime.fromisoformat(row["due_date"]),
                review_count=row["review_count"],
                last_review_date=_from_db(row["last_review_date"]),
                streak=row["streak"],
            ),
            status=CardStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            modified_at=datetime.fromisoformat(row["modified_at"]),
        )
