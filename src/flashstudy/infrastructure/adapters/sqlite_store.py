"""
SQLite Flashcard Repository — Infrastructure adapter for the local card database.

Implements FlashcardRepository and the folder/card CRUD the CLI needs.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from flashstudy.domain.constants import DEFAULT_EASINESS_FACTOR
from flashstudy.domain.exceptions import InvalidArgumentError, PersistenceError
from flashstudy.domain.models import Flashcard, Folder
from flashstudy.domain.ports import ChecklistStateStore, FlashcardRepository

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS folders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    parent_id INTEGER,
    FOREIGN KEY (parent_id) REFERENCES folders(id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS flashcards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    folder_id INTEGER,
    easiness_factor REAL DEFAULT 2.5,
    interval INTEGER DEFAULT 0,
    repetitions INTEGER DEFAULT 0,
    last_reviewed TEXT,
    next_review TEXT,
    last_rating_quality INTEGER,
    FOREIGN KEY (folder_id) REFERENCES folders(id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_flashcards_folder_next
    ON flashcards (folder_id, next_review);
"""

CARD_COLUMNS = (
    "id, question, answer, folder_id, easiness_factor, interval, repetitions, "
    "last_reviewed, next_review, last_rating_quality"
)

INSERT_CARD = (
    "INSERT INTO flashcards (question, answer, folder_id, easiness_factor, interval, "
    "repetitions, last_reviewed, next_review, last_rating_quality) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"
)


def format_timestamp(value: datetime | None) -> str | None:
    # Fixed microsecond precision keeps string order equal to time order.
    if value is None:
        return None
    return value.isoformat(timespec="microseconds")


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring unparseable timestamp {value!r}")
        return None


def _folder_filter(folder_id: int | None) -> tuple[str, list[Any]]:
    if folder_id is None:
        return "folder_id IS NULL", []
    return "folder_id = ?", [folder_id]


def _card_params(card: Flashcard) -> list[Any]:
    return [
        card.question,
        card.answer,
        card.folder_id,
        card.easiness_factor,
        card.interval,
        card.repetitions,
        format_timestamp(card.last_reviewed),
        format_timestamp(card.next_review),
        card.last_rating_quality,
    ]


def _row_to_flashcard(row: sqlite3.Row) -> Flashcard:
    ease = row["easiness_factor"]
    interval = row["interval"]
    repetitions = row["repetitions"]
    return Flashcard(
        id=row["id"],
        question=row["question"] or "",
        answer=row["answer"] or "",
        folder_id=row["folder_id"],
        easiness_factor=float(ease) if ease is not None else DEFAULT_EASINESS_FACTOR,
        interval=max(0, int(interval or 0)),
        repetitions=max(0, int(repetitions or 0)),
        last_reviewed=parse_timestamp(row["last_reviewed"]),
        next_review=parse_timestamp(row["next_review"]),
        last_rating_quality=row["last_rating_quality"],
    )


def _row_to_folder(row: sqlite3.Row) -> Folder:
    return Folder(id=row["id"], name=row["name"] or "Unnamed Folder", parent_id=row["parent_id"])


class SqliteFlashcardRepository(FlashcardRepository):
    """
    Stores folders and flashcards in a local SQLite database.

    Opens a short-lived connection per operation. When a checklist store is
    attached, deleting a card also clears its saved checklist state.
    """

    def __init__(self, db_path: Path, checklist_store: ChecklistStateStore | None = None):
        self.db_path = Path(db_path)
        self.checklist_store = checklist_store
        self._initialized = False

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            if not self._initialized:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            if not self._initialized:
                conn.executescript(SCHEMA)
                self._initialized = True
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        finally:
            conn.close()

    # ---------- Flashcards ----------

    async def get_due_flashcards(self, folder_id: int | None, now: datetime) -> list[Flashcard]:
        where, args = _folder_filter(folder_id)
        query = (
            f"SELECT {CARD_COLUMNS} FROM flashcards "
            f"WHERE {where} AND next_review IS NOT NULL AND next_review <= ? "
            f"ORDER BY next_review ASC, id ASC"
        )
        with self._connect() as conn:
            rows = conn.execute(query, [*args, format_timestamp(now)]).fetchall()
        logger.debug(f"Found {len(rows)} due card(s) in folder {folder_id} at {now.isoformat()}")
        return [_row_to_flashcard(r) for r in rows]

    async def get_flashcards(self, folder_id: int | None) -> list[Flashcard]:
        where, args = _folder_filter(folder_id)
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {CARD_COLUMNS} FROM flashcards WHERE {where} ORDER BY id ASC", args
            ).fetchall()
        return [_row_to_flashcard(r) for r in rows]

    async def get_flashcard(self, card_id: int) -> Flashcard | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {CARD_COLUMNS} FROM flashcards WHERE id = ? LIMIT 1", [card_id]
            ).fetchone()
        return _row_to_flashcard(row) if row else None

    async def insert_flashcard(self, card: Flashcard) -> int:
        with self._connect() as conn:
            return conn.execute(INSERT_CARD, _card_params(card)).lastrowid

    async def insert_flashcards(self, cards: list[Flashcard]) -> list[int]:
        """Insert cards in one transaction; a failure leaves none of them stored."""
        with self._connect() as conn:
            new_ids = [conn.execute(INSERT_CARD, _card_params(card)).lastrowid for card in cards]
        logger.info(f"Inserted {len(new_ids)} flashcard(s)")
        return new_ids

    async def update_flashcard(self, card: Flashcard) -> int:
        """Update question, answer and folder of an existing card."""
        if card.id is None:
            raise InvalidArgumentError("Cannot update a flashcard without an id")
        with self._connect() as conn:
            cur = conn.execute(
                "UPDATE flashcards SET question = ?, answer = ?, folder_id = ? WHERE id = ?",
                [card.question, card.answer, card.folder_id, card.id],
            )
            return cur.rowcount

    async def delete_flashcard(self, card_id: int) -> bool:
        with self._connect() as conn:
            deleted = conn.execute("DELETE FROM flashcards WHERE id = ?", [card_id]).rowcount > 0

        if deleted:
            if self.checklist_store is not None:
                try:
                    await self.checklist_store.clear_checklist_state(card_id)
                except PersistenceError as e:
                    logger.error(
                        f"Deleted flashcard {card_id} but could not clear its checklist state: {e}"
                    )
            logger.info(f"Deleted flashcard {card_id}")
        else:
            logger.warning(f"Attempted to delete non-existent flashcard {card_id}")
        return deleted

    async def move_flashcards(self, card_ids: list[int], folder_id: int | None) -> None:
        if not card_ids:
            return
        placeholders = ",".join("?" for _ in card_ids)
        with self._connect() as conn:
            conn.execute(
                f"UPDATE flashcards SET folder_id = ? WHERE id IN ({placeholders})",
                [folder_id, *card_ids],
            )
        logger.info(f"Moved {len(card_ids)} flashcard(s) to folder {folder_id}")

    async def copy_flashcards(self, card_ids: list[int], folder_id: int | None) -> list[int]:
        """Copy cards into a folder. Copies start with fresh scheduling fields."""
        if not card_ids:
            return []
        placeholders = ",".join("?" for _ in card_ids)
        new_ids: list[int] = []
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT question, answer FROM flashcards WHERE id IN ({placeholders}) "
                f"ORDER BY id ASC",
                card_ids,
            ).fetchall()
            for row in rows:
                cur = conn.execute(
                    "INSERT INTO flashcards (question, answer, folder_id) VALUES (?, ?, ?)",
                    [row["question"], row["answer"], folder_id],
                )
                new_ids.append(cur.lastrowid)
        if not new_ids:
            logger.warning(f"No flashcards found to copy for ids {card_ids}")
        return new_ids

    async def update_flashcard_review_data(
        self,
        card_id: int,
        easiness_factor: float,
        interval: int,
        repetitions: int,
        last_reviewed: datetime | None,
        next_review: datetime | None,
        last_rating_quality: int | None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE flashcards SET easiness_factor = ?, interval = ?, repetitions = ?, "
                "last_reviewed = ?, next_review = ?, last_rating_quality = ? WHERE id = ?",
                [
                    easiness_factor,
                    interval,
                    repetitions,
                    format_timestamp(last_reviewed),
                    format_timestamp(next_review),
                    last_rating_quality,
                    card_id,
                ],
            )

    # ---------- Folders ----------

    async def get_folders(self, parent_id: int | None = None) -> list[Folder]:
        where = "parent_id IS NULL" if parent_id is None else "parent_id = ?"
        args = [] if parent_id is None else [parent_id]
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT id, name, parent_id FROM folders WHERE {where} "
                f"ORDER BY name COLLATE NOCASE ASC",
                args,
            ).fetchall()
        return [_row_to_folder(r) for r in rows]

    async def get_folder(self, folder_id: int) -> Folder | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, parent_id FROM folders WHERE id = ? LIMIT 1", [folder_id]
            ).fetchone()
        return _row_to_folder(row) if row else None

    async def insert_folder(self, folder: Folder) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO folders (name, parent_id) VALUES (?, ?)",
                [folder.name, folder.parent_id],
            )
            return cur.lastrowid

    async def update_folder(self, folder: Folder) -> int:
        if folder.id is None:
            raise InvalidArgumentError("Cannot update a folder without an id")
        with self._connect() as conn:
            return conn.execute(
                "UPDATE folders SET name = ?, parent_id = ? WHERE id = ?",
                [folder.name, folder.parent_id, folder.id],
            ).rowcount

    async def delete_folder(self, folder_id: int) -> bool:
        """Delete a folder; subfolders and their cards go with it."""
        with self._connect() as conn:
            deleted = conn.execute("DELETE FROM folders WHERE id = ?", [folder_id]).rowcount > 0
        if not deleted:
            logger.warning(f"Attempted to delete non-existent folder {folder_id}")
        return deleted

    async def get_folder_path(self, folder_id: int | None) -> list[Folder]:
        if folder_id is None:
            return []
        path: list[Folder] = []
        seen: set[int] = set()
        current: int | None = folder_id
        while current is not None and current not in seen:
            seen.add(current)
            folder = await self.get_folder(current)
            if folder is None:
                logger.warning(f"Folder {current} missing while building path for {folder_id}")
                break
            path.append(folder)
            current = folder.parent_id
        path.reverse()
        return path
