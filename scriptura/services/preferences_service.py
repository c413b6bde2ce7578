# scriptura/services/preferences_service.py

"""
User preference store.

Keeps each user's preferred translation and verse display settings in a
single SQLite table keyed by Discord user ID. The store is an explicit
handle: construct it, call init() once, pass it to whoever needs it, and
close() it on shutdown.
"""

import json
import logging
import sqlite3
import threading
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from scriptura.utils.errors import StoreNotInitializedError

logger = logging.getLogger(__name__)


class Toggle(str, Enum):
    """Tri-state display setting."""
    AUTO = "auto"
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class DisplayPreferences:
    """
    Verse display settings.

    Attributes:
        footnotes: Show footnotes and study notes
        headings: Section headings (auto = backend default)
        verse_numbers: Show verse numbers
        line_by_line: One verse per line (auto = Psalms only)
    """
    footnotes: bool = False
    headings: Toggle = Toggle.AUTO
    verse_numbers: bool = True
    line_by_line: Toggle = Toggle.AUTO

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["headings"] = self.headings.value
        data["line_by_line"] = self.line_by_line.value
        return data


DEFAULT_DISPLAY = DisplayPreferences()

BOOLEAN_FIELDS = ("footnotes", "verse_numbers")
TOGGLE_FIELDS = ("headings", "line_by_line")


def _clean_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only known fields with values of the right type."""
    cleaned = {}
    for key in BOOLEAN_FIELDS:
        if isinstance(updates.get(key), bool):
            cleaned[key] = updates[key]
    for key in TOGGLE_FIELDS:
        value = updates.get(key)
        if isinstance(value, Toggle):
            cleaned[key] = value.value
        elif isinstance(value, str) and value in {t.value for t in Toggle}:
            cleaned[key] = value
    return cleaned


def _from_stored(stored: Dict[str, Any]) -> DisplayPreferences:
    values = _clean_updates(stored)
    for key in TOGGLE_FIELDS:
        if key in values:
            values[key] = Toggle(values[key])
    return replace(DEFAULT_DISPLAY, **values)


class PreferenceStore:
    """
    SQLite-backed per-user preferences.

    Writes are upserts keyed by user ID; the last writer wins. One
    connection is shared across worker threads and guarded by a lock.

    Usage:
        store = PreferenceStore(config.PREFERENCES_DB)
        store.init()
        store.set_preferred_translation("1234", "KJV")
        prefs = store.get_display_preferences("1234")
        store.close()
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def __enter__(self):
        self.init()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def init(self):
        """Open the database and create the table if needed."""
        if self._conn is not None:
            return
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS user_preferences (
                user_id TEXT PRIMARY KEY,
                preferred_translation TEXT,
                verse_display TEXT,
                updated_at TEXT
            );
            """
        )
        conn.commit()
        self._conn = conn
        logger.info(f"Preference store ready at {self.db_path}")

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreNotInitializedError(
                "Preference store has not been initialized. Call init() first."
            )
        return self._conn

    def _fetch_row(self, user_id: str) -> Optional[sqlite3.Row]:
        with self._lock:
            conn = self._require_conn()
            cur = conn.execute(
                "SELECT preferred_translation, verse_display FROM user_preferences WHERE user_id = ?",
                (str(user_id),),
            )
            return cur.fetchone()

    def ping(self) -> bool:
        """Check the database is reachable."""
        with self._lock:
            self._require_conn().execute("SELECT 1")
        return True

    # ---------------------------------------------------------------------
    # Translation
    # ---------------------------------------------------------------------

    def get_preferred_translation(self, user_id: str) -> Optional[str]:
        row = self._fetch_row(user_id)
        return row["preferred_translation"] if row else None

    def set_preferred_translation(self, user_id: str, translation: str):
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            conn = self._require_conn()
            conn.execute(
                """
                INSERT INTO user_preferences (user_id, preferred_translation, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    preferred_translation = excluded.preferred_translation,
                    updated_at = excluded.updated_at
                """,
                (str(user_id), translation, now),
            )
            conn.commit()

    # ---------------------------------------------------------------------
    # Display
    # ---------------------------------------------------------------------

    def _stored_display(self, user_id: str) -> Dict[str, Any]:
        row = self._fetch_row(user_id)
        if not row or not row["verse_display"]:
            return {}
        try:
            stored = json.loads(row["verse_display"])
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding unreadable display preferences for user {user_id}")
            return {}
        return stored if isinstance(stored, dict) else {}

    def get_display_preferences(self, user_id: str) -> DisplayPreferences:
        """Return display preferences with defaults for unset fields."""
        return _from_stored(self._stored_display(user_id))

    def set_display_preferences(self, user_id: str, updates: Dict[str, Any]) -> DisplayPreferences:
        """
        Merge a partial update into the user's display preferences.

        Unknown keys and values of the wrong type (including None) are
        ignored, so callers can pass every option straight through.
        """
        merged = {**self._stored_display(user_id), **_clean_updates(updates)}
        now = datetime.now(timezone.utc).isoformat()
        payload = json.dumps(merged)

        with self._lock:
            conn = self._require_conn()
            conn.execute(
                """
                INSERT INTO user_preferences (user_id, verse_display, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    verse_display = excluded.verse_display,
                    updated_at = excluded.updated_at
                """,
                (str(user_id), payload, now),
            )
            conn.commit()

        return _from_stored(merged)

    def reset_display_preferences(self, user_id: str) -> DisplayPreferences:
        """Clear display settings; the preferred translation is kept."""
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            conn = self._require_conn()
            conn.execute(
                """
                INSERT INTO user_preferences (user_id, verse_display, updated_at)
                VALUES (?, NULL, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    verse_display = NULL,
                    updated_at = excluded.updated_at
                """,
                (str(user_id), now),
            )
            conn.commit()
        return DEFAULT_DISPLAY
