# scriptura/services/references/daily_verse.py
"""
Daily verse selection.

The verse list is loaded once at startup into an immutable table and
passed to the selector; selection is day-of-year (UTC) modulo the list
length, so it cycles through the list every year.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyVerseTable:
    """Ordered, read-only list of daily verse references."""
    references: tuple[str, ...]

    def __post_init__(self):
        if not self.references:
            raise ValueError("Daily verse table does not contain any verses.")

    def __len__(self) -> int:
        return len(self.references)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "DailyVerseTable":
        """
        Load references from a JSON file.

        Expected format:
            {"daily_bible_verses": ["John 3:16", "Psalm 23:1", ...]}
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        verses = data.get("daily_bible_verses") if isinstance(data, dict) else None
        if not isinstance(verses, list):
            verses = []

        table = cls(tuple(str(v) for v in verses if v))
        logger.info(f"Loaded {len(table)} daily verses from {path}")
        return table


def utc_day_of_year(when: Union[date, datetime]) -> int:
    """0-based day of year; aware datetimes are converted to UTC first."""
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        when = when.date()
    return when.timetuple().tm_yday - 1


def daily_reference(table: DailyVerseTable, when: Optional[Union[date, datetime]] = None) -> str:
    """Return the reference for a date (default: today, UTC)."""
    when = when or datetime.now(timezone.utc)
    return table.references[utc_day_of_year(when) % len(table.references)]
