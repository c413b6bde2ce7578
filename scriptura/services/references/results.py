# scriptura/services/references/results.py
"""
Typed outcomes of a scripture lookup.

Every resolver call produces exactly one of:
- Passage: a single contiguous passage with flattened text
- SearchSet: ordered verse-level matches for a phrase query
- Empty: nothing matched (a valid outcome, not an error)
- Failure: configuration, validation, transport, timeout or abort error

Empty and Failure never carry entries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class FailureKind(str, Enum):
    """Category of a failed lookup."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    ABORTED = "aborted"
    UNSUPPORTED_TRANSLATION = "unsupported_translation"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Failure:
    """
    A backend or local failure.

    Attributes:
        kind: Failure category
        message: Human-readable description (safe to log, never shown raw to users)
        status_code: HTTP status code when the backend answered non-2xx
        raw: Parsed error body from the backend, if any
    """
    kind: FailureKind
    message: str
    status_code: Optional[int] = None
    raw: Any = None

    def to_dict(self) -> dict:
        return {
            "kind": "failure",
            "failure": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class SearchEntry:
    """One verse-level search hit."""
    reference: str
    text: str
    id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "reference": self.reference, "text": self.text}


@dataclass(frozen=True)
class Passage:
    """
    A resolved passage.

    Attributes:
        text: Display text (flattened for api.bible, plain for ESV)
        reference: Canonical reference reported by the backend
        query: Original user query
        passage_id: Backend passage identifier, if any
        verse_count: Number of verses when the backend reports it
        copyright: Copyright line when the backend reports it
        raw: Raw backend payload (only when requested)
    """
    text: str
    reference: str
    query: str
    passage_id: Optional[str] = None
    verse_count: Optional[int] = None
    copyright: Optional[str] = None
    raw: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "kind": "passage",
            "query": self.query,
            "id": self.passage_id,
            "reference": self.reference,
            "verse_count": self.verse_count,
            "copyright": self.copyright,
            "text": self.text,
        }


@dataclass(frozen=True)
class SearchSet:
    """Verse-level matches for a query, for one page of results."""
    query: str
    entries: tuple[SearchEntry, ...]
    total: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    raw: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "kind": "search",
            "query": self.query,
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class Empty:
    """No passage or verse matched the query."""
    query: str
    raw: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {"kind": "empty", "query": self.query}


ResolvedResult = Union[Passage, SearchSet, Empty, Failure]


def unhandled_result(result: object) -> TypeError:
    """Build the error raised when a consumer meets an unknown result type."""
    return TypeError(f"Unhandled lookup result: {type(result).__name__}")
