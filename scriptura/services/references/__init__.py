# scriptura/services/references/__init__.py
"""
Scripture lookup services for Scriptura.

This package provides:
- QueryResolver: Passage-vs-search resolution across both backends
- EsvClient: ESV API passage and search access
- ApiBibleClient: api.bible search and passage access
- CancelToken: Cancellation handle accepted by both clients
- Passage / SearchSet / Empty / Failure: Typed lookup results
- flatten / parse_content: api.bible content tree to display text
- DailyVerseTable / daily_reference: Deterministic daily verse
- Translation helpers: codes, Bible IDs, validation
"""

from .results import (
    Empty,
    Failure,
    FailureKind,
    Passage,
    ResolvedResult,
    SearchEntry,
    SearchSet,
    unhandled_result,
)
from .transport import CancelToken, get_json
from .content import Container, TextLeaf, flatten, parse_content
from .esv_client import EsvClient
from .apibible_client import ApiBibleClient, PassageOptions
from .resolver import QueryResolver, ResolveOptions, use_line_by_line
from .daily_verse import DailyVerseTable, daily_reference
from .translations import (
    API_BIBLE_BIBLES,
    DEFAULT_TRANSLATION,
    TRANSLATION_CHOICES,
    Backend,
    backend_for,
    bible_id_for,
    is_valid_translation,
    resolve_translation,
)

__all__ = [
    # Resolution (primary interface)
    "QueryResolver",
    "ResolveOptions",
    "use_line_by_line",
    # Results
    "Passage",
    "SearchSet",
    "SearchEntry",
    "Empty",
    "Failure",
    "FailureKind",
    "ResolvedResult",
    "unhandled_result",
    # Clients
    "EsvClient",
    "ApiBibleClient",
    "PassageOptions",
    "CancelToken",
    "get_json",
    # Content
    "TextLeaf",
    "Container",
    "parse_content",
    "flatten",
    # Daily verse
    "DailyVerseTable",
    "daily_reference",
    # Translations
    "API_BIBLE_BIBLES",
    "DEFAULT_TRANSLATION",
    "TRANSLATION_CHOICES",
    "Backend",
    "backend_for",
    "bible_id_for",
    "is_valid_translation",
    "resolve_translation",
]
