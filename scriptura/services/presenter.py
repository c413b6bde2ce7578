# scriptura/services/presenter.py
"""
Display records for lookup results.

Turns resolver output into plain records (title, body, footer, fields)
that the Discord layer renders as embeds and the HTTP layer can return
as JSON. Limits follow Discord's embed constraints.
"""

import math
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

from scriptura.services.preferences_service import DisplayPreferences, Toggle
from scriptura.services.references.results import Passage, SearchSet

PAGE_SIZE = 10
FIELD_VALUE_LIMIT = 1024
DESCRIPTION_LIMIT = 4096
FOOTER_LIMIT = 2048
EMBED_COLOR = 0x2F5233

GENERIC_ERROR = "There was an error while executing this command!"
NO_RESULTS = "No results found."


@dataclass(frozen=True)
class PassageRecord:
    title: str
    description: str
    url: str
    footer: str
    copyright: Optional[str] = None
    color: int = EMBED_COLOR


@dataclass(frozen=True)
class SearchPageRecord:
    title: str
    description: str
    footer: str
    fields: tuple = field(default_factory=tuple)
    color: int = EMBED_COLOR


def truncate(text: str, limit: int, marker: str = "…") -> str:
    """Cut text to at most `limit` characters, ending with `marker` when cut."""
    if len(text) <= limit:
        return text
    return text[: limit - len(marker)] + marker


def format_range(start: int, count: int) -> str:
    """Human 1-based range for `count` items starting at 0-based `start`."""
    if count == 0:
        return "0"
    return f"{start + 1}-{start + count}"


def total_pages(total: Optional[int], page_size: int = PAGE_SIZE) -> Optional[int]:
    """Number of pages for a known total; None when the total is unknown."""
    if total is None:
        return None
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, pages: Optional[int]) -> int:
    """Clamp a page index into [0, pages - 1] (lower bound only when unknown)."""
    page = max(0, page)
    if pages is not None:
        page = min(page, pages - 1)
    return page


def passage_url(reference: str, translation: str) -> str:
    return (
        "https://www.biblegateway.com/passage/"
        f"?search={quote(reference, safe='')}&version={quote(translation, safe='')}"
    )


def build_passage_record(passage: Passage, translation: str) -> PassageRecord:
    """Single passage: title "<reference> (<translation>)", text as body."""
    return PassageRecord(
        title=f"{passage.reference} ({translation})",
        description=truncate(passage.text, DESCRIPTION_LIMIT, "..."),
        url=passage_url(passage.reference, translation),
        footer=truncate(f"{translation} · {passage.copyright}", FOOTER_LIMIT) if passage.copyright else translation,
        copyright=passage.copyright,
    )


def build_search_page(
    search: SearchSet,
    translation: str,
    page: int,
    page_size: int = PAGE_SIZE,
    pages: Optional[int] = None,
) -> SearchPageRecord:
    """
    One page of search results as (label, body) fields.

    Args:
        search: Entries for this page only
        translation: Translation code shown in the description
        page: 0-based page index
        page_size: Page size used to number the results
        pages: Total pages, or None when the backend gave no total
    """
    entries = search.entries[:page_size]
    start = page * page_size
    shown = format_range(start, len(entries))
    page_label = f"Page {page + 1}/{pages}" if pages is not None else f"Page {page + 1}"

    if isinstance(search.total, int):
        footer = f"{page_label} · Showing {shown} of {search.total} results"
    else:
        footer = f"{page_label} · Showing {shown} results"

    fields = []
    for entry in entries:
        body = (entry.text or "").strip()
        fields.append((
            entry.reference or "Result",
            truncate(body, FIELD_VALUE_LIMIT) if body else "(no text)",
        ))

    return SearchPageRecord(
        title=f'Search results: "{search.query}"',
        description=f"Translation: **{translation}**",
        footer=footer,
        fields=tuple(fields),
    )


def build_error_message(
    content: str,
    query: Optional[str] = None,
    translation: Optional[str] = None,
    hint: Optional[str] = None,
) -> str:
    """Notice text with a small-print context line ("-# Query: ... • ...")."""
    details = []
    if query:
        details.append(f"Query: {query}")
    if translation:
        details.append(f"Translation: {translation}")
    if hint:
        details.append(hint)
    if not details:
        return content
    return f"{content}\n-# {' • '.join(details)}"


def _format_toggle(value: Toggle) -> str:
    if value == Toggle.ON:
        return "On"
    if value == Toggle.OFF:
        return "Off"
    return "Auto"


def format_display_preferences(prefs: DisplayPreferences) -> str:
    return "\n".join([
        f"Footnotes: **{'On' if prefs.footnotes else 'Off'}**",
        f"Headings: **{_format_toggle(prefs.headings)}**",
        f"Verse numbers: **{'On' if prefs.verse_numbers else 'Off'}**",
        f"Line by line: **{_format_toggle(prefs.line_by_line)}**",
    ])


def build_preferences_summary(heading: str, translation: str, prefs: DisplayPreferences) -> str:
    """e.g. "Your current preferences:\\nTranslation: **ESV**\\n..."."""
    return f"{heading}\nTranslation: **{translation}**\n{format_display_preferences(prefs)}"


def daily_status_text(reference: str) -> str:
    return f"Daily verse: {reference}"
