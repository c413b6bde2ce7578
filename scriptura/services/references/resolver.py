# scriptura/services/references/resolver.py
"""
Query resolution: decide whether a user's text is a passage or a search.

The resolver dispatches to the backend serving the requested translation
and returns one of the typed results in results.py. It never raises for
backend problems; those come back as Failure.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from scriptura.services.preferences_service import DisplayPreferences, Toggle

from .apibible_client import ApiBibleClient, PassageOptions
from .content import flatten, parse_content
from .esv_client import EsvClient
from .results import (
    Empty,
    Failure,
    FailureKind,
    Passage,
    ResolvedResult,
    SearchEntry,
    SearchSet,
)
from .transport import CancelToken
from .translations import Backend, backend_for, bible_id_for

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
POETRY_REFERENCE_RE = re.compile(r"^psalms?\b", re.IGNORECASE)


@dataclass(frozen=True)
class ResolveOptions:
    """
    Per-request lookup options.

    Attributes:
        sort: api.bible search order ("relevance" or "canonical")
        include_notes: Footnotes / study notes
        include_titles: Section headings; None uses the backend default
                        (ESV off, api.bible on)
        include_verse_numbers: Verse numbers in passage text
        line_by_line: "auto" (Psalms only), "on" or "off"
        include_raw: Attach the raw backend payload to the result
    """
    sort: str = "relevance"
    include_notes: bool = False
    include_titles: Optional[bool] = None
    include_verse_numbers: bool = True
    line_by_line: Toggle = Toggle.AUTO
    include_raw: bool = False

    @classmethod
    def from_preferences(cls, prefs: DisplayPreferences, **overrides) -> "ResolveOptions":
        """Build options from a user's display preferences."""
        titles = None
        if prefs.headings == Toggle.ON:
            titles = True
        elif prefs.headings == Toggle.OFF:
            titles = False

        values = dict(
            include_notes=prefs.footnotes,
            include_titles=titles,
            include_verse_numbers=prefs.verse_numbers,
            line_by_line=prefs.line_by_line,
        )
        values.update(overrides)
        return cls(**values)


def use_line_by_line(reference: Optional[str], setting: Toggle) -> bool:
    """Resolve the line-by-line setting for a passage reference."""
    if setting == Toggle.ON:
        return True
    if setting == Toggle.OFF:
        return False
    return bool(POETRY_REFERENCE_RE.match(reference or ""))


def _data_object(payload: Any) -> Optional[dict]:
    """The "data" object of an api.bible response; None when absent or not an object."""
    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, dict) else None


def _malformed(source: str) -> Failure:
    return Failure(FailureKind.MALFORMED, f"{source} returned an unexpected payload shape.")


def _int_or_none(value: Any) -> Optional[int]:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


class QueryResolver:
    """
    Resolves free-text queries against the ESV API or api.bible.

    Usage:
        resolver = QueryResolver(esv_client, api_bible_client)

        result = resolver.resolve("KJV", "John 3:16")
        if isinstance(result, Passage):
            print(result.reference, result.text)
        elif isinstance(result, SearchSet):
            for entry in result.entries:
                print(entry.reference)

        # Further pages for the pager
        page = resolver.fetch_search_page("KJV", "in love", page=2)
    """

    def __init__(self, esv: Optional[EsvClient], api_bible: ApiBibleClient):
        self.esv = esv
        self.api_bible = api_bible

    def resolve(
        self,
        translation: str,
        query: str,
        options: Optional[ResolveOptions] = None,
        cancel: Optional[CancelToken] = None,
    ) -> ResolvedResult:
        """
        Resolve a query to a passage, a search set, or nothing.

        Args:
            translation: Translation code (e.g. "ESV", "KJV")
            query: Reference ("Romans 8:1-11") or phrase ("in love")
            options: Display and search options
            cancel: Optional cancellation token

        Returns:
            Passage, SearchSet, Empty or Failure
        """
        options = options or ResolveOptions()
        backend = backend_for(translation)

        if backend == Backend.ESV:
            return self._resolve_esv(query, options, cancel)
        if backend == Backend.API_BIBLE:
            return self._resolve_api_bible(bible_id_for(translation), query, options, cancel)

        return Failure(
            FailureKind.UNSUPPORTED_TRANSLATION,
            f"Unsupported translation: {translation}.",
        )

    # ------------------------------------------------------------------
    # api.bible
    # ------------------------------------------------------------------

    def _resolve_api_bible(
        self,
        bible_id: str,
        query: str,
        options: ResolveOptions,
        cancel: Optional[CancelToken],
    ) -> ResolvedResult:
        search = self.api_bible.search(bible_id, query, sort=options.sort, cancel=cancel)
        if isinstance(search, Failure):
            return search

        data = _data_object(search)
        if data is None:
            return _malformed("api.bible search")
        passages = data.get("passages") if isinstance(data.get("passages"), list) else []
        verses = data.get("verses") if isinstance(data.get("verses"), list) else []

        # Passage hits always win over verse hits
        if passages:
            return self._fetch_api_bible_passage(bible_id, query, passages[0], options, cancel)

        if verses:
            return SearchSet(
                query=data.get("query") or query,
                entries=self._verse_entries(verses),
                total=_int_or_none(data.get("total")),
                limit=_int_or_none(data.get("limit")),
                offset=_int_or_none(data.get("offset")),
                raw=search if options.include_raw else None,
            )

        return Empty(query=query, raw=search if options.include_raw else None)

    def _fetch_api_bible_passage(
        self,
        bible_id: str,
        query: str,
        hit: Any,
        options: ResolveOptions,
        cancel: Optional[CancelToken],
    ) -> ResolvedResult:
        hit = hit if isinstance(hit, dict) else {}
        passage_id = hit.get("id")
        if not passage_id:
            return Failure(FailureKind.MALFORMED, "Search returned a passage without an id.")

        passage_options = PassageOptions(
            content_type="json",
            include_notes=options.include_notes,
            include_titles=True if options.include_titles is None else options.include_titles,
            include_chapter_numbers=False,
            include_verse_numbers=options.include_verse_numbers,
            include_verse_spans=False,
            use_org_id=False,
        )
        res = self.api_bible.get_passage(bible_id, passage_id, passage_options, cancel=cancel)
        if isinstance(res, Failure):
            return res

        passage = _data_object(res)
        if passage is None:
            return _malformed("api.bible passage")
        reference = passage.get("reference") or hit.get("reference") or query
        line_by_line = use_line_by_line(reference, options.line_by_line)
        text = flatten(parse_content(passage.get("content")), line_by_line=line_by_line)

        return Passage(
            text=text,
            reference=reference,
            query=query,
            passage_id=passage.get("id") or passage_id,
            verse_count=_int_or_none(passage.get("verseCount")) or _int_or_none(hit.get("verseCount")),
            copyright=passage.get("copyright") or hit.get("copyright"),
            raw=res if options.include_raw else None,
        )

    @staticmethod
    def _verse_entries(verses: list) -> tuple:
        return tuple(
            SearchEntry(
                reference=v.get("reference") or "",
                text=v.get("text") or "",
                id=v.get("id"),
            )
            for v in verses
            if isinstance(v, dict)
        )

    # ------------------------------------------------------------------
    # ESV
    # ------------------------------------------------------------------

    def _resolve_esv(
        self,
        query: str,
        options: ResolveOptions,
        cancel: Optional[CancelToken],
    ) -> ResolvedResult:
        if self.esv is None:
            return Failure(FailureKind.CONFIGURATION, "ESV API client is not configured.")

        res = self.esv.lookup_passage(
            query,
            include_footnotes=options.include_notes,
            include_headings=bool(options.include_titles),
            include_verse_numbers=options.include_verse_numbers,
            cancel=cancel,
        )
        if isinstance(res, Failure):
            return res

        if not isinstance(res, dict):
            return _malformed("ESV passage")

        passages = res.get("passages")
        if isinstance(passages, list) and passages:
            meta = res.get("passage_meta")
            first_meta = meta[0] if isinstance(meta, list) and meta and isinstance(meta[0], dict) else {}
            return Passage(
                text=str(passages[0] or "").strip(),
                reference=first_meta.get("canonical") or query,
                query=query,
                raw=res if options.include_raw else None,
            )

        page = self._esv_search_page(query, 0, DEFAULT_PAGE_SIZE, cancel, options.include_raw)
        if isinstance(page, SearchSet) and not page.entries:
            return Empty(query=query, raw=page.raw)
        return page

    def _esv_search_page(
        self,
        query: str,
        page: int,
        page_size: int,
        cancel: Optional[CancelToken],
        include_raw: bool = False,
    ):
        res = self.esv.search(query, page=page + 1, page_size=page_size, cancel=cancel)
        if isinstance(res, Failure):
            return res

        if not isinstance(res, dict):
            return _malformed("ESV search")

        results = res.get("results")
        results = results if isinstance(results, list) else []
        entries = tuple(
            SearchEntry(
                reference=hit.get("reference") or "",
                text=hit.get("content") or hit.get("text") or "",
            )
            for hit in results
            if isinstance(hit, dict)
        )
        return SearchSet(
            query=query,
            entries=entries,
            total=_int_or_none(res.get("total_results")),
            limit=page_size,
            offset=page * page_size,
            raw=res if include_raw else None,
        )

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def fetch_search_page(
        self,
        translation: str,
        query: str,
        page: int,
        page_size: int = DEFAULT_PAGE_SIZE,
        cancel: Optional[CancelToken] = None,
    ):
        """
        Fetch one page of verse-level search results.

        Args:
            translation: Translation code
            query: Original query
            page: 0-based page index
            page_size: Results per page

        Returns:
            SearchSet (possibly with no entries) or Failure
        """
        page = max(0, page)
        backend = backend_for(translation)

        if backend == Backend.ESV:
            if self.esv is None:
                return Failure(FailureKind.CONFIGURATION, "ESV API client is not configured.")
            return self._esv_search_page(query, page, page_size, cancel)

        if backend == Backend.API_BIBLE:
            res = self.api_bible.search(
                bible_id_for(translation),
                query,
                limit=page_size,
                offset=page * page_size,
                cancel=cancel,
            )
            if isinstance(res, Failure):
                return res
            data = _data_object(res)
            if data is None:
                return _malformed("api.bible search")
            verses = data.get("verses") if isinstance(data.get("verses"), list) else []
            return SearchSet(
                query=data.get("query") or query,
                entries=self._verse_entries(verses),
                total=_int_or_none(data.get("total")),
                limit=page_size,
                offset=page * page_size,
            )

        return Failure(
            FailureKind.UNSUPPORTED_TRANSLATION,
            f"Unsupported translation: {translation}.",
        )
