# scriptura/services/references/apibible_client.py
"""
api.bible client (multi-translation search and passage retrieval).

API documentation: https://docs.api.bible/

Unlike the ESV client, a missing API key is not fatal at startup: every
call returns a configuration Failure without touching the network, so the
ESV path keeps working. Missing identifiers are rejected the same way.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote

import requests

from .results import Failure, FailureKind
from .transport import CancelToken, get_json

logger = logging.getLogger(__name__)

API_BIBLE_SOURCE = "api.bible"
DEFAULT_SORT = "relevance"


@dataclass(frozen=True)
class PassageOptions:
    """
    Passage request options, passed through as query parameters.

    Attributes:
        content_type: "json", "text" or "html"
        include_notes: Footnotes and study notes
        include_titles: Section headings
        include_chapter_numbers: Chapter numbers in content
        include_verse_numbers: Verse markers in content
        include_verse_spans: Verse span metadata
        use_org_id: Use organization passage IDs
    """
    content_type: str = "json"
    include_notes: bool = False
    include_titles: bool = True
    include_chapter_numbers: bool = False
    include_verse_numbers: bool = True
    include_verse_spans: bool = False
    use_org_id: bool = False

    def to_params(self) -> dict:
        return {
            "content-type": self.content_type,
            "include-notes": str(self.include_notes).lower(),
            "include-titles": str(self.include_titles).lower(),
            "include-chapter-numbers": str(self.include_chapter_numbers).lower(),
            "include-verse-numbers": str(self.include_verse_numbers).lower(),
            "include-verse-spans": str(self.include_verse_spans).lower(),
            "use-org-id": str(self.use_org_id).lower(),
        }


class ApiBibleClient:
    """
    Client for api.bible search and passage endpoints.

    Usage:
        client = ApiBibleClient(api_key=config.API_BIBLE_KEY)

        # Reference or phrase search
        res = client.search("de4e12af7f28f599-01", "John 3:16")
        passages = res["data"].get("passages", [])

        # Structured passage content
        res = client.get_passage("de4e12af7f28f599-01", "JHN.3.16")
        content = res["data"]["content"]
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://rest.api.bible/v1",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("API_BIBLE_KEY is not set; api.bible translations will be unavailable")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _fetch(self, path: str, params: dict, cancel: Optional[CancelToken]):
        if not self.api_key:
            return Failure(FailureKind.CONFIGURATION, "Missing API_BIBLE_KEY env var.")

        return get_json(
            self.session,
            f"{self.base_url}{path}",
            params=params,
            headers={"api-key": self.api_key, "accept": "application/json"},
            timeout=self.timeout,
            cancel=cancel,
            source=API_BIBLE_SOURCE,
        )

    def search(
        self,
        bible_id: str,
        query: str,
        sort: str = DEFAULT_SORT,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Union[dict, Failure]:
        """
        Search within a Bible; works for references and phrases.

        A reference query comes back under data.passages, a phrase query
        under data.verses.

        Returns:
            {"data": {"query": "...", "passages": [...], "verses": [...],
                      "total": 12, "limit": 10, "offset": 0}}
            or a Failure
        """
        if not bible_id:
            return Failure(FailureKind.VALIDATION, "Missing bibleId.")
        if not query:
            return Failure(FailureKind.VALIDATION, "Missing query.")

        return self._fetch(
            f"/bibles/{quote(bible_id, safe='')}/search",
            {"query": query, "sort": sort, "limit": limit, "offset": offset},
            cancel,
        )

    def get_passage(
        self,
        bible_id: str,
        passage_id: str,
        options: Optional[PassageOptions] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Union[dict, Failure]:
        """
        Fetch a passage by api.bible passage ID.

        Returns:
            {"data": {"id": "JHN.3.16", "reference": "John 3:16",
                      "content": [...], "verseCount": 1, "copyright": "..."}}
            or a Failure
        """
        if not bible_id:
            return Failure(FailureKind.VALIDATION, "Missing bibleId.")
        if not passage_id:
            return Failure(FailureKind.VALIDATION, "Missing passageId.")

        options = options or PassageOptions()
        return self._fetch(
            f"/bibles/{quote(bible_id, safe='')}/passages/{quote(passage_id, safe='')}",
            options.to_params(),
            cancel,
        )
