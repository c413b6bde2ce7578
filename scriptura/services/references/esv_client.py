# scriptura/services/references/esv_client.py
"""
ESV API client (English Standard Version, single translation).

API documentation: https://api.esv.org/docs/

Every call is a single attempt with a fixed timeout. Errors are returned
as Failure values rather than raised; the only exception is a missing API
key, which fails fast when the client is constructed at startup.
"""

import logging
from typing import Optional, Union

import requests

from scriptura.utils.errors import ConfigurationError

from .results import Failure
from .transport import CancelToken, get_json

logger = logging.getLogger(__name__)

ESV_SOURCE = "ESV API"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class EsvClient:
    """
    Client for the ESV passage text and search endpoints.

    Usage:
        client = EsvClient(api_key=config.ESV_API_KEY)

        data = client.lookup_passage("John 3:16")
        if not isinstance(data, Failure):
            print(data["passages"][0])

        hits = client.search("love your neighbor", page=1, page_size=10)
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.esv.org/v3/passage",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ConfigurationError("ESV_API_KEY is not defined in the environment variables.")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._headers = {"Authorization": f"Token {api_key}"}

    @property
    def passage_url(self) -> str:
        return f"{self.base_url}/text/"

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/search/"

    def lookup_passage(
        self,
        reference: str,
        include_footnotes: bool = False,
        include_headings: bool = False,
        include_verse_numbers: bool = True,
        cancel: Optional[CancelToken] = None,
    ) -> Union[dict, Failure]:
        """
        Fetch passage text by reference (e.g. "John 3:16", "Psalm 23").

        Returns:
            {
                "query": "John 3:16",
                "canonical": "John 3:16",
                "passages": ["..."],
                "passage_meta": [{"canonical": "John 3:16", ...}],
            }
            or a Failure
        """
        params = {
            "q": reference,
            "include-footnotes": _flag(include_footnotes),
            "include-footnote-body": _flag(include_footnotes),
            "include-headings": _flag(include_headings),
            "include-verse-numbers": _flag(include_verse_numbers),
            "include-passage-references": "false",
            "include-short-copyright": "false",
        }
        return get_json(
            self.session,
            self.passage_url,
            params=params,
            headers=self._headers,
            timeout=self.timeout,
            cancel=cancel,
            source=ESV_SOURCE,
        )

    def search(
        self,
        text: str,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Union[dict, Failure]:
        """
        Search the ESV for a phrase or keyword.

        Args:
            text: Search phrase
            page: 1-based page number
            page_size: Results per page

        Returns:
            {
                "page": 1,
                "total_results": 42,
                "total_pages": 5,
                "results": [{"reference": "Leviticus 19:18", "content": "..."}],
            }
            or a Failure
        """
        params = {"q": text}
        if isinstance(page, int):
            params["page"] = str(page)
        if isinstance(page_size, int):
            params["page-size"] = str(page_size)

        return get_json(
            self.session,
            self.search_url,
            params=params,
            headers=self._headers,
            timeout=self.timeout,
            cancel=cancel,
            source=ESV_SOURCE,
        )
