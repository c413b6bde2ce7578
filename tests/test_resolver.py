# tests/test_resolver.py
"""
Tests for resolver.py - passage vs search resolution across both backends.

Backends are replaced by FakeSession; responses are shaped like the real
ESV and api.bible payloads.
"""

from scriptura.services.preferences_service import DisplayPreferences, Toggle
from scriptura.services.references import (
    ApiBibleClient,
    Empty,
    EsvClient,
    Failure,
    FailureKind,
    Passage,
    QueryResolver,
    ResolveOptions,
    SearchSet,
    use_line_by_line,
)

from conftest import FakeResponse, FakeSession

KJV = "de4e12af7f28f599-01"

JOHN_3_16_CONTENT = [
    {"type": "tag", "name": "para", "attrs": {"style": "p"}, "items": [
        {"type": "tag", "name": "verse", "attrs": {"number": "16", "style": "v", "sid": "JHN 3:16"}, "items": [
            {"type": "text", "text": "16"},
        ]},
        {"type": "text", "text": "¶ For God so loved the world, that he gave his only begotten Son"},
    ]},
]


def make_resolver(esv_responses=(), api_responses=(), api_key="key"):
    esv_session = FakeSession(*esv_responses)
    api_session = FakeSession(*api_responses)
    resolver = QueryResolver(
        EsvClient("secret", session=esv_session),
        ApiBibleClient(api_key, session=api_session),
    )
    return resolver, esv_session, api_session


# =============================================================================
# api.bible
# =============================================================================

def test_reference_resolves_to_passage():
    resolver, _, api = make_resolver(api_responses=[
        FakeResponse({"data": {"query": "John 3:16", "passages": [{"id": "JHN.3.16", "reference": "John 3:16"}]}}),
        FakeResponse({"data": {
            "id": "JHN.3.16",
            "reference": "John 3:16",
            "content": JOHN_3_16_CONTENT,
            "verseCount": 1,
            "copyright": "PUBLIC DOMAIN",
        }}),
    ])

    result = resolver.resolve("KJV", "John 3:16")

    assert isinstance(result, Passage)
    assert result.reference == "John 3:16"
    assert result.passage_id == "JHN.3.16"
    assert result.verse_count == 1
    assert result.copyright == "PUBLIC DOMAIN"
    assert result.text.startswith("[16] For God so loved the world")
    assert api.calls[1]["url"].endswith(f"/bibles/{KJV}/passages/JHN.3.16")
    assert api.calls[1]["params"]["include-titles"] == "true"
    print("✓ resolve: John 3:16 (KJV) end to end")


def test_passages_take_precedence_over_verses():
    resolver, _, api = make_resolver(api_responses=[
        FakeResponse({"data": {
            "passages": [{"id": "ROM.8.1-ROM.8.11", "reference": "Romans 8:1-11"}],
            "verses": [{"id": "ROM.8.1", "reference": "Romans 8:1", "text": "There is therefore"}],
            "total": 1,
        }}),
        FakeResponse({"data": {"id": "ROM.8.1-ROM.8.11", "reference": "Romans 8:1-11", "content": []}}),
    ])

    result = resolver.resolve("KJV", "Romans 8:1-11")

    assert isinstance(result, Passage)
    assert len(api.calls) == 2


def test_passage_without_id_is_malformed():
    resolver, _, api = make_resolver(api_responses=[
        FakeResponse({"data": {"passages": [{"reference": "John 3:16"}]}}),
    ])

    result = resolver.resolve("KJV", "John 3:16")

    assert isinstance(result, Failure)
    assert result.kind == FailureKind.MALFORMED
    assert len(api.calls) == 1


def test_non_object_data_is_malformed():
    resolver, _, _ = make_resolver(api_responses=[
        FakeResponse({"data": "x"}),
        FakeResponse({"data": ["x"]}),
    ])

    search = resolver.resolve("KJV", "in love")
    page = resolver.fetch_search_page("KJV", "in love", 1)

    assert search.kind == FailureKind.MALFORMED
    assert page.kind == FailureKind.MALFORMED


def test_non_object_passage_data_is_malformed():
    resolver, _, api = make_resolver(api_responses=[
        FakeResponse({"data": {"passages": [{"id": "JHN.3.16", "reference": "John 3:16"}]}}),
        FakeResponse({"data": "JHN.3.16"}),
    ])

    result = resolver.resolve("KJV", "John 3:16")

    assert isinstance(result, Failure)
    assert result.kind == FailureKind.MALFORMED
    assert len(api.calls) == 2


def test_phrase_resolves_to_search_set():
    resolver, _, _ = make_resolver(api_responses=[
        FakeResponse({"data": {
            "query": "in love",
            "verses": [
                {"id": "EPH.4.2", "reference": "Ephesians 4:2", "text": "forbearing one another in love"},
                {"id": "EPH.4.15", "reference": "Ephesians 4:15", "text": "speaking the truth in love"},
            ],
            "total": 23,
            "limit": 10,
            "offset": 0,
        }}),
    ])

    result = resolver.resolve("KJV", "in love")

    assert isinstance(result, SearchSet)
    assert result.total == 23
    assert [e.reference for e in result.entries] == ["Ephesians 4:2", "Ephesians 4:15"]
    assert result.entries[0].id == "EPH.4.2"


def test_no_hits_is_empty():
    resolver, _, _ = make_resolver(api_responses=[
        FakeResponse({"data": {"query": "zzzzqqq", "verses": [], "total": 0}}),
    ])

    result = resolver.resolve("KJV", "zzzzqqq")

    assert isinstance(result, Empty)
    assert result.query == "zzzzqqq"


def test_unsupported_translation_makes_no_request():
    resolver, esv, api = make_resolver()

    result = resolver.resolve("XYZ", "John 3:16")

    assert result.kind == FailureKind.UNSUPPORTED_TRANSLATION
    assert result.message == "Unsupported translation: XYZ."
    assert esv.calls == [] and api.calls == []


def test_missing_api_bible_key():
    resolver, _, api = make_resolver(api_key=None)

    result = resolver.resolve("NIV", "John 3:16")

    assert result.kind == FailureKind.CONFIGURATION
    assert api.calls == []


def test_backend_failure_passes_through():
    resolver, _, _ = make_resolver(api_responses=[FakeResponse({"message": "Bad bible"}, status_code=400)])

    result = resolver.resolve("KJV", "John 3:16")

    assert result.kind == FailureKind.TRANSPORT
    assert result.status_code == 400


def test_psalms_are_laid_out_line_by_line():
    content = [
        {"type": "tag", "name": "para", "attrs": {"vid": "PSA 23:1"}, "items": [
            {"type": "tag", "name": "verse", "attrs": {"number": "1"}, "items": []},
            {"type": "text", "text": "The LORD is my shepherd; I shall not want."},
        ]},
        {"type": "tag", "name": "para", "attrs": {"vid": "PSA 23:2"}, "items": [
            {"type": "tag", "name": "verse", "attrs": {"number": "2"}, "items": []},
            {"type": "text", "text": "He maketh me to lie down in green pastures"},
        ]},
    ]
    resolver, _, _ = make_resolver(api_responses=[
        FakeResponse({"data": {"passages": [{"id": "PSA.23.1-PSA.23.2"}]}}),
        FakeResponse({"data": {"id": "PSA.23.1-PSA.23.2", "reference": "Psalms 23:1-2", "content": content}}),
    ])

    result = resolver.resolve("KJV", "Psalm 23:1-2")

    assert result.text == "[1] The LORD is my shepherd; I shall not want. \n[2] He maketh me to lie down in green pastures "


def test_use_line_by_line():
    assert use_line_by_line("Psalms 23", Toggle.AUTO)
    assert use_line_by_line("psalm 1:1", Toggle.AUTO)
    assert not use_line_by_line("John 3:16", Toggle.AUTO)
    assert use_line_by_line("John 3:16", Toggle.ON)
    assert not use_line_by_line("Psalms 23", Toggle.OFF)


def test_options_from_preferences():
    prefs = DisplayPreferences(footnotes=True, headings=Toggle.OFF, verse_numbers=False, line_by_line=Toggle.ON)
    options = ResolveOptions.from_preferences(prefs, include_raw=True)

    assert options.include_notes is True
    assert options.include_titles is False
    assert options.include_verse_numbers is False
    assert options.line_by_line == Toggle.ON
    assert options.include_raw is True
    assert ResolveOptions.from_preferences(DisplayPreferences()).include_titles is None


# =============================================================================
# ESV
# =============================================================================

def test_esv_reference_resolves_to_passage():
    resolver, esv, api = make_resolver(esv_responses=[
        FakeResponse({
            "query": "John 3:16",
            "canonical": "John 3:16",
            "passages": ["  [16] For God so loved the world...\n"],
            "passage_meta": [{"canonical": "John 3:16"}],
        }),
    ])

    result = resolver.resolve("ESV", "jn 3:16")

    assert isinstance(result, Passage)
    assert result.reference == "John 3:16"
    assert result.query == "jn 3:16"
    assert result.text == "[16] For God so loved the world..."
    assert esv.calls[0]["params"]["include-headings"] == "false"
    assert api.calls == []


def test_esv_phrase_falls_back_to_search():
    resolver, esv, _ = make_resolver(esv_responses=[
        FakeResponse({"query": "in love", "passages": []}),
        FakeResponse({
            "page": 1,
            "total_results": 23,
            "total_pages": 3,
            "results": [{"reference": "Ephesians 4:2", "content": "bearing with one another in love"}],
        }),
    ])

    result = resolver.resolve("ESV", "in love")

    assert isinstance(result, SearchSet)
    assert result.total == 23
    assert result.limit == 10 and result.offset == 0
    assert result.entries[0].text == "bearing with one another in love"
    assert esv.calls[1]["params"] == {"q": "in love", "page": "1", "page-size": "10"}


def test_esv_no_match_is_empty():
    resolver, _, _ = make_resolver(esv_responses=[
        FakeResponse({"query": "zzzzqqq", "passages": []}),
        FakeResponse({"page": 1, "total_results": 0, "results": []}),
    ])

    assert isinstance(resolver.resolve("ESV", "zzzzqqq"), Empty)


def test_esv_search_failure():
    resolver, _, _ = make_resolver(esv_responses=[
        FakeResponse({"passages": []}),
        FakeResponse(status_code=503),
    ])

    result = resolver.resolve("ESV", "in love")

    assert result.kind == FailureKind.TRANSPORT


def test_esv_unexpected_passage_meta_falls_back_to_query():
    resolver, _, _ = make_resolver(esv_responses=[
        FakeResponse({
            "passages": ["[16] For God so loved the world...\n"],
            "passage_meta": {"canonical": "John 3:16"},
        }),
    ])

    result = resolver.resolve("ESV", "jn 3:16")

    assert isinstance(result, Passage)
    assert result.reference == "jn 3:16"
    assert result.text == "[16] For God so loved the world..."


def test_esv_non_object_body_is_malformed():
    resolver, _, _ = make_resolver(esv_responses=[
        FakeResponse(["John 3:16"]),
        FakeResponse({"passages": []}),
        FakeResponse(["Ephesians 4:2"]),
    ])

    assert resolver.resolve("ESV", "John 3:16").kind == FailureKind.MALFORMED
    assert resolver.resolve("ESV", "in love").kind == FailureKind.MALFORMED


# =============================================================================
# Pagination
# =============================================================================

def test_fetch_search_page_esv_is_one_based():
    resolver, esv, _ = make_resolver(esv_responses=[
        FakeResponse({"total_results": 23, "results": [{"reference": "1 John 4:16", "content": "God is love"}]}),
    ])

    result = resolver.fetch_search_page("ESV", "love", 2)

    assert esv.calls[0]["params"]["page"] == "3"
    assert result.offset == 20


def test_fetch_search_page_api_bible_uses_offset():
    resolver, _, api = make_resolver(api_responses=[
        FakeResponse({"data": {"verses": [], "total": 23, "limit": 10, "offset": 20}}),
    ])

    result = resolver.fetch_search_page("KJV", "in love", 2)

    assert api.calls[0]["params"]["limit"] == 10
    assert api.calls[0]["params"]["offset"] == 20
    assert isinstance(result, SearchSet)
    assert result.entries == ()


def test_fetch_search_page_negative_page_clamps_to_zero():
    resolver, _, api = make_resolver(api_responses=[FakeResponse({"data": {"verses": []}})])

    resolver.fetch_search_page("KJV", "in love", -3)

    assert api.calls[0]["params"]["offset"] == 0
