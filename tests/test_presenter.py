# tests/test_presenter.py
"""
Tests for presenter.py - page math and embed-ready records.
"""

from scriptura.services.preferences_service import DisplayPreferences, Toggle
from scriptura.services.presenter import (
    DESCRIPTION_LIMIT,
    FIELD_VALUE_LIMIT,
    build_error_message,
    build_passage_record,
    build_preferences_summary,
    build_search_page,
    clamp_page,
    daily_status_text,
    format_range,
    total_pages,
    truncate,
)
from scriptura.services.references import Passage, SearchEntry, SearchSet


def entries(start, count):
    return tuple(SearchEntry(reference=f"Ref {i}", text=f"Text {i}") for i in range(start, start + count))


def test_page_math():
    assert total_pages(23) == 3
    assert total_pages(20) == 2
    assert total_pages(0) == 1
    assert total_pages(None) is None

    assert clamp_page(-1, 3) == 0
    assert clamp_page(5, 3) == 2
    assert clamp_page(7, None) == 7

    assert format_range(20, 3) == "21-23"
    assert format_range(0, 10) == "1-10"
    assert format_range(0, 0) == "0"
    print("✓ page math: 23 results -> 3 pages, last page 21-23")


def test_truncate():
    assert truncate("short", 10) == "short"
    cut = truncate("x" * 20, 10)
    assert len(cut) == 10
    assert cut.endswith("…")
    assert truncate("x" * 20, 10, "...") == "xxxxxxx..."


def test_last_search_page():
    search = SearchSet(query="in love", entries=entries(20, 3), total=23)
    record = build_search_page(search, "KJV", page=2, pages=3)

    assert record.title == 'Search results: "in love"'
    assert record.description == "Translation: **KJV**"
    assert record.footer == "Page 3/3 · Showing 21-23 of 23 results"
    assert [name for name, _ in record.fields] == ["Ref 20", "Ref 21", "Ref 22"]


def test_search_page_with_unknown_total():
    search = SearchSet(query="grace", entries=entries(0, 10))
    record = build_search_page(search, "ESV", page=1)

    assert record.footer == "Page 2 · Showing 11-20 results"


def test_search_page_fallbacks_and_limits():
    search = SearchSet(
        query="q",
        entries=(
            SearchEntry(reference="", text="   "),
            SearchEntry(reference="John 1:1", text="w" * 2000),
        ),
        total=2,
    )
    record = build_search_page(search, "KJV", page=0, pages=1)

    assert record.fields[0] == ("Result", "(no text)")
    assert len(record.fields[1][1]) == FIELD_VALUE_LIMIT


def test_passage_record():
    passage = Passage(text="p" * 5000, reference="John 3:16", query="jn 3:16", copyright="PUBLIC DOMAIN")
    record = build_passage_record(passage, "KJV")

    assert record.title == "John 3:16 (KJV)"
    assert len(record.description) == DESCRIPTION_LIMIT
    assert record.description.endswith("...")
    assert record.url == "https://www.biblegateway.com/passage/?search=John%203%3A16&version=KJV"
    assert record.footer == "KJV · PUBLIC DOMAIN"

    plain = build_passage_record(Passage(text="t", reference="John 3:16", query="q"), "ESV")
    assert plain.footer == "ESV"


def test_error_message():
    message = build_error_message(
        "There was an error while executing this command!",
        query="John 3:16",
        translation="KJV",
        hint="api.bible request failed.",
    )
    assert message == (
        "There was an error while executing this command!\n"
        "-# Query: John 3:16 • Translation: KJV • api.bible request failed."
    )
    assert build_error_message("No results found.") == "No results found."


def test_preferences_summary():
    prefs = DisplayPreferences(footnotes=True, headings=Toggle.OFF, verse_numbers=True, line_by_line=Toggle.AUTO)
    summary = build_preferences_summary("Your current preferences:", "NIV", prefs)

    assert summary.splitlines() == [
        "Your current preferences:",
        "Translation: **NIV**",
        "Footnotes: **On**",
        "Headings: **Off**",
        "Verse numbers: **On**",
        "Line by line: **Auto**",
    ]


def test_daily_status_text():
    assert daily_status_text("Psalm 23:1") == "Daily verse: Psalm 23:1"
