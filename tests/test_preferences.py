# tests/test_preferences.py
"""
Tests for preferences_service.py - SQLite-backed user preferences.
"""

import os
import tempfile

import pytest

from scriptura.services.preferences_service import (
    DEFAULT_DISPLAY,
    DisplayPreferences,
    PreferenceStore,
    Toggle,
)
from scriptura.utils.errors import StoreNotInitializedError


@pytest.fixture
def store():
    with tempfile.TemporaryDirectory() as tmpdir:
        with PreferenceStore(os.path.join(tmpdir, "prefs.db")) as s:
            yield s


def test_defaults_for_unknown_user(store):
    assert store.get_preferred_translation("42") is None
    assert store.get_display_preferences("42") == DEFAULT_DISPLAY
    assert DEFAULT_DISPLAY == DisplayPreferences(
        footnotes=False, headings=Toggle.AUTO, verse_numbers=True, line_by_line=Toggle.AUTO
    )


def test_preferred_translation_upsert(store):
    store.set_preferred_translation("42", "KJV")
    store.set_preferred_translation("42", "NIV")

    assert store.get_preferred_translation("42") == "NIV"
    assert store.get_preferred_translation("43") is None
    print("✓ preferences: last writer wins")


def test_partial_display_update_merges(store):
    store.set_display_preferences("42", {"footnotes": True})
    prefs = store.set_display_preferences("42", {"headings": "off", "line_by_line": Toggle.ON})

    assert prefs.footnotes is True
    assert prefs.headings == Toggle.OFF
    assert prefs.line_by_line == Toggle.ON
    assert prefs.verse_numbers is True
    assert store.get_display_preferences("42") == prefs


def test_invalid_display_values_are_ignored(store):
    prefs = store.set_display_preferences(
        "42",
        {"footnotes": "yes", "headings": "sometimes", "verse_numbers": None, "colour": "blue"},
    )
    assert prefs == DEFAULT_DISPLAY


def test_display_update_keeps_translation(store):
    store.set_preferred_translation("42", "KJV")
    store.set_display_preferences("42", {"verse_numbers": False})

    assert store.get_preferred_translation("42") == "KJV"
    assert store.get_display_preferences("42").verse_numbers is False


def test_reset_clears_display_only(store):
    store.set_preferred_translation("42", "NLT")
    store.set_display_preferences("42", {"footnotes": True, "headings": "on"})

    prefs = store.reset_display_preferences("42")

    assert prefs == DEFAULT_DISPLAY
    assert store.get_display_preferences("42") == DEFAULT_DISPLAY
    assert store.get_preferred_translation("42") == "NLT"


def test_to_dict_uses_plain_values():
    assert DisplayPreferences(headings=Toggle.ON).to_dict() == {
        "footnotes": False,
        "headings": "on",
        "verse_numbers": True,
        "line_by_line": "auto",
    }


def test_store_must_be_initialized():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = PreferenceStore(os.path.join(tmpdir, "prefs.db"))

        with pytest.raises(StoreNotInitializedError):
            store.get_preferred_translation("42")

        store.init()
        assert store.ping()
        store.close()
        assert not store.is_open

        with pytest.raises(StoreNotInitializedError):
            store.ping()


def test_data_survives_reopen():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "prefs.db")
        with PreferenceStore(path) as store:
            store.set_preferred_translation("42", "ESV")

        with PreferenceStore(path) as store:
            assert store.get_preferred_translation("42") == "ESV"
