# tests/test_translations.py
"""
Tests for translations.py - codes, Bible IDs and backend routing.
"""

from scriptura.services.references import (
    API_BIBLE_BIBLES,
    DEFAULT_TRANSLATION,
    TRANSLATION_CHOICES,
    Backend,
    backend_for,
    bible_id_for,
    is_valid_translation,
    resolve_translation,
)


def test_valid_translations():
    assert is_valid_translation("ESV")
    assert is_valid_translation("KJV")
    assert is_valid_translation("IRV")
    assert not is_valid_translation("XYZ")
    assert not is_valid_translation("")
    assert not is_valid_translation(None)
    # Codes are case-sensitive
    assert not is_valid_translation("kjv")


def test_bible_ids():
    assert bible_id_for("KJV") == "de4e12af7f28f599-01"
    assert bible_id_for("ESV") is None
    assert bible_id_for(None) is None


def test_backend_routing():
    assert backend_for("ESV") == Backend.ESV
    assert backend_for("NIV") == Backend.API_BIBLE
    assert backend_for("XYZ") is None


def test_choices_match_supported_codes():
    codes = [code for _, code in TRANSLATION_CHOICES]
    assert len(codes) == len(set(codes))
    assert set(codes) == set(API_BIBLE_BIBLES) | {DEFAULT_TRANSLATION}


def test_resolve_translation_precedence():
    assert resolve_translation("KJV", "NIV") == "KJV"
    assert resolve_translation(None, "NIV") == "NIV"
    assert resolve_translation(None, None) == DEFAULT_TRANSLATION
    # A stale stored preference falls back to the default
    assert resolve_translation(None, "OLD") == DEFAULT_TRANSLATION
    assert resolve_translation("XYZ", "NIV") == "NIV"
