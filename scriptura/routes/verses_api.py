# scriptura/routes/verses_api.py
"""
API endpoints for scripture lookup.

Provides access to:
- Passage / search resolution for a query and translation
- Individual search result pages
- The daily verse reference
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from scriptura.services.references import (
    DEFAULT_TRANSLATION,
    Empty,
    Failure,
    FailureKind,
    Passage,
    SearchSet,
    daily_reference,
    is_valid_translation,
    unhandled_result,
)
from scriptura.utils.errors import backend_error, invalid_field, missing_field

logger = logging.getLogger(__name__)

verses_bp = Blueprint("verses_api", __name__, url_prefix="/api/verses")


def _translation_arg():
    translation = request.args.get("translation") or DEFAULT_TRANSLATION
    return translation.strip().upper()


def _failure_response(result: Failure):
    if result.kind == FailureKind.UNSUPPORTED_TRANSLATION:
        return invalid_field("translation", result.message)
    if result.kind == FailureKind.VALIDATION:
        return invalid_field("query", result.message)
    return backend_error(result.message, failure=result.kind.value, status_code=result.status_code)


@verses_bp.get("/lookup")
def lookup_verse():
    """
    Resolve a reference or phrase.

    Query params:
        q: Reference or phrase (required) e.g., "John 3:16"
        translation: Translation code (optional, default ESV)

    Returns:
        {"kind": "passage", "reference": "John 3:16", "text": "...", ...}
        {"kind": "search", "entries": [...], "total": 12, ...}
        {"kind": "empty", "query": "..."}
    """
    query = (request.args.get("q") or "").strip()
    if not query:
        return missing_field("q")

    translation = _translation_arg()
    if not is_valid_translation(translation):
        return invalid_field("translation", f"Unsupported translation: {translation}.")

    resolver = current_app.config["RESOLVER"]
    result = resolver.resolve(translation, query)

    if isinstance(result, Failure):
        logger.warning(f"Lookup failed for {query!r} ({translation}): {result.message}")
        return _failure_response(result)
    if isinstance(result, (Passage, SearchSet, Empty)):
        return jsonify({"translation": translation, **result.to_dict()})
    raise unhandled_result(result)


@verses_bp.get("/search")
def search_page():
    """
    Fetch one page of verse search results.

    Query params:
        q: Phrase (required)
        translation: Translation code (optional, default ESV)
        page: 0-based page (optional, default 0)
    """
    query = (request.args.get("q") or "").strip()
    if not query:
        return missing_field("q")

    translation = _translation_arg()
    if not is_valid_translation(translation):
        return invalid_field("translation", f"Unsupported translation: {translation}.")

    page = request.args.get("page", 0, type=int)
    resolver = current_app.config["RESOLVER"]
    result = resolver.fetch_search_page(translation, query, page)

    if isinstance(result, Failure):
        return _failure_response(result)
    return jsonify({"translation": translation, "page": max(0, page), **result.to_dict()})


@verses_bp.get("/daily")
def daily_verse():
    """Today's daily verse reference (UTC)."""
    table = current_app.config["DAILY_VERSES"]
    return jsonify({"reference": daily_reference(table)})
