# scriptura/utils/errors.py
"""
Exceptions and standardized HTTP error responses.

Error bodies returned by the status/lookup server follow the format:
{"error": "error_code", "detail": "optional message"}

Error codes should be:
- snake_case
- descriptive but concise
- machine-parseable (no spaces or special chars)
"""

from typing import Optional

from flask import jsonify


class ScripturaError(Exception):
    """Base exception for Scriptura errors."""
    pass


class ConfigurationError(ScripturaError):
    """Raised at startup when a required credential or setting is missing."""
    pass


class StoreNotInitializedError(ScripturaError):
    """Raised when the preference store is used outside its init/close lifecycle."""
    pass


# -----------------------------------------------------------------------------
# Standard HTTP Error Responses
# -----------------------------------------------------------------------------

def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Validation (400)
def missing_field(field: str):
    """Required field is missing."""
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


def invalid_field(field: str, detail: str = None):
    """Field value is invalid."""
    return error_response(f"invalid_{field}", 400, detail)


# Upstream (502)
def backend_error(detail: str = None, **extra):
    """A scripture backend failed or timed out."""
    return error_response("backend_error", 502, detail, **extra)
