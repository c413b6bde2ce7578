from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

status_bp = Blueprint("status_api", __name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _check_store() -> tuple[bool, str]:
    """Check if the preference database is accessible."""
    store = current_app.config.get("PREFERENCE_STORE")
    if store is None:
        return False, "not configured"
    try:
        store.ping()
        return True, "ok"
    except Exception as e:
        return False, str(e)


def _check_backends() -> dict:
    """Report which scripture backends have credentials."""
    resolver = current_app.config.get("RESOLVER")
    esv_ok = resolver is not None and resolver.esv is not None
    api_bible_ok = resolver is not None and resolver.api_bible.is_configured
    return {
        "esv": {"ok": esv_ok, "detail": "configured" if esv_ok else "not configured"},
        "api_bible": {"ok": api_bible_ok, "detail": "configured" if api_bible_ok else "not configured"},
    }


@status_bp.get("/status")
def status():
    """Basic liveness check."""
    return jsonify(
        {
            "status": "ok",
            "time_utc": _utc_now(),
        }
    )


@status_bp.get("/health")
def health():
    """
    Component health check.

    HTTP 200 if the preference store and the ESV backend are usable,
    503 otherwise. api.bible is reported but optional.
    """
    store_ok, store_detail = _check_store()
    backends = _check_backends()

    all_healthy = store_ok and backends["esv"]["ok"]

    response = {
        "status": "healthy" if all_healthy else "unhealthy",
        "time_utc": _utc_now(),
        "components": {
            "preferences": {"ok": store_ok, "detail": store_detail},
            **backends,
        },
    }
    return jsonify(response), (200 if all_healthy else 503)
