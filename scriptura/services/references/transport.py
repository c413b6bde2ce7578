# scriptura/services/references/transport.py
"""
Single-attempt HTTP GET shared by the scripture backend clients.

Behavior:
- Timeout: reported as FailureKind.TIMEOUT, never retried
- Connection errors: FailureKind.TRANSPORT, never retried
- Non-2xx: FailureKind.TRANSPORT with status code and parsed error body
- Undecodable JSON on 2xx: FailureKind.MALFORMED
- Cancellation (CancelToken): FailureKind.ABORTED, even mid-flight

Usage:
    token = CancelToken()
    data = get_json(session, url, params={...}, headers={...},
                    timeout=10, cancel=token, source="api.bible")
    if isinstance(data, Failure):
        ...
"""

import json
import logging
import threading
from typing import Any, Callable, Optional, Union

import requests
from urllib3.exceptions import ReadTimeoutError

from .results import Failure, FailureKind

logger = logging.getLogger(__name__)


class CancelToken:
    """
    Thread-safe cancellation handle accepted by both backend clients.

    cancel() may be called from any thread (typically the event loop while
    the request runs in a worker thread). Callbacks registered with
    on_cancel() run once, on the cancelling thread.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self):
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.debug(f"Cancel callback failed: {e}")

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a callback; runs immediately if already cancelled.

        Returns:
            A function that unregisters the callback
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback):
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


def _aborted(source: str) -> Failure:
    return Failure(FailureKind.ABORTED, f"{source} request was aborted")


def _timed_out(source: str, timeout: float) -> Failure:
    logger.warning(f"{source} request timed out after {timeout}s")
    return Failure(FailureKind.TIMEOUT, f"{source} request timed out after {timeout}s")


def _is_read_timeout(error: Exception) -> bool:
    """
    True for a timeout hit while streaming the body.

    requests re-raises urllib3's ReadTimeoutError from iter_content as a
    ConnectionError rather than a Timeout.
    """
    if isinstance(error, (requests.Timeout, TimeoutError)):
        return True
    return any(isinstance(arg, ReadTimeoutError) for arg in getattr(error, "args", ()))


def _error_message(data: Any, source: str, status: int) -> str:
    """Pick the backend's own error message when it sent one."""
    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return f"{source} request failed ({status})"


def get_json(
    session: requests.Session,
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: float = 10,
    cancel: Optional[CancelToken] = None,
    source: str = "backend",
) -> Union[Any, Failure]:
    """
    GET a JSON document once.

    Args:
        session: requests session (injectable for tests)
        url: Full endpoint URL
        params: Query parameters; None values are dropped
        headers: Request headers (credentials included by the caller)
        timeout: Seconds before the request fails with TIMEOUT
        cancel: Optional cancellation token
        source: Backend name used in messages

    Returns:
        Decoded JSON body on 2xx, otherwise a Failure
    """
    if cancel is not None and cancel.cancelled:
        return _aborted(source)

    params = {k: v for k, v in (params or {}).items() if v is not None}

    try:
        logger.debug(f"GET {url} params={sorted(params)}")
        response = session.get(
            url, params=params, headers=headers, timeout=timeout, stream=True
        )
    except requests.Timeout:
        if cancel is not None and cancel.cancelled:
            return _aborted(source)
        return _timed_out(source, timeout)
    except requests.RequestException as e:
        if cancel is not None and cancel.cancelled:
            return _aborted(source)
        logger.warning(f"Network error calling {source}: {e}")
        return Failure(FailureKind.TRANSPORT, f"Network error while calling {source}: {e}")

    unregister = cancel.on_cancel(response.close) if cancel is not None else None
    try:
        if cancel is not None and cancel.cancelled:
            return _aborted(source)

        try:
            body = response.content
        except (requests.RequestException, OSError, ValueError) as e:
            if cancel is not None and cancel.cancelled:
                return _aborted(source)
            if _is_read_timeout(e):
                return _timed_out(source, timeout)
            logger.warning(f"Failed reading {source} response: {e}")
            return Failure(FailureKind.TRANSPORT, f"Network error while calling {source}: {e}")

        if cancel is not None and cancel.cancelled:
            return _aborted(source)

        try:
            data = json.loads(body) if body else None
        except ValueError:
            data = None

        if not response.ok:
            logger.warning(f"{source} returned HTTP {response.status_code}")
            return Failure(
                FailureKind.TRANSPORT,
                _error_message(data, source, response.status_code),
                status_code=response.status_code,
                raw=data,
            )

        if data is None:
            return Failure(
                FailureKind.MALFORMED,
                f"{source} returned an empty or non-JSON body",
                status_code=response.status_code,
            )

        return data
    finally:
        if unregister is not None:
            unregister()
        response.close()
