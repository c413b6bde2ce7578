# tests/conftest.py
"""
Shared fakes for the backend clients.

FakeSession records every GET and replays queued FakeResponse objects
(or raises queued exceptions), so tests never touch the network.
"""

import json

import pytest


class FakeResponse:
    def __init__(self, payload=None, status_code=200, body=None):
        self.status_code = status_code
        if body is None:
            body = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self._body = body
        self.closed = False

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    @property
    def content(self):
        return self._body

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def get(self, url, params=None, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": headers, "timeout": timeout})
        if not self.responses:
            raise AssertionError(f"Unexpected GET {url}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response) and not isinstance(response, FakeResponse):
            return response()
        return response


@pytest.fixture
def session():
    return FakeSession()
