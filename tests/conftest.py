"""
Shared fixtures for the request tester suite.

Provides fake transports and dialog providers so nothing touches the
network or a real window.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so tests can import project modules
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from response_normalizer import RawResponse  # noqa: E402


class FakeTransport:
    """Records every RequestSpec and answers with a canned RawResponse."""

    def __init__(self, status=200, reason="OK", headers=None, body="", error=None):
        self.sent = []
        self.status = status
        self.reason = reason
        self.headers = headers or []
        self.body = body
        self.error = error

    def send(self, spec):
        self.sent.append(spec)
        if self.error is not None:
            raise self.error
        return RawResponse(status=self.status, reason=self.reason,
                           headers=list(self.headers), read_text=lambda: self.body)


class FakeDialogs:
    def __init__(self, save_path=None, open_path=None):
        self.save_path = save_path
        self.open_path = open_path

    def pick_save_path(self):
        return self.save_path

    def pick_open_path(self):
        return self.open_path


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_dialogs():
    return FakeDialogs
