"""Pytest fixtures for unit tests requiring the IMAP fake.

What:
  Make ``tests/unit`` importable and expose a ``search_client`` fixture backed
  by :class:`FakeImapBackend`.

Why:
  Client tests assert on the arguments sent to ``imapclient``; a fresh fake per
  test keeps them deterministic and offline.

Interfaces:
  :func:`search_client` (pytest fixture).
"""

import io
import sys
from pathlib import Path

import pytest

from mailsearch.imap.client import SearchClient
from mailsearch.utils.logging import JsonLogger

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from fakes import FakeImapBackend


@pytest.fixture
def search_client(monkeypatch: pytest.MonkeyPatch):
    """Yield ``(SearchClient, FakeImapBackend, log stream)`` inside the client context.

    Monkeypatches ``mailsearch.imap.client.IMAPClient`` so the connection
    lifecycle runs against the fake, with connection settings taken from the
    canned configuration file.
    """

    backend = FakeImapBackend(results=[12, 3, 7])
    monkeypatch.setattr("mailsearch.imap.client.IMAPClient", lambda host, port, ssl: backend)
    stream = io.StringIO()
    client = SearchClient(logger=JsonLogger(stream=stream, component="test"))
    with client:
        yield client, backend, stream
