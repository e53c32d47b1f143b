"""Pytest configuration shared by unit and end-to-end suites.

What:
  Establish project import paths and apply the canned configuration file to
  every test.

Why:
  Tests must exercise the source tree rather than an installed wheel, and the
  configuration cache is process-global, so each test starts from a known
  state.

How:
  Prepend ``mailsearch/src`` to ``sys.path`` when present, point
  ``MAILSEARCH_CONFIG_PATH`` at ``tests/data/config.yaml`` and reset the loader
  cache before and after each test.

Interfaces:
  :func:`search_config` (autouse fixture), :data:`CONFIG_PATH`.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mailsearch" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mailsearch.config.loader import reset_search_config

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "config.yaml"


@pytest.fixture(autouse=True)
def search_config(monkeypatch: pytest.MonkeyPatch):
    """Apply the canned configuration file for every test."""

    monkeypatch.setenv("MAILSEARCH_CONFIG_PATH", str(CONFIG_PATH))
    reset_search_config()
    try:
        yield
    finally:
        reset_search_config()
