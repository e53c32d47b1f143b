"""Test package marker for the mailsearch suite.

What:
  Marks ``tests`` as a package so ``tests.unit`` and ``tests.e2e`` resolve
  consistently under pytest.

Invariants & Safety:
  - Importing ``tests`` has no side effects; fixtures live in ``conftest.py``.
"""
