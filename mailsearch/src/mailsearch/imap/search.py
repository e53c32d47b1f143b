"""Translate :class:`Criteria` trees into ``imapclient`` search criteria.

What:
  Lower a filter tree into the nested list form accepted by
  :meth:`imapclient.IMAPClient.search`.

Why:
  ``imapclient`` quotes strings, renders integers and wraps nested lists in
  parentheses itself; it only needs plain Python values in the right order.
  Reusing the canonical formatter keeps client-side queries identical to what
  the server-side parser accepts.

How:
  Format the tree, lower atoms to ``str``/``int``/``list`` and replace empty
  groups (which ``imapclient`` rejects) with ``["ALL"]``.

Interfaces:
  :func:`to_imapclient`.

Invariants & Safety:
  - The result is never empty; an empty tree becomes ``["ALL"]``.
"""
from __future__ import annotations

from typing import Any, List

from .atoms import from_atoms
from .criteria import Criteria
from .formatter import format_criteria


def _fill_empty_groups(values: List[Any]) -> List[Any]:
    result: List[Any] = []
    for value in values:
        if isinstance(value, list):
            result.append(_fill_empty_groups(value) if value else ["ALL"])
        else:
            result.append(value)
    return result


def to_imapclient(criteria: Criteria) -> List[Any]:
    """Convert ``criteria`` into ``imapclient`` search arguments.

    Args:
      criteria: Filter tree to send.

    Returns:
      List such as ``["OR", ["SEEN"], ["FLAGGED"], "SINCE", "1-Feb-1994"]``.
    """

    values = _fill_empty_groups(from_atoms(format_criteria(criteria)))
    return values or ["ALL"]
