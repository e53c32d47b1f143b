"""Format a :class:`Criteria` tree back into SEARCH argument atoms.

What:
  Implement :func:`format_criteria`, the inverse of
  :func:`~mailsearch.imap.parser.parse_criteria`.

Why:
  Clients build SEARCH commands programmatically and servers echo or proxy
  them. A canonical key order makes the output stable, and using the same
  lexical conventions as the parser guarantees that re-parsing yields equal
  field values.

How:
  Emit the sequence set first, then walk a fixed table of keys in alphabetical
  keyword order. NOT and OR recurse and wrap each sub-result in an
  :class:`~mailsearch.imap.atoms.AtomList`.

Interfaces:
  :func:`format_criteria`.

Invariants & Safety:
  - Pure and total: every well-formed :class:`Criteria` formats.
  - Absent fields emit nothing; an empty tree formats to an empty list.
  - HEADER is emitted only when both name and value are non-empty.
"""
from __future__ import annotations

from typing import List

from .atoms import Atom, AtomList, Number, Text
from .criteria import DATE_KEYWORDS, FLAG_KEYWORDS, NUMBER_KEYWORDS, TEXT_KEYWORDS, Criteria
from .dates import format_search_date

# Canonical emission order after the sequence set.
_KEY_ORDER = (
    "ANSWERED", "BCC", "BEFORE", "BODY", "CC", "DELETED", "DRAFT", "FLAGGED",
    "FROM", "HEADER", "KEYWORD", "LARGER", "NEW", "NOT", "OLD", "ON", "OR",
    "RECENT", "SEEN", "SENTBEFORE", "SENTON", "SENTSINCE", "SINCE", "SMALLER",
    "SUBJECT", "TEXT", "TO", "UID", "UNANSWERED", "UNDELETED", "UNDRAFT",
    "UNFLAGGED", "UNKEYWORD", "UNSEEN",
)


def _emit(criteria: Criteria, keyword: str) -> List[Atom]:
    if keyword in FLAG_KEYWORDS:
        return [Text(keyword)] if getattr(criteria, FLAG_KEYWORDS[keyword]) else []
    if keyword in TEXT_KEYWORDS:
        value = getattr(criteria, TEXT_KEYWORDS[keyword])
        return [Text(keyword), Text(value)] if value else []
    if keyword in NUMBER_KEYWORDS:
        value = getattr(criteria, NUMBER_KEYWORDS[keyword])
        return [Text(keyword), Number(value)] if value else []
    if keyword in DATE_KEYWORDS:
        value = getattr(criteria, DATE_KEYWORDS[keyword])
        return [Text(keyword), Text(format_search_date(value))] if value is not None else []
    if keyword == "HEADER":
        if not criteria.has_header():
            return []
        name, value = criteria.header
        return [Text(keyword), Text(name), Text(value)]
    if keyword == "UID":
        return [Text(keyword), Text(str(criteria.uid))] if criteria.uid is not None else []
    if keyword == "NOT":
        if criteria.not_ is None:
            return []
        return [Text(keyword), AtomList(tuple(format_criteria(criteria.not_)))]
    if keyword == "OR":
        if criteria.or_ is None:
            return []
        left, right = criteria.or_
        return [
            Text(keyword),
            AtomList(tuple(format_criteria(left))),
            AtomList(tuple(format_criteria(right))),
        ]
    raise KeyError(keyword)  # pragma: no cover - table and dispatch out of sync


def format_criteria(criteria: Criteria) -> List[Atom]:
    """Return the canonical atom sequence for ``criteria``.

    Args:
      criteria: Filter tree to render.

    Returns:
      Atoms in canonical order, e.g. ``[Text("1:5"), Text("SEEN")]``.
    """

    atoms: List[Atom] = []
    if criteria.seq_set is not None:
        atoms.append(Text(str(criteria.seq_set)))
    for keyword in _KEY_ORDER:
        atoms.extend(_emit(criteria, keyword))
    return atoms
