"""Structured SEARCH filter tree.

What:
  Define :class:`Criteria`, the strongly-typed form of an IMAP SEARCH criteria
  list (RFC 3501 section 6.4.4), together with the keyword tables that map
  wire keywords to its attributes.

Why:
  Search engines want to evaluate predicates, not re-interpret token lists. A
  dataclass with one attribute per search key makes every predicate explicit,
  and the shared keyword tables keep the parser and formatter in agreement.

How:
  Every attribute defaults to its "absent" value: ``False`` for flags, ``""``
  for text, ``0`` for sizes and ``None`` for dates, sequence sets and
  sub-trees. A :class:`Criteria` with nothing set is the universal ``ALL``
  predicate. ``not_`` owns one nested tree and ``or_`` owns exactly two.

Interfaces:
  :class:`Criteria`, :data:`FLAG_KEYWORDS`, :data:`TEXT_KEYWORDS`,
  :data:`NUMBER_KEYWORDS`, :data:`DATE_KEYWORDS`.

Invariants & Safety:
  - ``or_`` is either ``None`` or a pair of two :class:`Criteria`; never one.
  - ``header`` is only meaningful when both name and value are non-empty.
  - Sub-trees are exclusively owned; the structure is a tree, never a graph.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .seqset import SequenceSet

FLAG_KEYWORDS: Dict[str, str] = {
    "ANSWERED": "answered",
    "DELETED": "deleted",
    "DRAFT": "draft",
    "FLAGGED": "flagged",
    "NEW": "new",
    "OLD": "old",
    "RECENT": "recent",
    "SEEN": "seen",
    "UNANSWERED": "unanswered",
    "UNDELETED": "undeleted",
    "UNDRAFT": "undraft",
    "UNFLAGGED": "unflagged",
    "UNSEEN": "unseen",
}

TEXT_KEYWORDS: Dict[str, str] = {
    "BCC": "bcc",
    "BODY": "body",
    "CC": "cc",
    "FROM": "from_",
    "KEYWORD": "keyword",
    "SUBJECT": "subject",
    "TEXT": "text",
    "TO": "to",
    "UNKEYWORD": "unkeyword",
}

NUMBER_KEYWORDS: Dict[str, str] = {
    "LARGER": "larger",
    "SMALLER": "smaller",
}

DATE_KEYWORDS: Dict[str, str] = {
    "BEFORE": "before",
    "ON": "on",
    "SENTBEFORE": "sent_before",
    "SENTON": "sent_on",
    "SENTSINCE": "sent_since",
    "SINCE": "since",
}


@dataclass
class Criteria:
    """One node of a SEARCH filter tree.

    What:
      Holds every RFC 3501 search key as an independently optional attribute.
      Multiple keys set on the same node are implicitly AND-ed.

    Why:
      Parsing produces this structure once per SEARCH command; the formatter
      and downstream search engines consume it read-only.

    How:
      Plain mutable dataclass so the parser can assign fields during its single
      pass. ``__post_init__`` rejects half-populated OR pairs.

    Attributes:
      seq_set: Message sequence-number selector.
      uid: UID selector, structurally identical to ``seq_set``.
      header: ``(field name, value)`` pair for the HEADER key.
      not_: Negated sub-tree.
      or_: Pair of alternative sub-trees.
      unparsed: ``(keyword, raw text)`` for dates skipped by lenient parsing.
    """

    seq_set: Optional[SequenceSet] = None

    answered: bool = False
    deleted: bool = False
    draft: bool = False
    flagged: bool = False
    new: bool = False
    old: bool = False
    recent: bool = False
    seen: bool = False
    unanswered: bool = False
    undeleted: bool = False
    undraft: bool = False
    unflagged: bool = False
    unseen: bool = False

    bcc: str = ""
    body: str = ""
    cc: str = ""
    from_: str = ""
    keyword: str = ""
    subject: str = ""
    text: str = ""
    to: str = ""
    unkeyword: str = ""

    header: Tuple[str, str] = ("", "")

    larger: int = 0
    smaller: int = 0

    before: Optional[date] = None
    on: Optional[date] = None
    since: Optional[date] = None
    sent_before: Optional[date] = None
    sent_on: Optional[date] = None
    sent_since: Optional[date] = None

    uid: Optional[SequenceSet] = None

    not_: Optional["Criteria"] = None
    or_: Optional[Tuple["Criteria", "Criteria"]] = None

    unparsed: List[Tuple[str, str]] = field(default_factory=list, compare=False)

    def __post_init__(self) -> None:
        if self.or_ is not None:
            pair = tuple(self.or_) if isinstance(self.or_, (tuple, list)) else ()
            if len(pair) != 2 or any(not isinstance(branch, Criteria) for branch in pair):
                raise ValueError("or_ requires exactly two Criteria branches")
            self.or_ = (pair[0], pair[1])

    @classmethod
    def parse(cls, atoms: Sequence[Any], **kwargs: Any) -> "Criteria":
        """Shortcut for :func:`mailsearch.imap.parser.parse_criteria`."""

        from .parser import parse_criteria

        return parse_criteria(atoms, **kwargs)

    def format(self) -> list:
        """Shortcut for :func:`mailsearch.imap.formatter.format_criteria`."""

        from .formatter import format_criteria

        return format_criteria(self)

    def has_header(self) -> bool:
        name, value = self.header
        return bool(name) and bool(value)

    def is_all(self) -> bool:
        """Return ``True`` when no predicate is set (matches every message)."""

        if self.has_header():
            return False
        return self == Criteria(header=self.header)

    def to_dict(self) -> Dict[str, Any]:
        """Render the set predicates as a JSON-friendly mapping.

        Absent attributes are omitted, sequence sets and dates become their wire
        spelling or ISO form, and sub-trees recurse. The trailing underscore of
        ``from_``/``not_``/``or_`` is dropped from the keys.
        """

        payload: Dict[str, Any] = {}
        for item in fields(self):
            name = item.name
            value = getattr(self, name)
            key = name.rstrip("_")
            if name == "header":
                if self.has_header():
                    payload[key] = list(value)
            elif name == "not_":
                if value is not None:
                    payload[key] = value.to_dict()
            elif name == "or_":
                if value is not None:
                    payload[key] = [value[0].to_dict(), value[1].to_dict()]
            elif name == "unparsed":
                if value:
                    payload[key] = [list(entry) for entry in value]
            elif isinstance(value, SequenceSet):
                payload[key] = str(value)
            elif isinstance(value, date):
                payload[key] = value.isoformat()
            elif value:
                payload[key] = value
        return payload
