"""Parse SEARCH argument atoms into a :class:`Criteria` tree.

What:
  Implement :func:`parse_criteria`, the recursive reader that turns the atom
  sequence of a SEARCH command into a :class:`~mailsearch.imap.criteria.Criteria`.

Why:
  Servers must interpret client SEARCH requests exactly and reject malformed
  ones as a whole. Doing it in one linear pass with explicit arity checks keeps
  the behaviour predictable and the failure modes typed.

How:
  An :class:`~mailsearch.imap.atoms.AtomCursor` walks the atoms. Each keyword
  (matched case-insensitively) decides how many arguments to consume and how to
  interpret them: flags take none, text/number/date/UID keys take one, HEADER
  takes two, NOT takes one parenthesised list and OR takes two. Lists are parsed
  recursively into fresh sub-trees. Any other token is a sequence set.

Interfaces:
  :func:`parse_criteria`.

Invariants & Safety:
  - Repeated keys overwrite earlier values (last assignment wins).
  - Any failure aborts the whole parse; no partial tree is returned.
  - Recursion depth is bounded by ``SearchSettings.max_depth``.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

from ..config.loader import get_search_config
from ..config.schema import SearchSettings
from ..utils.logging import JsonLogger
from .atoms import AtomCursor, AtomList, Number, Text, describe, to_atoms
from .criteria import DATE_KEYWORDS, FLAG_KEYWORDS, NUMBER_KEYWORDS, TEXT_KEYWORDS, Criteria
from .dates import parse_search_date
from .errors import InvalidDate, InvalidSequenceSet, NestingTooDeep, TypeMismatch
from .seqset import SequenceSet, parse_sequence_set


class _CriteriaParser:
    """Single-use parser state shared across one top-level call."""

    def __init__(self, settings: SearchSettings, logger: Optional[JsonLogger]):
        self._settings = settings
        self._logger = logger

    def parse(self, atoms: Sequence[Any], depth: int) -> Criteria:
        if depth > self._settings.max_depth:
            if self._logger is not None:
                self._logger.warning("search_nesting_too_deep", max_depth=self._settings.max_depth)
            raise NestingTooDeep(
                f"NOT/OR nesting exceeds the maximum depth of {self._settings.max_depth}"
            )
        criteria = Criteria()
        cursor = AtomCursor(to_atoms(atoms))
        while not cursor.at_end:
            position = cursor.position
            atom = cursor.take("search-key")
            if isinstance(atom, Number):
                criteria.seq_set = self._sequence_set(str(atom.value), None, position)
                continue
            if not isinstance(atom, Text):
                raise TypeMismatch(
                    f"expected a search key, got {describe(atom)}", position=position
                )
            self._apply(criteria, atom.value, cursor, depth, position)
        return criteria

    def _apply(
        self,
        criteria: Criteria,
        token: str,
        cursor: AtomCursor,
        depth: int,
        position: int,
    ) -> None:
        keyword = token.upper()
        if keyword == "ALL":
            return
        if keyword in FLAG_KEYWORDS:
            setattr(criteria, FLAG_KEYWORDS[keyword], True)
        elif keyword in TEXT_KEYWORDS:
            setattr(criteria, TEXT_KEYWORDS[keyword], cursor.take_text(keyword))
        elif keyword in NUMBER_KEYWORDS:
            setattr(criteria, NUMBER_KEYWORDS[keyword], cursor.take_number(keyword))
        elif keyword in DATE_KEYWORDS:
            self._date(criteria, keyword, cursor)
        elif keyword == "HEADER":
            cursor.require(keyword, 2)
            name = cursor.take_text(keyword)
            value = cursor.take_text(keyword)
            # header is all-or-nothing
            criteria.header = (name, value) if name and value else ("", "")
        elif keyword == "UID":
            arg_position = cursor.position
            argument = cursor.take(keyword)
            if isinstance(argument, AtomList):
                raise TypeMismatch(
                    "UID expects a sequence set, got list", keyword=keyword, position=arg_position
                )
            criteria.uid = self._sequence_set(str(argument.value), keyword, arg_position)
        elif keyword == "NOT":
            criteria.not_ = self.parse(cursor.take_list(keyword).items, depth + 1)
        elif keyword == "OR":
            cursor.require(keyword, 2)
            left = cursor.take_list(keyword)
            right = cursor.take_list(keyword)
            criteria.or_ = (self.parse(left.items, depth + 1), self.parse(right.items, depth + 1))
        else:
            criteria.seq_set = self._sequence_set(token, None, position)

    def _date(self, criteria: Criteria, keyword: str, cursor: AtomCursor) -> None:
        raw = cursor.take_text(keyword)
        field_name = DATE_KEYWORDS[keyword]
        try:
            value = parse_search_date(raw, keyword=keyword)
        except InvalidDate:
            if self._settings.date_policy == "strict":
                raise
            if self._logger is not None:
                self._logger.warning("search_date_unparsed", search_key=keyword)
            setattr(criteria, field_name, None)
            criteria.unparsed.append((keyword, raw))
            return
        setattr(criteria, field_name, value)

    @staticmethod
    def _sequence_set(text: str, keyword: Optional[str], position: int) -> SequenceSet:
        try:
            return parse_sequence_set(text)
        except InvalidSequenceSet as exc:
            raise InvalidSequenceSet(str(exc), keyword=keyword, position=position) from exc


def parse_criteria(
    atoms: Sequence[Any],
    *,
    settings: Optional[SearchSettings] = None,
    logger: Optional[JsonLogger] = None,
) -> Criteria:
    """Parse a SEARCH criteria list.

    What:
      Build a :class:`Criteria` from ``atoms``, e.g.
      ``["OR", ["SEEN"], ["FLAGGED"], "SINCE", "1-Feb-1994"]``.

    Why:
      Protocol servers call this once per SEARCH command; clients use it to
      validate hand-written queries.

    How:
      Lift ``atoms`` with :func:`~mailsearch.imap.atoms.to_atoms` and run the
      recursive parser with ``settings`` (defaulting to the cached
      configuration's ``search`` section).

    Args:
      atoms: Atoms or plain ``str``/``int``/``list`` values.
      settings: Parser limits and date policy.
      logger: Optional structured logger for lenient-date and depth events.

    Returns:
      The parsed filter tree.

    Raises:
      TypeMismatch: An argument had the wrong shape.
      MissingArgument: A keyword ran out of arguments.
      InvalidSequenceSet: A non-keyword token is not a sequence set.
      InvalidNumber: LARGER/SMALLER argument is not an unsigned integer.
      InvalidDate: A date argument is malformed and the policy is ``strict``.
      NestingTooDeep: NOT/OR nesting exceeds ``settings.max_depth``.
    """

    if settings is None:
        settings = get_search_config().search
    return _CriteriaParser(settings, logger).parse(atoms, depth=0)
