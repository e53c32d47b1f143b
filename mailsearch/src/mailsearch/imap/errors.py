"""Exception hierarchy for SEARCH criteria parsing and wire decoding.

What:
  Declare the typed errors raised when a SEARCH argument list cannot be turned
  into a :class:`~mailsearch.imap.criteria.Criteria` tree, or when raw wire text
  cannot be split into atoms.

Why:
  Protocol servers answer malformed SEARCH commands with ``BAD`` responses and
  need to know what went wrong without string matching. A small, closed
  hierarchy lets callers catch the broad :class:`SearchParseError` or a precise
  subclass.

How:
  Every parse error records the offending ``keyword`` (when one was being
  processed) and the cursor ``position`` inside the sub-sequence being parsed.
  The errors derive from :class:`ValueError` so generic input validation
  handlers keep working.

Interfaces:
  :class:`SearchError`, :class:`SearchParseError`, :class:`TypeMismatch`,
  :class:`MissingArgument`, :class:`InvalidSequenceSet`,
  :class:`InvalidNumber`, :class:`InvalidDate`, :class:`NestingTooDeep`,
  :class:`WireSyntaxError`.

Invariants & Safety:
  - No unknown-keyword error exists: unrecognised tokens are sequence sets and
    only that attempt's failure is reported.
  - Nested NOT/OR failures propagate unchanged to the top-level caller.
"""
from __future__ import annotations

from typing import Optional


class SearchError(Exception):
    """Base class for every error raised by the SEARCH criteria codec."""


class SearchParseError(SearchError, ValueError):
    """Raised when an atom sequence is not a valid SEARCH criteria list.

    What:
      Carries a human-readable message plus optional ``keyword`` and
      ``position`` context.

    Why:
      Server implementations log the context and build tagged ``BAD``
      responses; tests assert on the structured attributes.

    How:
      Store the context attributes and build the final message so ``str(exc)``
      includes them.
    """

    def __init__(
        self,
        message: str,
        *,
        keyword: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        self.keyword = keyword
        self.position = position
        details = []
        if keyword is not None:
            details.append(f"keyword={keyword}")
        if position is not None:
            details.append(f"position={position}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class TypeMismatch(SearchParseError):
    """An atom had the wrong shape (text, number or list) for its position."""


class MissingArgument(SearchParseError):
    """Fewer atoms remained than the keyword's arity requires."""


class InvalidSequenceSet(SearchParseError):
    """A token could not be parsed as a message sequence set."""


class InvalidNumber(SearchParseError):
    """A numeric argument was not an unsigned 32-bit integer."""


class InvalidDate(SearchParseError):
    """A date argument did not follow the ``D-Mon-YYYY`` layout."""


class NestingTooDeep(SearchParseError):
    """NOT/OR nesting exceeded the configured maximum depth."""


class WireSyntaxError(SearchError, ValueError):
    """Raw SEARCH text could not be tokenised into atoms."""
