"""Fixed-layout date codec for SEARCH date keys.

What:
  Convert between :class:`datetime.date` and the ``D-Mon-YYYY`` spelling used
  by BEFORE, ON, SINCE, SENTBEFORE, SENTON and SENTSINCE (``2-Jan-2006``).

Why:
  ``strptime``/``strftime`` month names follow the process locale, while the
  wire format always uses English abbreviations. A tiny dedicated codec keeps
  parsing deterministic on every host.

How:
  Match the text with a compiled regular expression, look the month up in a
  locale-independent table and let :class:`datetime.date` validate the day for
  the given month and year.

Interfaces:
  :func:`parse_search_date`, :func:`format_search_date`, :data:`SEARCH_DATE_LAYOUT`.

Invariants & Safety:
  - Month names are matched case-insensitively; day may carry a leading zero.
  - Formatting never pads the day, mirroring the layout.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from .errors import InvalidDate

SEARCH_DATE_LAYOUT = "D-Mon-YYYY"

# locale-independent month names
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_MONTH_INDEX = {name.lower(): index for index, name in enumerate(MONTH_NAMES, start=1)}

_DATE_RE = re.compile(r"(?P<day>[0-9]{1,2})-(?P<mon>[A-Za-z]{3})-(?P<year>[0-9]{4})")


def parse_search_date(text: str, *, keyword: Optional[str] = None) -> date:
    """Parse ``text`` in the ``D-Mon-YYYY`` layout.

    Args:
      text: Date spelling such as ``"1-Feb-1994"`` or ``"01-feb-1994"``.
      keyword: SEARCH keyword being parsed, used for error context.

    Returns:
      The calendar date without a time component.

    Raises:
      InvalidDate: If the layout does not match or the date does not exist.
    """

    match = _DATE_RE.fullmatch(text)
    if match is None:
        raise InvalidDate(f"invalid search date {text!r}, expected {SEARCH_DATE_LAYOUT}", keyword=keyword)
    month = _MONTH_INDEX.get(match.group("mon").lower())
    if month is None:
        raise InvalidDate(f"unknown month in search date {text!r}", keyword=keyword)
    try:
        return date(int(match.group("year")), month, int(match.group("day")))
    except ValueError as exc:
        raise InvalidDate(f"invalid search date {text!r}: {exc}", keyword=keyword) from exc


def format_search_date(value: date) -> str:
    """Render ``value`` as ``D-Mon-YYYY``; datetimes are truncated to their date."""

    return f"{value.day}-{MONTH_NAMES[value.month - 1]}-{value.year:04d}"
