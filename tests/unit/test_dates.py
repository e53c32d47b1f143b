"""
Module: tests/unit/test_dates.py

What:
    Check the ``D-Mon-YYYY`` search date codec in both directions.

Why:
    Date keys must parse regardless of the host locale and format back to the
    exact text the parser accepts.
"""

from datetime import date, datetime

import pytest

from mailsearch.imap.dates import format_search_date, parse_search_date
from mailsearch.imap.errors import InvalidDate
from mailsearch.imap.parser import parse_criteria


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2-Jan-2006", date(2006, 1, 2)),
        ("02-jan-2006", date(2006, 1, 2)),
        ("31-DEC-1999", date(1999, 12, 31)),
        ("29-Feb-2024", date(2024, 2, 29)),
    ],
)
def test_parse_search_date(text, expected):
    assert parse_search_date(text) == expected


@pytest.mark.parametrize(
    "text",
    ["2006-01-02", "2-January-2006", "30-Feb-2021", "2-Foo-2006", "2-Jan-06", "2-Jan-2006\n", ""],
)
def test_parse_search_date_rejects(text):
    with pytest.raises(InvalidDate):
        parse_search_date(text)


def test_format_search_date_does_not_pad_day():
    assert format_search_date(date(2006, 1, 2)) == "2-Jan-2006"
    assert format_search_date(datetime(2021, 11, 15, 8, 30)) == "15-Nov-2021"


@pytest.mark.parametrize("text", ["1-Feb-1994", "17-Jul-1996", "9-Sep-2009"])
def test_before_round_trip(text):
    criteria = parse_criteria(["BEFORE", text])
    assert format_search_date(criteria.before) == text
