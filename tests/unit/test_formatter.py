"""
Module: tests/unit/test_formatter.py

What:
    Validate :func:`mailsearch.imap.formatter.format_criteria`: canonical key
    order, argument encoding, nested groups and re-parse stability.

Why:
    Clients send whatever the formatter produces. Wrong keywords or missing
    arguments turn into server-side BAD responses or, worse, different
    matches.

How:
    Format explicitly built trees and compare atom lists, then check that
    parsing the output reproduces the parsed input field by field.
"""

from datetime import date

import pytest

from mailsearch.imap.atoms import AtomList, Number, Text, from_atoms
from mailsearch.imap.criteria import Criteria
from mailsearch.imap.formatter import format_criteria
from mailsearch.imap.parser import parse_criteria
from mailsearch.imap.seqset import parse_sequence_set


def test_empty_criteria_formats_to_nothing():
    assert format_criteria(Criteria()) == []


def test_sequence_set_comes_first_then_alphabetical_keys():
    criteria = Criteria(
        unseen=True,
        seq_set=parse_sequence_set("1:5"),
        answered=True,
        to="bob",
        larger=10,
    )
    assert from_atoms(format_criteria(criteria)) == [
        "1:5", "ANSWERED", "LARGER", 10, "TO", "bob", "UNSEEN",
    ]


def test_smaller_uses_its_own_keyword():
    assert format_criteria(Criteria(smaller=2048)) == [Text("SMALLER"), Number(2048)]


def test_unkeyword_carries_its_value():
    assert format_criteria(Criteria(unkeyword="$Junk")) == [Text("UNKEYWORD"), Text("$Junk")]


@pytest.mark.parametrize("header", [("X-Mailer", ""), ("", "Foo"), ("", "")])
def test_incomplete_header_is_omitted(header):
    assert format_criteria(Criteria(header=header)) == []


def test_header_emits_name_and_value():
    atoms = format_criteria(Criteria(header=("X-Mailer", "Foo")))
    assert atoms == [Text("HEADER"), Text("X-Mailer"), Text("Foo")]


def test_dates_use_search_layout():
    atoms = format_criteria(Criteria(sent_since=date(2006, 1, 2), before=date(1994, 11, 30)))
    assert from_atoms(atoms) == ["BEFORE", "30-Nov-1994", "SENTSINCE", "2-Jan-2006"]


def test_uid_formats_sequence_set_text():
    atoms = format_criteria(Criteria(uid=parse_sequence_set("4:2,9:*")))
    assert atoms == [Text("UID"), Text("2:4,9:*")]


def test_not_and_or_wrap_sub_sequences():
    """
    What:
        NOT emits one nested list; OR emits two.

    Why:
        The parser requires parenthesised groups for both keys, so the
        formatter must produce them for round trips to work.

    How:
        Format a tree combining both and compare against explicit atoms.
    """
    criteria = Criteria(
        not_=Criteria(deleted=True),
        or_=(Criteria(seen=True), Criteria(from_="alice", flagged=True)),
    )
    assert format_criteria(criteria) == [
        Text("NOT"),
        AtomList((Text("DELETED"),)),
        Text("OR"),
        AtomList((Text("SEEN"),)),
        AtomList((Text("FLAGGED"), Text("FROM"), Text("alice"))),
    ]


def test_criteria_format_shortcut():
    assert Criteria(seen=True).format() == [Text("SEEN")]


@pytest.mark.parametrize(
    "atoms",
    [
        ["99:101"],
        ["UNSEEN", "FROM", "alice", "SINCE", "1-Feb-1994"],
        ["OR", ["SEEN"], ["FLAGGED"], "LARGER", "100", "SMALLER", "5000"],
        ["NOT", ["OR", ["HEADER", "X-Mailer", "Foo"], ["UNKEYWORD", "$Junk"]]],
        ["UID", "1,3:5,9:*", "TEXT", "quarterly report", "BEFORE", "31-Dec-2020"],
        ["SENTON", "7-Jul-2007", "SENTBEFORE", "8-Jul-2007", "ON", "9-Jul-2007"],
        ["new", "old", "recent", "draft", "undraft", "UNFLAGGED", "UNDELETED", "UNANSWERED"],
        ["HEADER", "X-Mailer", "", "SEEN"],
        ["HEADER", "", "Foo"],
    ],
)
def test_reparse_is_stable(atoms):
    """
    What:
        ``parse(format(parse(atoms)))`` equals ``parse(atoms)``.

    Why:
        Canonical order may differ from the input, but the meaning must not.

    How:
        Parse, format, parse again and compare trees field by field.
    """
    first = parse_criteria(atoms)
    assert parse_criteria(format_criteria(first)) == first
