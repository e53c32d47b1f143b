"""
Module: tests/unit/test_wire.py

What:
    Cover :func:`tokenize`, :func:`serialize` and :func:`serialize_criteria`,
    the bridge between raw SEARCH text and atoms.

Why:
    Quoting, literals and parentheses are where hand-written IMAP commands go
    wrong; these helpers feed both the CLI and :meth:`SearchClient.search_text`.

How:
    Tokenise representative commands, render atom lists, and check malformed
    input raises :class:`WireSyntaxError`.
"""

import pytest

from mailsearch.imap.atoms import AtomList, Number, Text
from mailsearch.imap.criteria import Criteria
from mailsearch.imap.errors import WireSyntaxError
from mailsearch.imap.parser import parse_criteria
from mailsearch.imap.wire import serialize, serialize_criteria, tokenize


def test_tokenize_groups_and_quotes():
    atoms = tokenize('OR (SEEN) (FROM "Alice Smith") SUBJECT "say \\"hi\\""')
    assert atoms == [
        Text("OR"),
        AtomList((Text("SEEN"),)),
        AtomList((Text("FROM"), Text("Alice Smith"))),
        Text("SUBJECT"),
        Text('say "hi"'),
    ]


def test_tokenize_keeps_digits_as_text():
    assert tokenize("LARGER 100 1:5") == [Text("LARGER"), Text("100"), Text("1:5")]


def test_tokenize_literal():
    atoms = tokenize("BODY {5}\r\nhello SEEN")
    assert atoms == [Text("BODY"), Text("hello"), Text("SEEN")]


def test_tokenize_non_synchronising_literal_counts_octets():
    atoms = tokenize("SUBJECT {6+}\r\ncafé!")
    assert atoms == [Text("SUBJECT"), Text("café!")]


def test_tokenize_nested_empty_group():
    assert tokenize("NOT ()") == [Text("NOT"), AtomList(())]


@pytest.mark.parametrize(
    "text",
    [
        "NOT (SEEN",
        "SEEN)",
        'SUBJECT "unterminated',
        "BODY {10}\r\nshort",
        "BODY {x}\r\nabc",
        "BODY {3}abc",
    ],
)
def test_tokenize_rejects_malformed_text(text):
    with pytest.raises(WireSyntaxError):
        tokenize(text)


def test_serialize_quotes_when_needed():
    atoms = [
        Text("1:5,7:*"),
        Text("SUBJECT"),
        Text("two words"),
        Text("FROM"),
        Text(""),
        Text("TEXT"),
        Text('a"b\\c'),
        Text("LARGER"),
        Number(10),
    ]
    assert serialize(atoms) == '1:5,7:* SUBJECT "two words" FROM "" TEXT "a\\"b\\\\c" LARGER 10'


def test_serialize_uses_literal_for_line_breaks_and_non_ascii():
    assert serialize([Text("BODY"), Text("a\r\nb")]) == "BODY {4}\r\na\r\nb"
    assert serialize([Text("SUBJECT"), Text("café")]) == "SUBJECT {5}\r\ncafé"


def test_serialize_nested_lists():
    atoms = [Text("OR"), AtomList((Text("SEEN"),)), AtomList((Text("NOT"), AtomList((Text("DRAFT"),))))]
    assert serialize(atoms) == "OR (SEEN) (NOT (DRAFT))"


def test_serialize_criteria_uses_all_for_empty_tree():
    assert serialize_criteria(Criteria()) == "ALL"


def test_text_round_trip_through_parser():
    """
    What:
        Canonical wire text parses back to the same tree.

    Why:
        ``mailsearch normalize`` and the client both rely on this property.

    How:
        Parse raw text, serialise the tree, tokenise and parse again.
    """
    text = 'since 1-Feb-1994 or (subject "weekly report") (header X-Mailer "Foo Bar") 2:4'
    criteria = parse_criteria(tokenize(text))
    canonical = serialize_criteria(criteria)
    assert canonical == '2:4 OR (SUBJECT "weekly report") (HEADER X-Mailer "Foo Bar") SINCE 1-Feb-1994'
    assert parse_criteria(tokenize(canonical)) == criteria
