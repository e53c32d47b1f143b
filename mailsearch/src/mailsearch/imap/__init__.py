"""Facade for the SEARCH criteria codec.

What:
  Surface the criteria tree, the parser and formatter, the atom types and the
  wire text helpers used by servers and clients.

Why:
  Call sites import from one place and never depend on the module layout of the
  codec.

Interfaces:
  ``Criteria``, ``parse_criteria``, ``format_criteria``, ``Text``, ``Number``,
  ``AtomList``, ``to_atoms``, ``from_atoms``, ``SequenceSet``,
  ``parse_sequence_set``, ``parse_search_date``, ``format_search_date``,
  ``tokenize``, ``serialize``, ``serialize_criteria``, ``to_imapclient`` and
  the error types. ``SearchClient`` lives in :mod:`mailsearch.imap.client` so
  importing the codec never requires a network-capable client.
"""

from .atoms import AtomCursor, AtomList, Number, Text, from_atoms, parse_unsigned, to_atoms
from .criteria import Criteria
from .dates import format_search_date, parse_search_date
from .errors import (
    InvalidDate,
    InvalidNumber,
    InvalidSequenceSet,
    MissingArgument,
    NestingTooDeep,
    SearchError,
    SearchParseError,
    TypeMismatch,
    WireSyntaxError,
)
from .formatter import format_criteria
from .parser import parse_criteria
from .search import to_imapclient
from .seqset import SequenceSet, parse_sequence_set
from .wire import serialize, serialize_criteria, tokenize

__all__ = [
    "AtomCursor",
    "AtomList",
    "Criteria",
    "InvalidDate",
    "InvalidNumber",
    "InvalidSequenceSet",
    "MissingArgument",
    "NestingTooDeep",
    "Number",
    "SearchError",
    "SearchParseError",
    "SequenceSet",
    "Text",
    "TypeMismatch",
    "WireSyntaxError",
    "format_criteria",
    "format_search_date",
    "from_atoms",
    "parse_criteria",
    "parse_search_date",
    "parse_sequence_set",
    "parse_unsigned",
    "serialize",
    "serialize_criteria",
    "to_atoms",
    "to_imapclient",
    "tokenize",
]
