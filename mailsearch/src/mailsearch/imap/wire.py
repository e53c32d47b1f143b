"""Convert between SEARCH argument text and atoms.

What:
  :func:`tokenize` splits the argument part of a SEARCH command
  (``OR (SEEN) (FLAGGED) SUBJECT "hello world"``) into atoms, and
  :func:`serialize` renders atoms back into that text.

Why:
  The criteria engine works on atoms. The CLI, tests and clients that hold raw
  command text need a faithful bridge that understands quoting, literals and
  parenthesised groups.

How:
  A single left-to-right scan with an explicit stack of open groups. Quoted
  strings honour backslash escapes, ``{n}`` literals (and ``{n+}``) read the
  announced number of octets after the line break, and everything else up to
  whitespace or a parenthesis is a bare token. Serialisation quotes text that
  would not survive as a bare atom and switches to a literal for line breaks or
  non-ASCII text.

Interfaces:
  :func:`tokenize`, :func:`serialize`, :func:`serialize_criteria`.

Invariants & Safety:
  - Every leaf produced by :func:`tokenize` is a :class:`Text`; the wire has no
    numeric typing.
  - ``tokenize(serialize(atoms))`` has the same structure and text as ``atoms``
    once numbers are read back as their decimal text.
"""
from __future__ import annotations

import re
from typing import Iterable, List

from .atoms import Atom, AtomList, Number, Text
from .criteria import Criteria
from .errors import WireSyntaxError
from .formatter import format_criteria

_WHITESPACE = " \t\r\n"
_TOKEN_END = _WHITESPACE + "()"
_ATOM_SPECIALS = set('(){ %*"\\]')
_BARE_SEQUENCE = re.compile(r"[0-9*:,]+")
_LITERAL_HEADER = re.compile(r"\{([0-9]+)\+?\}")


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    chars = []
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            if index + 1 >= len(text):
                break
            chars.append(text[index + 1])
            index += 2
            continue
        if char == '"':
            return "".join(chars), index + 1
        chars.append(char)
        index += 1
    raise WireSyntaxError(f"unterminated quoted string at offset {start}")


def _read_literal(text: str, start: int) -> tuple[str, int]:
    match = _LITERAL_HEADER.match(text, start)
    if match is None:
        raise WireSyntaxError(f"malformed literal at offset {start}")
    size = int(match.group(1))
    index = match.end()
    if text.startswith("\r\n", index):
        index += 2
    elif text.startswith("\n", index):
        index += 1
    else:
        raise WireSyntaxError(f"literal at offset {start} is not followed by a line break")
    chars = []
    consumed = 0
    while consumed < size and index < len(text):
        char = text[index]
        consumed += len(char.encode("utf-8"))
        chars.append(char)
        index += 1
    if consumed != size:
        raise WireSyntaxError(f"literal at offset {start} announces {size} octets, got {consumed}")
    return "".join(chars), index


def tokenize(text: str) -> List[Atom]:
    """Split SEARCH argument text into atoms.

    Args:
      text: Argument text, for example ``'1:5 NOT (SEEN) FROM "a b"'``.

    Returns:
      Top-level atoms; parenthesised groups become :class:`AtomList`.

    Raises:
      WireSyntaxError: On unbalanced parentheses, unterminated quotes or
        malformed literals.
    """

    stack: List[List[Atom]] = [[]]
    index = 0
    while index < len(text):
        char = text[index]
        if char in _WHITESPACE:
            index += 1
        elif char == "(":
            stack.append([])
            index += 1
        elif char == ")":
            if len(stack) == 1:
                raise WireSyntaxError(f"unbalanced ')' at offset {index}")
            group = stack.pop()
            stack[-1].append(AtomList(tuple(group)))
            index += 1
        elif char == '"':
            value, index = _read_quoted(text, index)
            stack[-1].append(Text(value))
        elif char == "{":
            value, index = _read_literal(text, index)
            stack[-1].append(Text(value))
        else:
            end = index
            while end < len(text) and text[end] not in _TOKEN_END:
                end += 1
            stack[-1].append(Text(text[index:end]))
            index = end
    if len(stack) != 1:
        raise WireSyntaxError("unbalanced '(' in search criteria")
    return stack[0]


def _needs_literal(value: str) -> bool:
    return any(char in "\r\n" or ord(char) > 0x7E for char in value)


def _needs_quote(value: str) -> bool:
    if not value:
        return True
    if _BARE_SEQUENCE.fullmatch(value):
        return False
    return any(char in _ATOM_SPECIALS or ord(char) <= 0x20 for char in value)


def _quote(value: str) -> str:
    return '"%s"' % (value.replace("\\", "\\\\").replace('"', '\\"'),)


def _render(atom: Atom) -> str:
    if isinstance(atom, AtomList):
        return "(" + serialize(atom.items) + ")"
    if isinstance(atom, Number):
        return str(atom.value)
    value = atom.value
    if _needs_literal(value):
        return "{%d}\r\n%s" % (len(value.encode("utf-8")), value)
    if _needs_quote(value):
        return _quote(value)
    return value


def serialize(atoms: Iterable[Atom]) -> str:
    """Render atoms as SEARCH argument text separated by single spaces."""

    return " ".join(_render(atom) for atom in atoms)


def serialize_criteria(criteria: Criteria) -> str:
    """Render ``criteria`` as wire text, using ``ALL`` for an empty tree."""

    atoms = format_criteria(criteria)
    if not atoms:
        return "ALL"
    return serialize(atoms)
