"""Wire-level atoms and a bounds-checked cursor over them.

What:
  Model the values a SEARCH argument list is made of as a closed union of
  :class:`Text`, :class:`Number` and :class:`AtomList`, and provide
  :class:`AtomCursor` for consuming them left to right.

Why:
  The parser decides how many atoms a keyword consumes and what shape each
  argument must have. Tagged atoms let every branch check the shape explicitly
  and fail with :class:`~mailsearch.imap.errors.TypeMismatch`, and the cursor
  validates arity before anything is consumed so a truncated command never
  turns into an out-of-range access.

How:
  Frozen dataclasses hold the payloads. :func:`to_atoms` lifts plain Python
  values (the shape ``imapclient`` and most IMAP parsers produce) and
  :func:`from_atoms` lowers them again. :func:`parse_unsigned` is the shared
  helper for numeric arguments.

Interfaces:
  :class:`Text`, :class:`Number`, :class:`AtomList`, :data:`Atom`,
  :func:`to_atom`, :func:`to_atoms`, :func:`from_atoms`,
  :func:`parse_unsigned`, :class:`AtomCursor`.

Invariants & Safety:
  - ``Number`` values are unsigned 32-bit integers.
  - ``bool`` is never accepted as a number, even though it subclasses ``int``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import InvalidNumber, MissingArgument, TypeMismatch
from .seqset import SequenceSet

MAX_UINT32 = 2**32 - 1


@dataclass(frozen=True)
class Text:
    """Text token: an IMAP atom, quoted string or literal."""

    value: str


@dataclass(frozen=True)
class Number:
    """Non-negative numeric token."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeMismatch(f"number atom requires an int, got {type(self.value).__name__}")
        if not 0 <= self.value <= MAX_UINT32:
            raise InvalidNumber(f"number atom out of range: {self.value}")


@dataclass(frozen=True)
class AtomList:
    """Parenthesised sub-sequence of atoms."""

    items: Tuple["Atom", ...] = ()

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


Atom = Union[Text, Number, AtomList]


def describe(atom: Atom) -> str:
    """Return a short shape name used in error messages."""

    if isinstance(atom, Text):
        return "text"
    if isinstance(atom, Number):
        return "number"
    return "list"


def _to_leaf(value: Any) -> Atom:
    if isinstance(value, (Text, Number, AtomList)):
        return value
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, bytes):
        try:
            return Text(value.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise TypeMismatch(f"bytes atom is not valid UTF-8: {exc.reason}") from exc
    if isinstance(value, SequenceSet):
        return Text(str(value))
    if isinstance(value, bool):
        raise TypeMismatch("boolean values are not valid atoms")
    if isinstance(value, int):
        return Number(value)
    raise TypeMismatch(f"cannot convert {type(value).__name__} to an atom")


def to_atom(value: Any) -> Atom:
    """Lift a plain Python value into an :data:`Atom`.

    What:
      Accepts existing atoms, ``str``, ``bytes`` (decoded as UTF-8), ``int``,
      :class:`~mailsearch.imap.seqset.SequenceSet` and nested lists or tuples.

    Why:
      Callers often hold the loosely typed lists produced by generic IMAP
      parsers. Converting once at the boundary keeps the parser strictly typed.

    How:
      Nested lists are walked with an explicit stack rather than recursion, so
      arbitrarily deep input reaches the parser, whose depth limit rejects it
      with :class:`~mailsearch.imap.errors.NestingTooDeep`.

    Raises:
      TypeMismatch: For any other type, including ``bool``, ``None`` and
        ``bytes`` that are not valid UTF-8.
    """

    if not isinstance(value, (list, tuple)):
        return _to_leaf(value)
    root: List[Atom] = []
    stack: List[Tuple[Iterator[Any], List[Atom]]] = [(iter(value), root)]
    while stack:
        items, converted = stack[-1]
        for item in items:
            if isinstance(item, (list, tuple)):
                stack.append((iter(item), []))
                break
            converted.append(_to_leaf(item))
        else:
            stack.pop()
            if stack:
                stack[-1][1].append(AtomList(tuple(converted)))
    return AtomList(tuple(root))


def to_atoms(values: Iterable[Any]) -> List[Atom]:
    """Lift every element of ``values``; see :func:`to_atom`."""

    if isinstance(values, AtomList):
        return list(values.items)
    return [to_atom(value) for value in values]


def from_atoms(atoms: Iterable[Atom]) -> List[Any]:
    """Lower atoms to ``str``, ``int`` and nested ``list`` values."""

    result: List[Any] = []
    for atom in atoms:
        if isinstance(atom, AtomList):
            result.append(from_atoms(atom.items))
        else:
            result.append(atom.value)
    return result


def parse_unsigned(
    atom: Atom,
    *,
    keyword: Optional[str] = None,
    position: Optional[int] = None,
) -> int:
    """Interpret ``atom`` as an unsigned 32-bit integer.

    Args:
      atom: A :class:`Number`, or a :class:`Text` made of ASCII digits.
      keyword: Keyword being parsed, for error context.
      position: Cursor index of ``atom``, for error context.

    Returns:
      The integer value.

    Raises:
      TypeMismatch: If ``atom`` is a list.
      InvalidNumber: If the text is not a decimal number or exceeds 2**32 - 1.
    """

    if isinstance(atom, Number):
        return atom.value
    if not isinstance(atom, Text):
        raise TypeMismatch(
            f"expected a number, got {describe(atom)}", keyword=keyword, position=position
        )
    text = atom.value
    if not (text.isascii() and text.isdigit()):
        raise InvalidNumber(f"invalid number {text!r}", keyword=keyword, position=position)
    value = int(text)
    if value > MAX_UINT32:
        raise InvalidNumber(f"number out of range {text!r}", keyword=keyword, position=position)
    return value


class AtomCursor:
    """Left-to-right reader over a sequence of atoms.

    What:
      Tracks the current index and hands out atoms one at a time, checking that
      enough remain and that each has the shape the caller expects.

    Why:
      Keywords consume a fixed number of arguments. Validating the count up
      front turns a truncated command into :class:`MissingArgument` instead of
      an ``IndexError`` halfway through an assignment.

    How:
      :meth:`require` compares the requested arity with :attr:`remaining`;
      the ``take_*`` helpers call it implicitly and check the atom type.
    """

    def __init__(self, atoms: Sequence[Atom]):
        self._atoms: Tuple[Atom, ...] = tuple(atoms)
        self._index = 0

    @property
    def position(self) -> int:
        """Index of the next atom to be consumed, used in error context."""

        return self._index

    @property
    def remaining(self) -> int:
        """Number of atoms not yet consumed."""

        return len(self._atoms) - self._index

    @property
    def at_end(self) -> bool:
        return self._index >= len(self._atoms)

    def require(self, keyword: str, count: int) -> None:
        """Ensure ``count`` atoms remain for ``keyword``'s arguments.

        What:
          Checks arity without consuming anything.

        Why:
          Multi-argument keys (HEADER, OR) must fail before their first
          argument is taken, so the error position points at the keyword's
          arguments rather than somewhere in the middle.

        Raises:
          MissingArgument: If fewer than ``count`` atoms remain.
        """

        if self.remaining < count:
            raise MissingArgument(
                f"{keyword} requires {count} argument(s), {self.remaining} remaining",
                keyword=keyword,
                position=self._index,
            )

    def take(self, keyword: str) -> Atom:
        """Consume and return the next atom of any shape.

        Raises:
          MissingArgument: If the sequence is exhausted.
        """

        self.require(keyword, 1)
        atom = self._atoms[self._index]
        self._index += 1
        return atom

    def take_text(self, keyword: str) -> str:
        """Consume a :class:`Text` argument and return its string.

        What:
          Used by text, date and HEADER keys, which never accept numbers or
          lists.

        Raises:
          MissingArgument: If the sequence is exhausted.
          TypeMismatch: If the atom is a :class:`Number` or :class:`AtomList`.
        """

        position = self._index
        atom = self.take(keyword)
        if not isinstance(atom, Text):
            raise TypeMismatch(
                f"{keyword} expects text, got {describe(atom)}", keyword=keyword, position=position
            )
        return atom.value

    def take_number(self, keyword: str) -> int:
        """Consume an unsigned number given as :class:`Number` or digit text.

        Raises:
          MissingArgument: If the sequence is exhausted.
          TypeMismatch: If the atom is a list.
          InvalidNumber: If the text is not an unsigned 32-bit decimal.
        """

        position = self._index
        return parse_unsigned(self.take(keyword), keyword=keyword, position=position)

    def take_list(self, keyword: str) -> AtomList:
        """Consume a parenthesised :class:`AtomList` argument.

        What:
          NOT and OR operands must be groups; bare keys are rejected rather
          than silently wrapped.

        Raises:
          MissingArgument: If the sequence is exhausted.
          TypeMismatch: If the atom is not a list.
        """

        position = self._index
        atom = self.take(keyword)
        if not isinstance(atom, AtomList):
            raise TypeMismatch(
                f"{keyword} expects a parenthesised list, got {describe(atom)}",
                keyword=keyword,
                position=position,
            )
        return atom
