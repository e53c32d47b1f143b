"""Message sequence-set value type used by SEARCH criteria.

What:
  Parse and format RFC 3501 ``sequence-set`` expressions such as ``1:3,7,9:*``
  into an immutable :class:`SequenceSet`.

Why:
  Both the message-selector key and the ``UID`` key of a SEARCH command carry
  sequence sets. Giving them a value type keeps the parser free of string
  handling and lets the formatter emit a canonical spelling.

How:
  Split on commas, parse each member as a single number or a ``low:high``
  range, map ``*`` to ``None`` ("largest in the mailbox") and store the ranges
  in input order. Ranges are normalised so the lower bound comes first, since
  ``4:2`` and ``2:4`` are equivalent.

Interfaces:
  :class:`SequenceSet`, :func:`parse_sequence_set`.

Invariants & Safety:
  - Numbers are non-zero unsigned 32-bit integers.
  - ``str(parse_sequence_set(text))`` re-parses to an equal value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidSequenceSet

MAX_SEQ_NUMBER = 2**32 - 1

SeqRange = Tuple[Optional[int], Optional[int]]


def _sort_key(bound: Optional[int]) -> int:
    return MAX_SEQ_NUMBER + 1 if bound is None else bound


@dataclass(frozen=True)
class SequenceSet:
    """Ordered collection of message number ranges.

    What:
      Each range is a ``(low, high)`` pair where ``None`` stands for ``*``.
      Single numbers are stored as ``(n, n)``.

    Why:
      The search engine evaluates membership lazily, once it knows the largest
      sequence number or UID of the selected mailbox.

    How:
      Frozen dataclass so instances can be shared safely between threads and
      compared field-wise.
    """

    ranges: Tuple[SeqRange, ...]

    def __post_init__(self) -> None:
        if not self.ranges:
            raise InvalidSequenceSet("sequence set must contain at least one range")

    def __str__(self) -> str:
        parts = []
        for low, high in self.ranges:
            low_text = "*" if low is None else str(low)
            if low == high:
                parts.append(low_text)
            else:
                parts.append(f"{low_text}:{'*' if high is None else high}")
        return ",".join(parts)

    def contains(self, value: int, *, largest: int) -> bool:
        """Return ``True`` when ``value`` falls in any range.

        ``largest`` is the value ``*`` resolves to in the current mailbox.
        """

        for low, high in self.ranges:
            lo = largest if low is None else low
            hi = largest if high is None else high
            if lo > hi:
                lo, hi = hi, lo
            if lo <= value <= hi:
                return True
        return False


def _parse_number(text: str, member: str) -> Optional[int]:
    if text == "*":
        return None
    if not (text.isascii() and text.isdigit()):
        raise InvalidSequenceSet(f"invalid sequence number {member!r}")
    value = int(text)
    if value == 0 or value > MAX_SEQ_NUMBER:
        raise InvalidSequenceSet(f"sequence number out of range {member!r}")
    return value


def parse_sequence_set(text: str) -> SequenceSet:
    """Parse ``text`` into a :class:`SequenceSet`.

    Args:
      text: Wire spelling such as ``"2,4:7,9,12:*"``.

    Returns:
      The parsed value.

    Raises:
      InvalidSequenceSet: If any member is empty, zero, non-numeric or larger
        than an unsigned 32-bit integer.
    """

    if not isinstance(text, str) or not text:
        raise InvalidSequenceSet(f"invalid sequence set {text!r}")
    ranges = []
    for member in text.split(","):
        if ":" in member:
            low_text, high_text = member.split(":", 1)
            low = _parse_number(low_text, member)
            high = _parse_number(high_text, member)
            if _sort_key(low) > _sort_key(high):
                low, high = high, low
            ranges.append((low, high))
        else:
            value = _parse_number(member, member)
            ranges.append((value, value))
    return SequenceSet(tuple(ranges))
