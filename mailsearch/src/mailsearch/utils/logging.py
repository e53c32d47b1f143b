"""mailsearch logging helpers with deterministic JSON emission and redaction.

What:
  Offer a tiny facade over Python streams so every mailsearch component can
  emit JSON log lines with consistent fields and automatic removal of search
  values.

Why:
  SEARCH arguments routinely contain addresses, subjects and body fragments.
  Operators still need to see which keys a query used and why a parse failed,
  so keys are logged while the user-supplied values are masked.

How:
  :class:`JsonLogger` builds a payload with ``ts``, ``lvl``, ``msg`` and
  ``component``, merges a recursively redacted copy of the ``extra`` mapping and
  writes it with :func:`json.dump`, flushing after every line.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :data:`SENSITIVE_KEYS`.

Invariants & Safety:
  - Values under :data:`SENSITIVE_KEYS` are replaced by ``[redacted]`` at any
    nesting depth, including inside lists of mappings.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"

SENSITIVE_KEYS = frozenset(
    {"subject", "body", "text", "bcc", "cc", "from", "to", "header", "keyword", "unkeyword", "password"}
)


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emits single-line JSON entries with a timestamp, severity, component tag
      and optional context fields.

    Why:
      Centralising structured logging avoids duplicating the redaction logic and
      gives tests a stable schema to assert on.

    How:
      Stores the destination stream and component label; :meth:`debug`,
      :meth:`info`, :meth:`warning` and :meth:`error` forward to :meth:`log`.
    """

    stream: Any = field(default_factory=lambda: sys.stdout)
    component: str = "mailsearch"

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit one structured JSON log entry.

        What:
          Serialises ``message`` and ``extra`` to the configured stream using
          the ``ts``/``lvl``/``msg``/``component`` schema.

        Why:
          Tests and log shippers parse these lines; a fixed schema spares them
          ad-hoc heuristics.

        How:
          Builds the core fields, merges a redacted copy of ``extra``, writes
          the JSON payload and flushes immediately.

        Args:
          level: Severity name, upper-cased on output.
          message: Event name such as ``"imap_search"``.
          extra: Optional context mapping, redacted recursively.
        """

        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a ``DEBUG`` entry; see :meth:`log` for the payload layout."""

        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an informational message with structured context.

        What:
          Convenience wrapper for :meth:`log` at ``INFO`` severity.

        Why:
          Keeps call sites terse while every field still passes through
          redaction.

        Args:
          message: Event name.
          **kwargs: Structured fields attached to the payload.
        """

        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a ``WARN`` entry while enforcing redaction.

        What:
          Used for recoverable anomalies such as skipped dates and rejected
          nesting.

        Why:
          Operators watch these to spot misbehaving clients without reading the
          raw query text.

        Args:
          message: Event name.
          **kwargs: Structured fields attached to the payload.
        """

        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an ``ERROR`` entry suitable for alerting.

        What:
          Emits a payload at ``ERROR`` severity through :meth:`log`.

        Why:
          Failures that abort an operation should be distinguishable from
          warnings in log filters.

        Args:
          message: Event name.
          **kwargs: Structured fields attached to the payload.
        """

        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive values masked.

        Walks nested dictionaries and lists so criteria trees rendered with
        :meth:`~mailsearch.imap.criteria.Criteria.to_dict` keep their shape
        while losing user content.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            else:
                result[key] = JsonLogger._redact_value(value)
        return result

    @staticmethod
    def _redact_value(value: Any) -> Any:
        if isinstance(value, dict):
            return JsonLogger._redact(value)
        if isinstance(value, list):
            return [JsonLogger._redact_value(item) for item in value]
        return value


def get_logger(component: str, stream: Any = None) -> JsonLogger:
    """Construct a :class:`JsonLogger` for ``component``.

    Args:
      component: Logical subsystem name included in every payload.
      stream: Optional destination; defaults to ``stderr`` so command output on
        ``stdout`` stays machine-readable.

    Returns:
      Configured :class:`JsonLogger` instance.
    """

    return JsonLogger(stream=stream if stream is not None else sys.stderr, component=component)
