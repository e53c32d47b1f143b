"""
Module: mailsearch.__init__

What:
  Package root for the IMAP SEARCH criteria codec: a parser from SEARCH
  argument atoms to a typed filter tree, the inverse formatter, and the thin
  configuration, logging, client and CLI layers around them.

Why:
  Servers interpret client SEARCH requests with it and clients build requests
  programmatically; both sides share one grammar so queries round-trip.

Interfaces:
  - config: Configuration schema and cached loader.
  - imap: Criteria tree, parser, formatter, atoms and wire helpers.
  - utils: Structured logging.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "imap",
    "utils",
]
