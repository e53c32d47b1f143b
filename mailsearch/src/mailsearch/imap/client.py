"""IMAP client wrapper that speaks :class:`Criteria`.

What:
  Wrap the third-party ``imapclient`` library so callers can run SEARCH
  commands from a :class:`~mailsearch.imap.criteria.Criteria` tree or from raw
  SEARCH text.

Why:
  Building SEARCH arguments by hand is where quoting and ordering mistakes
  creep in. Routing every query through the codec guarantees the server sees
  canonical, parseable criteria, and centralises connection lifecycle and
  logging.

How:
  Connect and log in on :meth:`SearchClient.__enter__`, select the configured
  mailbox, and log out on exit. :meth:`SearchClient.search` lowers the tree with
  :func:`~mailsearch.imap.search.to_imapclient` and returns sorted UIDs.

Interfaces:
  :class:`SearchClient`.

Invariants & Safety:
  - Searches run in UID mode (``imapclient`` default).
  - Log entries carry the criteria shape with user values redacted.
"""
from __future__ import annotations

import contextlib
from typing import Iterator, List, Optional

from imapclient import IMAPClient

from ..config.loader import get_search_config
from ..config.schema import ImapSettings, SearchSettings
from ..utils.logging import JsonLogger, get_logger
from .criteria import Criteria
from .parser import parse_criteria
from .search import to_imapclient
from .wire import tokenize


class SearchClient:
    """Context manager running criteria-based searches over IMAP.

    What:
      Owns a single ``imapclient.IMAPClient`` connection and tracks the
      selected mailbox.

    Why:
      Keeps connection handling, mailbox selection and query translation in one
      place for scripts and the CLI.

    How:
      Lazily connects in :meth:`__enter__`; helper methods require an open
      connection and raise :class:`RuntimeError` otherwise.
    """

    def __init__(
        self,
        config: Optional[ImapSettings] = None,
        *,
        settings: Optional[SearchSettings] = None,
        logger: Optional[JsonLogger] = None,
    ):
        """Store connection parameters; no network activity happens here.

        Args:
          config: Connection settings; defaults to the ``imap`` section of the
            cached configuration.
          settings: Parser settings used by :meth:`search_text` and the search
            charset; defaults to the configuration's ``search`` section.
          logger: Structured logger; defaults to ``mailsearch.imap``.

        Raises:
          RuntimeError: If no connection settings are available.
        """

        loaded = get_search_config() if config is None or settings is None else None
        if config is None:
            config = loaded.imap
        if config is None:
            raise RuntimeError("IMAP connection settings not configured")
        self._config = config
        self._settings = settings if settings is not None else loaded.search
        self._logger = logger if logger is not None else get_logger("mailsearch.imap")
        self._client: Optional[IMAPClient] = None
        self._selected: Optional[str] = None
        self._readonly = True

    def __enter__(self) -> "SearchClient":
        self._client = IMAPClient(self._config.host, port=self._config.port, ssl=self._config.ssl)
        self._client.login(self._config.username, self._config.password)
        self.select(self._config.mailbox)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._client is None:
            return
        try:
            self._client.logout()
        finally:
            self._client = None
            self._selected = None
            self._readonly = True

    @property
    def client(self) -> IMAPClient:
        """Return the underlying ``IMAPClient``.

        Raises:
          RuntimeError: If accessed outside the context manager.
        """

        if self._client is None:
            raise RuntimeError("IMAP client not connected")
        return self._client

    @property
    def selected(self) -> Optional[str]:
        """Return the currently selected mailbox name.

        What:
          ``None`` before :meth:`__enter__` and after :meth:`__exit__`.

        Why:
          Search log entries and :meth:`session` need to know which mailbox a
          UID SEARCH ran against.
        """

        return self._selected

    @property
    def readonly(self) -> bool:
        """Return whether the current selection was opened read-only."""

        return self._readonly

    def select(self, mailbox: str, *, readonly: bool = True) -> None:
        """Select ``mailbox`` and remember its access mode.

        What:
          Issue ``SELECT`` (or ``EXAMINE`` when ``readonly``) through
          ``imapclient``.

        Why:
          Searches never modify messages, so selections default to read-only,
          but callers sharing the connection may need write access.

        How:
          Record both the mailbox and mode so :meth:`session` can restore them.
        """

        self.client.select_folder(mailbox, readonly=readonly)
        self._selected = mailbox
        self._readonly = readonly

    @contextlib.contextmanager
    def session(self, mailbox: str, *, readonly: bool = True) -> Iterator[str]:
        """Select ``mailbox`` temporarily, restoring the previous selection afterwards.

        The previous selection is re-opened with the access mode it had, so a
        writable selection stays writable after a read-only detour.
        """

        previous = self._selected
        previous_readonly = self._readonly
        self.select(mailbox, readonly=readonly)
        try:
            yield mailbox
        finally:
            if previous:
                self.select(previous, readonly=previous_readonly)

    def search(self, criteria: Criteria) -> List[int]:
        """Run a UID SEARCH for ``criteria`` in the selected mailbox.

        Args:
          criteria: Filter tree to evaluate server-side.

        Returns:
          Matching UIDs in ascending order (may be empty).
        """

        arguments = to_imapclient(criteria)
        uids = sorted(self.client.search(arguments, charset=self._settings.charset))
        self._logger.info(
            "imap_search",
            mailbox=self._selected,
            criteria=criteria.to_dict(),
            matches=len(uids),
        )
        return uids

    def search_text(self, text: str) -> List[int]:
        """Parse raw SEARCH argument text and run it; see :meth:`search`."""

        criteria = parse_criteria(tokenize(text), settings=self._settings, logger=self._logger)
        return self.search(criteria)
