"""Locate, parse and cache the mailsearch configuration file.

What:
  Resolve ``mailsearch.yaml`` from an explicit path, the
  ``MAILSEARCH_CONFIG_PATH`` environment variable or well-known defaults,
  validate it against :class:`~mailsearch.config.schema.SearchConfig` and cache
  the result.

Why:
  Parser limits (maximum nesting depth, date policy) and client connection
  defaults are shared by the CLI, the IMAP client and library callers. A single
  cached loader keeps them consistent and turns malformed files into one typed
  exception.

How:
  Walk the candidate paths in precedence order, parse the first existing file
  with PyYAML, validate it with Pydantic and memoise ``(path, config)``. When no
  file exists and the caller did not ask for a specific one, fall back to the
  model defaults so the codec works without any configuration.

Interfaces:
  :func:`load_search_config`, :func:`get_search_config`,
  :func:`reset_search_config`, :class:`ConfigLoadError`,
  :class:`SearchConfigError`.

Invariants & Safety:
  - Every returned configuration passed strict (``extra="forbid"``) validation.
  - An explicitly requested path that does not exist is always an error.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from .schema import SearchConfig


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class SearchConfigError(ConfigLoadError):
    """Error raised when ``mailsearch.yaml`` cannot be loaded or validated.

    What:
      Signal problems with the configuration file itself: missing explicit
      path, unreadable file, invalid YAML or schema violations.

    Why:
      Lets the CLI print a targeted message and exit non-zero without masking
      SEARCH parse errors, which belong to a different hierarchy.
    """


_CONFIG_ENV = "MAILSEARCH_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("mailsearch.yaml"),
    Path("/etc/mailsearch/config.yaml"),
)
_CONFIG_CACHE: Optional[Tuple[Optional[Path], SearchConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order, without duplicates."""

    seen: set[Path] = set()
    candidates = []
    if path is not None:
        candidates.append(path)
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(_DEFAULT_LOCATIONS)
    for candidate in candidates:
        candidate = candidate.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _parse_config_payload(text: str, source: Path) -> dict[str, Any]:
    """Parse configuration text into a mapping.

    Raises:
      SearchConfigError: If the YAML is malformed or not a mapping.
    """

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise SearchConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SearchConfigError(f"{source} must contain a mapping at the top-level")
    return payload


def _load_config_from_path(path: Path) -> SearchConfig:
    """Read and validate the configuration stored at ``path``."""

    try:
        text = path.read_text()
    except FileNotFoundError as exc:
        raise SearchConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise SearchConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    payload = _parse_config_payload(text, path)
    try:
        return SearchConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise SearchConfigError(f"Invalid configuration in {path}: {exc}") from exc


def load_search_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
) -> SearchConfig:
    """Resolve, parse and cache the search configuration.

    What:
      Return the validated :class:`SearchConfig` from the first existing
      candidate path, or the defaults when none exists.

    Why:
      Callers across the package need the same settings; caching avoids
      re-reading the file for every SEARCH command, while ``reload`` supports
      tests and configuration changes.

    How:
      Serve the cache unless ``reload`` is set or a different path is
      requested, then walk :func:`_candidate_paths`. An explicit ``path`` that
      does not exist raises instead of silently falling back.

    Args:
      path: Optional explicit location of the configuration file.
      reload: When ``True`` bypass the cache.

    Returns:
      The validated configuration.

    Raises:
      SearchConfigError: If the explicit path is missing or a file is invalid.
    """

    global _CONFIG_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _CONFIG_CACHE is not None:
        cached_path, cached_config = _CONFIG_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    if requested_path is not None and not requested_path.exists():
        raise SearchConfigError(f"Configuration file missing: {requested_path}")

    for candidate in _candidate_paths(requested_path):
        if not candidate.exists():
            continue
        config = _load_config_from_path(candidate)
        _CONFIG_CACHE = (candidate, config)
        return config

    config = SearchConfig()
    _CONFIG_CACHE = (None, config)
    return config


def get_search_config() -> SearchConfig:
    """Return the cached configuration, loading it on demand."""

    return load_search_config()


def reset_search_config() -> None:
    """Clear the configuration cache so the next access reloads from disk."""

    global _CONFIG_CACHE
    _CONFIG_CACHE = None
