"""mailsearch configuration package.

What:
  Provide the import surface for loading and validating ``mailsearch.yaml``.

Why:
  Callers should go through the schema types and the cached loader rather than
  reading YAML themselves, so every consumer sees the same validated settings.

Interfaces:
  - load_search_config / get_search_config / reset_search_config: cached loader.
  - SearchConfig / SearchSettings / ImapSettings: Pydantic models.
  - ConfigLoadError / SearchConfigError: loader failures.
"""

from .loader import (
    ConfigLoadError,
    SearchConfigError,
    get_search_config,
    load_search_config,
    reset_search_config,
)
from .schema import ImapSettings, SearchConfig, SearchSettings

__all__ = [
    "load_search_config",
    "get_search_config",
    "reset_search_config",
    "ConfigLoadError",
    "SearchConfigError",
    "SearchConfig",
    "SearchSettings",
    "ImapSettings",
]
