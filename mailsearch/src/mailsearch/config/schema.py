"""Pydantic models describing mailsearch configuration documents."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# NOT/OR nesting is parsed recursively; stay well below the interpreter recursion limit.
MAX_NESTING_DEPTH = 200


class SearchSettings(BaseModel):
    """Parser limits and policies."""

    model_config = ConfigDict(extra="forbid")

    max_depth: int = Field(default=64, gt=0, le=MAX_NESTING_DEPTH)
    date_policy: Literal["strict", "lenient"] = "strict"
    charset: Optional[str] = None


class ImapSettings(BaseModel):
    """Connection defaults for the IMAP search client."""

    model_config = ConfigDict(extra="forbid")

    host: str
    port: int = Field(default=993, gt=0, lt=65536)
    ssl: bool = True
    username: str
    password: str
    mailbox: str = "INBOX"


class SearchConfig(BaseModel):
    """Root configuration loaded from ``mailsearch.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    search: SearchSettings = Field(default_factory=SearchSettings)
    imap: Optional[ImapSettings] = None
