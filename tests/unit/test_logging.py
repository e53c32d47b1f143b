"""
Module: tests/unit/test_logging.py

What:
    Check the JSON log schema and redaction of search values.

Why:
    Criteria trees carry addresses and subjects; logs must show their shape
    without their content.
"""

import io
import json

from mailsearch.config.schema import SearchSettings
from mailsearch.imap.parser import parse_criteria
from mailsearch.utils.logging import REDACTED, JsonLogger


def test_log_line_schema():
    stream = io.StringIO()
    JsonLogger(stream=stream, component="unit").info("hello", count=2)
    entry = json.loads(stream.getvalue())
    assert entry["lvl"] == "INFO"
    assert entry["msg"] == "hello"
    assert entry["component"] == "unit"
    assert entry["count"] == 2
    assert "ts" in entry


def test_nested_criteria_values_are_redacted():
    stream = io.StringIO()
    criteria = parse_criteria(["OR", ["FROM", "alice"], ["HEADER", "X-Spam", "yes"], "SEEN"])
    JsonLogger(stream=stream).warning("query", criteria=criteria.to_dict())
    entry = json.loads(stream.getvalue())
    assert entry["lvl"] == "WARN"
    assert entry["criteria"] == {
        "or": [{"from": REDACTED}, {"header": REDACTED}],
        "seen": True,
    }


def test_parser_logs_skipped_dates():
    stream = io.StringIO()
    logger = JsonLogger(stream=stream, component="parser")
    parse_criteria(["ON", "someday"], settings=SearchSettings(date_policy="lenient"), logger=logger)
    entry = json.loads(stream.getvalue())
    assert entry["msg"] == "search_date_unparsed"
    assert entry["search_key"] == "ON"
