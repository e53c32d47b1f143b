"""End-to-end tests running the CLI as operators do.

What:
  Launch ``python -m mailsearch.cli`` in a subprocess and check the ``parse``,
  ``normalize`` and ``check`` commands.

Why:
  Confirms entry-point wiring, configuration discovery through the environment
  and exit codes, beyond what unit tests cover.

How:
  Point ``PYTHONPATH`` at the in-repo source tree, run commands and assert on
  return codes, stdout and stderr.

Invariants & Safety:
  - Commands run against the local source tree and need no network access.
"""

import json
import os
import pathlib
import subprocess
import sys


PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Execute the mailsearch CLI with ``args`` and capture its output."""

    cmd = [sys.executable, "-m", "mailsearch.cli", *args]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        [str(PROJECT_ROOT / "mailsearch" / "src"), env.get("PYTHONPATH", "")]
    )
    return subprocess.run(cmd, text=True, capture_output=True, cwd=PROJECT_ROOT, env=env)


def test_cli_parse_prints_tree() -> None:
    result = _run_cli("parse", "OR (SEEN) (FLAGGED) 1:5")
    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {
        "or": [{"seen": True}, {"flagged": True}],
        "seq_set": "1:5",
    }


def test_cli_normalize() -> None:
    """Verify ``normalize`` prints the canonical spelling.

    What:
      Lower-case keywords and non-canonical order are rewritten.

    Why:
      Operators compare client queries against the canonical form when
      debugging mismatched results.
    """

    result = _run_cli("normalize", 'unseen from "Alice Smith" 7:3')
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == '3:7 FROM "Alice Smith" UNSEEN'


def test_cli_check_rejects_missing_argument() -> None:
    result = _run_cli("check", "SEEN BCC")
    assert result.returncode == 1
    assert "BCC requires 1 argument" in result.stderr


def test_cli_check_lenient_dates() -> None:
    strict = _run_cli("check", "SINCE yesterday")
    assert strict.returncode == 1
    lenient = _run_cli("check", "--lenient-dates", "SINCE yesterday")
    assert lenient.returncode == 0, lenient.stderr
    assert "skipped dates: SINCE" in lenient.stdout


def test_cli_max_depth_override() -> None:
    result = _run_cli("check", "--max-depth", "1", "NOT (NOT (SEEN))")
    assert result.returncode == 1
    assert "maximum depth" in result.stderr


def test_cli_rejects_unbounded_max_depth() -> None:
    result = _run_cli("check", "--max-depth", "5000", "SEEN")
    assert result.returncode == 1
    assert "--max-depth must be between 1 and 200" in result.stderr


def test_cli_missing_config(tmp_path: pathlib.Path) -> None:
    result = _run_cli("parse", "--config", str(tmp_path / "absent.yaml"), "SEEN")
    assert result.returncode == 1
    assert "Configuration file missing" in result.stderr
