from __future__ import annotations

import re
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.services.release.errors import ChangelogMismatch

# "## Release 3.0.0", "# Release v3.0.0-rc1", "Release 2.1.4"; not "# Release Notes"
_ENTRY_RE = re.compile(r"^\s*#*\s*Release\s+(v?\d\S*)")


def latest_entry_version(text: str) -> str | None:
    """Version token of the most recent (first) change-log entry."""
    for line in text.splitlines():
        m = _ENTRY_RE.match(line)
        if m is not None:
            return m.group(1)
    return None


def check_changelog(path: Path, version: str) -> Result[None, ChangelogMismatch]:
    """The newest change-log entry must name ``version`` exactly.

    A missing or unreadable change-log is a mismatch too.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return Err(ChangelogMismatch(path=path, expected=version, found=None))

    found = latest_entry_version(text)
    if found != version:
        return Err(ChangelogMismatch(path=path, expected=version, found=found))
    return Ok(None)
