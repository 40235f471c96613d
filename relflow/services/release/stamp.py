"""Version stamping of build inputs inside the build directory.

- The executable's embedded version string is rewritten through a two-group
  regular expression (text before the literal, text after it).
- Manifest templates stop referring to floating ``:latest`` images and lose
  any "always pull" policy, so the deployed artifact is pinned.
"""

from __future__ import annotations

import re
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.files import atomic_write_text
from relflow.services.release.errors import StampFailed

_LATEST_IMAGE_RE = re.compile(r"^(\s*-?\s*image:\s*[\"']?[^\s\"']+):latest(?=[\s\"'#]|$)", re.MULTILINE)
_ALWAYS_PULL_RE = re.compile(
    r"^[ \t]*(?:imagePullPolicy|pull_policy):[ \t]*[\"']?[Aa]lways[\"']?[ \t]*(?:\r?\n|$)",
    re.MULTILINE,
)


def stamp_version_text(text: str, *, pattern: str, version: str) -> str | None:
    """Replace the first version literal matched by ``pattern``.

    Returns None if the pattern does not occur.
    """
    compiled = re.compile(pattern)
    if compiled.search(text) is None:
        return None
    return compiled.sub(lambda m: f"{m.group(1)}{version}{m.group(2)}", text, count=1)


def stamp_manifest_text(text: str, *, version: str) -> str:
    pinned = _LATEST_IMAGE_RE.sub(lambda m: f"{m.group(1)}:{version}", text)
    return _ALWAYS_PULL_RE.sub("", pinned)


def stamp_version_file(path: Path, *, pattern: str, version: str) -> Result[None, StampFailed]:
    text = _read(path)
    if isinstance(text, Err):
        return text

    stamped = stamp_version_text(text.value, pattern=pattern, version=version)
    if stamped is None:
        return Err(StampFailed(path=path, reason=f"no match for pattern {pattern!r}"))
    return _write(path, stamped)


def stamp_manifest(path: Path, *, version: str) -> Result[None, StampFailed]:
    text = _read(path)
    if isinstance(text, Err):
        return text
    return _write(path, stamp_manifest_text(text.value, version=version))


def _read(path: Path) -> Result[str, StampFailed]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(StampFailed(path=path, reason="file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(StampFailed(path=path, reason=str(e)))


def _write(path: Path, content: str) -> Result[None, StampFailed]:
    try:
        atomic_write_text(path, content)
    except OSError as e:
        return Err(StampFailed(path=path, reason=str(e)))
    return Ok(None)
