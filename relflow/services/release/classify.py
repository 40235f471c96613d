"""Release classification: tag name -> ReleaseKind and downstream version string.

Rules are evaluated top to bottom and the first matching predicate wins;
anything no rule claims is a prerelease.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from relflow.services.release.model import ReleaseKind

_MAINLINE_RE = re.compile(r"v[0-9]+\.[0-9]+\.0+")
_BRANCH_RE = re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+")

Rule = tuple[Callable[[str], bool], ReleaseKind]


def _is_mainline(tag: str) -> bool:
    return _MAINLINE_RE.fullmatch(tag) is not None


def _is_branch(tag: str) -> bool:
    return _BRANCH_RE.fullmatch(tag) is not None


RULES: tuple[Rule, ...] = (
    (_is_mainline, ReleaseKind.MAINLINE),
    (_is_branch, ReleaseKind.BRANCH),
)


def classify(tag: str, rules: tuple[Rule, ...] = RULES) -> ReleaseKind:
    for matches, kind in rules:
        if matches(tag):
            return kind
    return ReleaseKind.PRERELEASE


def normalize_version(tag: str, kind: ReleaseKind) -> str:
    """Version string used for file names, images and the version stamp.

    Numeric releases drop the leading ``v``; prereleases keep the tag verbatim.
    """
    if kind is ReleaseKind.PRERELEASE:
        return tag
    return tag.removeprefix("v")
