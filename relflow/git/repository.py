"""Git repository abstraction.

``Repository`` answers the questions the release workflow asks about tag
topology (which tags sit on HEAD, which commit and tag object a tag names)
and makes the isolated per-tag checkout. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.tags_at("HEAD"):
        case Ok(tags):
            print(", ".join(tags))
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_CLONE_TIMEOUT_SECONDS = 10 * 60.0

__all__ = [
    "GitError",
    "Repository",
    "find_repo_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )


def find_repo_root(cwd: Path) -> Result[Path, GitError]:
    """Return the top-level directory of the repository containing ``cwd``."""
    result = run_process(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=cwd,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    match result:
        case Err(e):
            return Err(_git_error("rev-parse --show-toplevel", e, "not a git repository"))
        case Ok(stdout):
            return Ok(Path(stdout.strip()))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def tags_at(self, rev: str = "HEAD") -> Result[tuple[str, ...], GitError]:
        """List annotated tags whose target commit is ``rev``.

        Lightweight tags are ignored: a release tag is always annotated.

        Returns:
            Ok(tag names, sorted) on success
            Err(GitError) on failure
        """
        result = self._run(
            [
                "for-each-ref",
                f"--points-at={rev}",
                "--format=%(objecttype) %(refname:strip=2)",
                "refs/tags",
            ]
        )
        match result:
            case Err(e):
                return Err(_git_error("for-each-ref", e, "failed to list tags"))
            case Ok(stdout):
                return Ok(self._parse_annotated(stdout))

    def commit_of(self, tag: str) -> Result[str | None, GitError]:
        """Resolve a tag to the commit it points at.

        Returns:
            Ok(commit id), Ok(None) if the tag does not exist locally,
            Err(GitError) on failure
        """
        return self._verify_ref(f"refs/tags/{tag}^{{commit}}")

    def tag_object_of(self, tag: str) -> Result[str | None, GitError]:
        """Resolve a tag to its own object id (the tag object of an annotated tag).

        Returns:
            Ok(object id), Ok(None) if the tag does not exist locally,
            Err(GitError) on failure
        """
        return self._verify_ref(f"refs/tags/{tag}")

    def clone_tag(self, tag: str, dest: Path) -> Result[None, GitError]:
        """Clone this repository into ``dest`` with only ``tag`` checked out."""
        result = run_process(
            [
                "git",
                "-c",
                "advice.detachedHead=false",
                "clone",
                "--quiet",
                "--single-branch",
                "--branch",
                tag,
                str(self.path),
                str(dest),
            ],
            cwd=self.path,
            timeout=_GIT_CLONE_TIMEOUT_SECONDS,
        )
        match result:
            case Err(e):
                return Err(_git_error("clone", e, f"failed to clone {tag}"))
            case Ok(_):
                return Ok(None)

    def _verify_ref(self, ref: str) -> Result[str | None, GitError]:
        result = self._run(["rev-parse", "--verify", "--quiet", ref])
        match result:
            case Err(e):
                # --quiet: an unknown ref exits 1 without printing anything.
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(None)
                return Err(_git_error("rev-parse", e, f"failed to resolve {ref}"))
            case Ok(stdout):
                return Ok(stdout.strip() or None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _parse_annotated(self, output: str) -> tuple[str, ...]:
        """Parse ``<objecttype> <name>`` lines, keeping annotated tags."""
        names: list[str] = []
        for line in output.splitlines():
            kind, _, name = line.strip().partition(" ")
            if kind == "tag" and name:
                names.append(name)
        return tuple(sorted(names))
