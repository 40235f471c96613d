"""Git operations module.

Usage:
    from relflow.git import Repository

    repo = Repository(Path("/path/to/repo"))
    tags = repo.tags_at("HEAD")
"""

from relflow.git.repository import GitError, Repository, find_repo_root

__all__ = [
    "GitError",
    "Repository",
    "find_repo_root",
]
