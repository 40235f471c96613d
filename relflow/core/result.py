"""Result type for explicit error handling.

Every check of the release workflow can fail, and every failure has to reach
the operator with its own message and hint. Fallible functions therefore
return ``Ok(value)`` or ``Err(error)`` and the caller returns early:

    tags = vcs.tags_at("HEAD")
    if isinstance(tags, Err):
        return Err(GitFailed(command=tags.error.command, message=tags.error.message))
    use(tags.value)

or matches on both arms:

    match pick_release_tag(("v3.0.0",)):
        case Ok(tag):
            print(f"releasing {tag}")
        case Err(error):
            print(f"error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Never, TypeGuard, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Never:
        """Raise ValueError; only for tests and invariants already checked."""
        raise ValueError(f"called unwrap on Err: {self.error}")


Result = Ok[T] | Err[E]


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)
