"""Console output for the release phases.

Services report through ``ConsoleProtocol`` and never touch Rich directly.
``RichConsole`` writes ``error:``/``warning:`` lines to stderr and everything
else to stdout; ``MockConsole`` records output for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()  # passed check
    ERROR = auto()
    WARNING = auto()
    DIM = auto()  # echoed commands, hints
    HEADER = auto()  # phase header

    def __str__(self) -> str:
        return self.name.lower()


# Label printed in front of one-line status messages.
_LABELS = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
}

_RICH_STYLES = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}

_STDERR_STYLES = frozenset({Style.ERROR, Style.WARNING})


class ConsoleProtocol(Protocol):
    """Styled, line-oriented output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None:
        """One ``OK`` line per passed check."""
        ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def header(self, message: str) -> None:
        """Announce a phase and the release it operates on."""
        ...


class RichConsole:
    """Production console backed by two Rich consoles (stdout, stderr)."""

    def __init__(self) -> None:
        # Lazy: `relflow --version` never loads Rich.
        from rich.console import Console

        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)

    def _target(self, style: Style) -> Console:
        return self._err if style in _STDERR_STYLES else self._out

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._target(style).print(message, style=_RICH_STYLES[style] or None, markup=False)

    def _labelled(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text.assemble((_LABELS[style], _RICH_STYLES[style]), " ", message)
        self._target(style).print(line)

    def success(self, message: str) -> None:
        self._labelled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._labelled(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._labelled(Style.WARNING, message)

    def header(self, message: str) -> None:
        self._out.print()
        self.print(message, Style.HEADER)


@dataclass
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Records every line instead of printing it.

    Labelled lines keep their label (``"OK stamped version 3.0.0"``,
    ``"error: tag v3.0.0 is not on the remote"``) so tests assert on what the
    operator would read.
    """

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def _labelled(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{_LABELS[style]} {message}", style))

    def success(self, message: str) -> None:
        self._labelled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._labelled(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._labelled(Style.WARNING, message)

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    # Assertion helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains ``substring``."""
        return [o for o in self.outputs if substring in o.message]
