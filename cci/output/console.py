"""Console output abstraction.

Pipeline services report progress through ``ConsoleProtocol`` instead of
printing directly. CI logs get rich styling from ``RichConsole``; tests use
``MockConsole`` to assert on what would have been shown.

Errors go to stderr, everything else to stdout, so a CI runner's log
keeps the failure message even when stdout is folded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    DIM = auto()  # echoed commands, hints
    STEP = auto()  # "--- <step>" banners

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Output sink for pipeline progress and errors."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def step(self, message: str) -> None:
        """Announce a pipeline step (``--- message``)."""
        ...

    def command(self, display: str) -> None:
        """Echo an external command before it runs."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...


class RichConsole:
    """Production console backed by rich."""

    def __init__(self) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.DIM: "dim",
            Style.STEP: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        console = self._err if style == Style.ERROR else self._out
        rich_style = self._style_map.get(style, "")
        # markup=False: messages carry raw tool output, brackets included.
        if rich_style:
            console.print(message, style=rich_style, markup=False)
        else:
            console.print(message, markup=False)

    def step(self, message: str) -> None:
        self.print(f"--- {message}", Style.STEP)

    def command(self, display: str) -> None:
        self.print(f"$ {display}", Style.DIM)

    def success(self, message: str) -> None:
        self._out.print("[green]OK[/green]", end=" ")
        self._out.print(message, markup=False)

    def error(self, message: str) -> None:
        self._err.print("[red bold]error:[/red bold]", end=" ")
        self._err.print(message, markup=False)

    def warning(self, message: str) -> None:
        self._out.print("[yellow]warning:[/yellow]", end=" ")
        self._out.print(message, markup=False)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that records output for tests."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def step(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"--- {message}", Style.STEP))

    def command(self, display: str) -> None:
        self.outputs.append(OutputRecord(f"$ {display}", Style.DIM))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """All outputs containing ``substring``."""
        return [o for o in self.outputs if substring in o.message]
