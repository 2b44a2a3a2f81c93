"""Console output abstraction.

Pipelines report progress through ``ConsoleProtocol`` so that they can be
driven by the rich-backed console in production and by ``MockConsole`` in
tests. Every line carries the pipeline purpose (``install``/``release``):

    --> install: Downloading via curl: https://...
    xxx install: curl failed to download file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for pipeline output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a raw line with optional styling."""
        ...

    def log(self, message: str) -> None:
        """Print a ``--> purpose:`` progress line to stdout."""
        ...

    def warn(self, message: str) -> None:
        """Print a ``xxx purpose:`` warning line to stderr."""
        ...

    def success(self, message: str) -> None:
        """Print a progress line marking successful completion."""
        ...


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self, purpose: str = "info") -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self.purpose = purpose
        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        self._out.print(message, style=rich_style or None, markup=False)

    def log(self, message: str) -> None:
        from rich.text import Text

        self._out.print(Text.assemble(("-->", "cyan"), f" {self.purpose}: {message}"))

    def warn(self, message: str) -> None:
        from rich.text import Text

        self._err.print(Text.assemble(("xxx", "yellow bold"), f" {self.purpose}: {message}"))

    def success(self, message: str) -> None:
        from rich.text import Text

        self._out.print(Text.assemble(("-->", "green"), f" {self.purpose}: {message}"))


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    purpose: str = "info"
    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def log(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"--> {self.purpose}: {message}", Style.INFO))

    def warn(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"xxx {self.purpose}: {message}", Style.WARNING))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"--> {self.purpose}: {message}", Style.SUCCESS))

    # Test helper methods

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def has_success(self) -> bool:
        return any(o.style == Style.SUCCESS for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
