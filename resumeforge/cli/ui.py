"""Terminal output - banner, step headers, status lines and spinners."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .. import __version__

CORAL = "#D97757"
SECONDARY = "#5A5A58"
SUCCESS = "#4CAF50"
ERROR = "#E53935"

console = Console()


class TerminalUI:
    """Console reporter used by the pipeline."""

    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def banner(self) -> None:
        title = Text.assemble(("resumeforge ", f"bold {CORAL}"), (f"v{__version__}", SECONDARY))
        self.console.print()
        self.console.print(
            Panel(
                Text.assemble(title, "\n", ("AI-Powered Resume Builder CLI", SECONDARY), justify="center"),
                border_style=CORAL,
                expand=False,
                padding=(0, 6),
            )
        )
        self.console.print()

    def step(self, step: int, total: int, message: str) -> None:
        self.console.print(f"  [{CORAL}]\\[{step}/{total}][/] [bold]{message}[/]")

    def success(self, message: str) -> None:
        self.console.print(f"  ✓ {message}", style=SUCCESS, markup=False)

    def error(self, message: str, hint: Optional[str] = None) -> None:
        self.console.print(f"  ✗ {message}", style=ERROR, markup=False)
        if hint:
            self.console.print(f"\n💡 {hint}", style="dim", markup=False)

    def info(self, message: str) -> None:
        self.console.print(f"  ℹ {message}", style=SECONDARY, markup=False)

    def divider(self) -> None:
        self.console.print("  " + "─" * 43, style="dim")

    def blank(self) -> None:
        self.console.print()

    @contextmanager
    def spinner(self, text: str) -> Iterator[None]:
        with self.console.status(f"[{CORAL}]{text}[/]", spinner="dots"):
            yield
