from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# Diagnostics go to stderr so CLI output stays clean.
console = Console(stderr=True)


def warn(message: str, exc: BaseException | None = None) -> None:
    """Print a console-level diagnostic for a swallowed failure."""

    if exc is None:
        console.print(f"[yellow]{escape(message)}[/yellow]")
    else:
        console.print(f"[yellow]{escape(message)}:[/yellow] {escape(str(exc))}")
