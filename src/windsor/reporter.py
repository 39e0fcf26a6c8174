"""Console reporting for Windsor workflows."""

from __future__ import annotations

from rich.console import Console


class Reporter:
    """Thin wrapper around a rich console with status-prefixed lines."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def banner(self, title: str) -> None:
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def step(self, message: str) -> None:
        self.console.print(f"\n[cyan]→[/cyan] [bold]{message}[/bold]")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")
