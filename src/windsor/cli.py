"""Windsor command-line interface."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .backup import list_snapshots, load_manifest, restore
from .exceptions import OperationCancelled, RollbackError, WindsorError
from .models import Settings
from .reporter import Reporter
from .state import read_state
from .workflows import Workflow

app = typer.Typer(
    name="windsor",
    help="Windsor Project Constitution: documentation and rule scaffolding",
    add_completion=False,
)
projinit_app = typer.Typer(add_completion=False)
projorg_app = typer.Typer(add_completion=False)
install_app = typer.Typer(add_completion=False)

console = Console()

PATH_HELP = "Project directory (defaults to the current directory)"


def _get_version_string() -> str:
    """Get version string from package metadata or pyproject.toml."""
    try:
        return get_version("windsor-constitution")
    except PackageNotFoundError:
        pass

    # Development checkouts have no installed metadata
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text()
        match = re.search(r'version\s*=\s*["\']([^"\']+)["\']', content)
        if match:
            return f"{match.group(1)} (development)"

    return "unknown"


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"Windsor version {_get_version_string()}")
        raise typer.Exit


def _confirm(question: str, default: bool) -> bool:
    return typer.confirm(question, default=default)


def _workflow(template: Path | None = None) -> Workflow:
    return Workflow(
        Settings.from_env(),
        confirm=_confirm,
        reporter=Reporter(console),
        template_dir=template,
    )


def _execute(action: Callable[[], object]) -> None:
    """Run a pipeline and translate its outcome into an exit code."""
    try:
        action()
    except OperationCancelled as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(0) from e
    except (WindsorError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Windsor Project Constitution: documentation and rule scaffolding."""


def init(
    path: Path | None = typer.Argument(None, help=PATH_HELP),
) -> None:
    """Initialize a new project with the Windsor Constitution."""
    root = path or Path.cwd()

    def run() -> None:
        _workflow().init_project(root)
        console.print("\n[bold green]Project initialized successfully![/bold green]\n")
        console.print("[cyan]Next steps:[/cyan]")
        console.print(f"  1. cd {root.resolve()}")
        console.print("  2. Review INSTRUCTIONS.md")
        console.print("  3. Configure .cursor/rules/ for your project")
        console.print("  4. Start using @ references in Cursor")

    _execute(run)


def organize(
    path: Path | None = typer.Argument(None, help=PATH_HELP),
) -> None:
    """Add the Windsor Constitution to an existing project.

    A snapshot of the project is taken first, with a rollback.sh script
    that restores it.
    """
    root = path or Path.cwd()

    def run() -> None:
        record = _workflow().organize_project(root)
        console.print("\n[bold green]Project organized successfully![/bold green]\n")
        console.print(f"[cyan]Backup location:[/cyan] {record.backup_path}")
        console.print("[cyan]Next steps:[/cyan]")
        console.print("  1. Test your application")
        console.print("  2. If something broke, restore from backup")
        console.print("  3. Review INSTRUCTIONS.md")
        console.print("  4. Start using @ references in Cursor")

    _execute(run)


def install(
    path: Path | None = typer.Argument(None, help=PATH_HELP),
    template: Path | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Local template directory (skips the repository cache)",
        file_okay=False,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite template files that already exist",
    ),
) -> None:
    """Install the Windsor Constitution, detecting new or existing projects."""
    root = path or Path.cwd()

    def run() -> None:
        _workflow(template).install(root, force=force)
        console.print("\n[bold green]Installation complete![/bold green]\n")
        console.print("[bold]Next steps:[/bold]")
        console.print("  1. Review INSTRUCTIONS.md")
        console.print("  2. Configure .cursor/rules/ for your project")
        console.print("  3. Start using @ references in Cursor")
        console.print("  4. Read the guides: IDEA_GUIDE.md, BLUEPRINT_GUIDE.md, CURSOR.md")

    _execute(run)


app.command("init")(init)
app.command("organize")(organize)
app.command("install")(install)
projinit_app.command()(init)
projorg_app.command()(organize)
install_app.command()(install)


@app.command()
def rollback(
    path: Path | None = typer.Argument(None, help=PATH_HELP),
    backup: str | None = typer.Option(
        None,
        "--backup",
        "-b",
        help="Snapshot directory name (defaults to the most recent)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Restore a project from a snapshot in .windsor-backup/."""
    root = (path or Path.cwd()).resolve()

    def run() -> None:
        snapshots = list_snapshots(root)
        if backup is not None:
            snapshots = [s for s in snapshots if s.name == backup]
        if not snapshots:
            msg = f"No backup found in {root}"
            raise RollbackError(msg)

        snapshot = snapshots[-1]
        manifest = load_manifest(snapshot)
        console.print(f"Snapshot: {snapshot.name} ({manifest.items_backed_up} items)")
        if not yes and not typer.confirm("Overwrite project files from this backup?"):
            msg = "Rollback cancelled."
            raise OperationCancelled(msg)

        restored = restore(snapshot, root)
        console.print(f"[green]✓[/green] Rollback complete ({restored} items restored)")

    _execute(run)


@app.command()
def status(
    path: Path | None = typer.Argument(None, help=PATH_HELP),
) -> None:
    """Show the install record of a project."""
    root = path or Path.cwd()

    def run() -> None:
        record = read_state(root)
        table = Table(title="Windsor Install Record")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Version", record.version)
        table.add_row("Installed", record.installed)
        table.add_row("Project Type", record.project_type.value)
        table.add_row("Command", record.command)
        table.add_row("Backup", str(record.backup_path or "-"))
        enabled = [
            name
            for name, flag in record.structure.model_dump(by_alias=True).items()
            if flag
        ]
        table.add_row("Structure", ", ".join(enabled) or "-")
        console.print(table)

    _execute(run)


@app.command()
def version() -> None:
    """Show Windsor version information."""
    console.print(f"Windsor version {_get_version_string()}")


def _run_app(typer_app: typer.Typer) -> None:
    try:
        typer_app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


def main() -> None:
    """Entry point for the ``windsor`` CLI."""
    _run_app(app)


def projinit_main() -> None:
    """Entry point for ``projinit``."""
    _run_app(projinit_app)


def projorg_main() -> None:
    """Entry point for ``projorg``."""
    _run_app(projorg_app)


def install_main() -> None:
    """Entry point for ``windsor-install``."""
    _run_app(install_app)


if __name__ == "__main__":
    main()
