import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from lms.cli_config import CLIConfig, parse_config_value
from lms.config import settings
from lms.datafile import LoadResult, append_patron, load_patrons, save_all_patrons
from lms.patron import Patron
from lms.patron_manager import PatronManager
from lms.ui_helpers import (
    OUTPUT_MODE_ENV,
    patron_table,
    print_find_result,
    print_list_result,
    print_load_result,
    set_output_mode,
)
from lms.validators import PatronValidationError, PatronValidator

console = Console()

MSG_NO_FILE_ADD = "Please load a file first (Option 1) so the system knows where to save."
MSG_NO_FILE_REMOVE = "Please load a file first (Option 1) so the system knows which file to update."
MSG_NO_FILE_CLI = "No data file given. Use --file, set LMS_DATA_FILE or set preferences.default_file."
MSG_DUPLICATE = "That Patron ID already exists. Duplicate IDs are not allowed."
MSG_NOT_FOUND = "No patron found with that ID."
MSG_INVALID_ID = "Invalid ID. Patron ID must be exactly 7 digits (1000000 to 9999999)."
MSG_INVALID_FINE = "Invalid fine amount. Must be between 0 and 250."


@dataclass
class Session:
    """The roster in memory plus the file it is mirrored to.

    Passed explicitly to every operation that writes the file.
    """
    manager: PatronManager = field(default_factory=PatronManager)
    current_path: Optional[str] = None


# ------------------------- Session operations ------------------------- #
def load_file(session: Session, path: str) -> LoadResult:
    """Remember ``path`` as the current file and load its patrons.

    The path is kept even when the load fails so a missing file can be
    created by the next add.
    """
    session.current_path = path
    return load_patrons(path, session.manager)


def add_and_save(session: Session, patron_id: int, name: str, address: str, fine: float) -> str:
    if session.current_path is None:
        return MSG_NO_FILE_ADD
    if session.manager.is_duplicate_id(patron_id):
        return MSG_DUPLICATE

    try:
        patron = Patron(patron_id, name, address, fine)
    except PatronValidationError as e:
        return f"Error adding patron: {e}"

    if not session.manager.add_patron(patron):
        return "Patron could not be added."

    if append_patron(session.current_path, patron):
        return "Patron added and saved successfully."
    return "Warning: Patron added in memory but could not be saved to the file."


def remove_and_save(session: Session, patron_id: int) -> str:
    if session.current_path is None:
        return MSG_NO_FILE_REMOVE
    if not session.manager.remove_patron(patron_id):
        return MSG_NOT_FOUND

    # Rewrite the file so the removed patron is deleted from it too
    if save_all_patrons(session.current_path, session.manager.list_patrons()):
        return "Patron removed and file updated successfully."
    return "Warning: Patron removed in memory but file could not be updated."


def update_and_save(session: Session, patron_id: int, name: Optional[str] = None,
                    address: Optional[str] = None, fine: Optional[float] = None) -> str:
    if session.current_path is None:
        return MSG_NO_FILE_REMOVE

    try:
        patron = session.manager.update_patron(patron_id, name=name, address=address, overdue_fine=fine)
    except PatronValidationError as e:
        return f"Error updating patron: {e}"
    except ValueError as e:
        return str(e)
    if patron is None:
        return MSG_NOT_FOUND

    if save_all_patrons(session.current_path, session.manager.list_patrons()):
        return "Patron updated and file updated successfully."
    return "Warning: Patron updated in memory but file could not be updated."


# --- Typer CLI Application ---
app = typer.Typer(help="Library patron roster CLI")


def _resolve_path(ctx: typer.Context) -> Optional[str]:
    path = (ctx.obj or {}).get("file") or settings.data_file
    if not path:
        path = CLIConfig().get("preferences.default_file")
    return path or None


def _open_session(ctx: typer.Context) -> Optional[Session]:
    """Start a session on the resolved data file, loading it when it exists."""
    path = _resolve_path(ctx)
    if not path:
        print(MSG_NO_FILE_CLI)
        return None

    session = Session()
    if os.path.exists(path):
        result = load_file(session, path)
        if not result.ok:
            print(f"Error loading file: {result.error}")
            return None
    else:
        session.current_path = path
    return session


@app.callback()
def _global_options(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="Patron data file (default: LMS_DATA_FILE or preferences.default_file)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options for the CLI (data file, output mode)."""
    if output:
        set_output_mode(output)
    elif OUTPUT_MODE_ENV not in os.environ:
        preferred = CLIConfig().get("preferences.output_mode")
        if preferred:
            set_output_mode(preferred)
    ctx.obj = {"file": file}


@app.command("load")
def cli_load(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every skipped line with its reason"),
):
    """Load the data file and report how many rows were loaded and skipped."""
    path = _resolve_path(ctx)
    if not path:
        print(MSG_NO_FILE_CLI)
        return
    result = load_file(Session(), path)
    print_load_result(path, result, verbose=verbose)


@app.command("list")
def cli_list(ctx: typer.Context):
    """List all patrons in the data file."""
    session = _open_session(ctx)
    if session:
        print_list_result(session.manager.list_patrons())


@app.command("find")
def cli_find(ctx: typer.Context, patron_id: int):
    """Find a patron by 7-digit ID and show the details."""
    if not PatronValidator.is_valid_patron_id(patron_id):
        print(MSG_INVALID_ID)
        return
    session = _open_session(ctx)
    if session:
        print_find_result(session.manager.find_patron(patron_id))


@app.command("add")
def cli_add(ctx: typer.Context, patron_id: int, name: str, address: str, fine: float):
    """Add a patron and append it to the data file."""
    session = _open_session(ctx)
    if session:
        print(add_and_save(session, patron_id, name, address, fine))


@app.command("remove")
def cli_remove(ctx: typer.Context, patron_id: int):
    """Remove a patron by ID and rewrite the data file."""
    session = _open_session(ctx)
    if session:
        print(remove_and_save(session, patron_id))


@app.command("update")
def cli_update(
    ctx: typer.Context,
    patron_id: int,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    address: Optional[str] = typer.Option(None, "--address", "-a", help="New address"),
    fine: Optional[float] = typer.Option(None, "--fine", help="New overdue fine (0 to 250)"),
):
    """Change a patron's name, address and/or fine and rewrite the data file."""
    session = _open_session(ctx)
    if session:
        print(update_and_save(session, patron_id, name, address, fine))


@app.command("config")
def cli_config(
    action: str = typer.Argument(..., help="Action: show, get, set, reset"),
    key: Optional[str] = typer.Argument(None, help="Configuration key (dot notation)"),
    value: Optional[str] = typer.Argument(None, help="Configuration value"),
):
    """Manage CLI configuration and preferences."""
    config_manager = CLIConfig()

    if action == "show":
        config_manager.show_config()

    elif action == "get":
        if not key:
            print("Error: 'get' requires a key")
            return
        found = config_manager.get(key)
        if found is not None:
            print(f"{key}: {found}")
        else:
            print(f"Key '{key}' not found")

    elif action == "set":
        if not key or value is None:
            print("Error: 'set' requires both a key and a value")
            return
        parsed_value = parse_config_value(value)
        config_manager.set(key, parsed_value)
        print(f"{key} set to {parsed_value}")

    elif action == "reset":
        config_manager.reset_to_default()

    else:
        print(f"Unknown action: {action}")
        print("Available actions: show, get, set, reset")


# ------------------------- Interactive menu ------------------------- #
def read_valid_patron_id() -> int:
    while True:
        patron_id = IntPrompt.ask("Enter 7-digit Patron ID", console=console)
        if PatronValidator.is_valid_patron_id(patron_id):
            return patron_id
        console.print(f"[yellow]{MSG_INVALID_ID}[/]")


def read_valid_fine() -> float:
    while True:
        fine = FloatPrompt.ask("Enter overdue fine amount (0 to 250)", console=console)
        if PatronValidator.is_valid_fine(fine):
            return fine
        console.print(f"[yellow]{MSG_INVALID_FINE}[/]")


def _report(message: str) -> None:
    if message.startswith("Warning"):
        style = "bold yellow"
    elif "successfully" in message:
        style = "green"
    else:
        style = "red"
    console.print(f"[{style}]{escape(message)}[/]")


def menu_load(session: Session) -> None:
    path = Prompt.ask("Enter the file name (example: PatronData.txt)", console=console).strip()
    if not path:
        console.print("[red]File name cannot be empty.[/]")
        return
    result = load_file(session, path)
    if result.ok:
        console.print(f"[green]Loaded patrons:[/] {result.loaded_count}")
        console.print(f"[yellow]Skipped rows:[/] {result.skipped_count}")
    else:
        console.print(f"[bold red]Error loading file:[/] {escape(result.error or '')}")


def menu_add(session: Session) -> None:
    if session.current_path is None:
        console.print(f"[yellow]{MSG_NO_FILE_ADD}[/]")
        return

    patron_id = read_valid_patron_id()
    # Duplicate ids are rejected before asking for the remaining fields
    if session.manager.is_duplicate_id(patron_id):
        console.print(f"[red]{MSG_DUPLICATE}[/]")
        return

    name = Prompt.ask("Enter patron name", console=console, default="", show_default=False).strip()
    address = Prompt.ask("Enter patron address", console=console, default="", show_default=False).strip()
    fine = read_valid_fine()
    _report(add_and_save(session, patron_id, name, address, fine))


def menu_remove(session: Session, confirm: bool = True) -> None:
    if session.current_path is None:
        console.print(f"[yellow]{MSG_NO_FILE_REMOVE}[/]")
        return

    patron_id = read_valid_patron_id()
    patron = session.manager.find_patron(patron_id)
    if patron is None:
        console.print(f"[yellow]{MSG_NOT_FOUND}[/]")
        return

    if confirm:
        console.print(Panel(
            f"[bold]Name:[/] {escape(patron.name)}\n"
            f"[bold]Address:[/] {escape(patron.address)}\n"
            f"[bold]Patron ID:[/] {patron.patron_id}",
            title="👤 Patron to remove",
            border_style="yellow"
        ))
        if not Confirm.ask("Remove this patron?", console=console, default=False):
            console.print("[blue]Removal cancelled.[/]")
            return

    _report(remove_and_save(session, patron_id))


def menu_find(session: Session) -> None:
    patron_id = read_valid_patron_id()
    patron = session.manager.find_patron(patron_id)
    if patron is None:
        console.print(f"[yellow]{MSG_NOT_FOUND}[/]")
    else:
        console.print("[green]Patron found:[/]")
        console.print(escape(str(patron)))


def menu_list(session: Session) -> None:
    patrons = session.manager.list_patrons()
    if not patrons:
        console.print("[yellow]No patrons found.[/]")
        return
    console.print(patron_table(patrons))


def run_menu(session: Optional[Session] = None) -> None:
    """Simple interactive menu for the patron CLI."""
    session = session or Session()
    confirm_deletions = bool(CLIConfig().get("ui_settings.confirm_deletions", True))

    def render_menu() -> None:
        menu_items = [
            ("1", "Load patrons from file", "📂"),
            ("2", "Add a patron (auto-save)", "➕"),
            ("3", "Remove a patron (auto-save)", "🗑️"),
            ("4", "Find a patron by ID", "🔎"),
            ("5", "Display all patrons", "📋"),
            ("6", "Exit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        current = escape(session.current_path) if session.current_path else "(none loaded)"
        panel = Panel(
            table,
            title=settings.app_name,
            subtitle=f"Current file: {current}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
        console.print(panel)

    while True:
        render_menu()
        choice = Prompt.ask("Enter your choice", console=console,
                            choices=["1", "2", "3", "4", "5", "6"], default="5").strip()

        if choice == "1":
            menu_load(session)
        elif choice == "2":
            menu_add(session)
        elif choice == "3":
            menu_remove(session, confirm=confirm_deletions)
        elif choice == "4":
            menu_find(session)
        elif choice == "5":
            menu_list(session)
        elif choice == "6":
            console.print("[green]Exiting program. Goodbye![/]")
            break
        console.print()


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    main()
