import os
import json
from typing import List, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from lms.datafile import LoadResult
from lms.patron import Patron

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LMS_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def set_output_mode(mode: str) -> bool:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode
        return True
    return False


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def patron_table(patrons: List[Patron], title: str = "👥 Patrons") -> Table:
    table = Table(title=title, show_lines=True, header_style="bold cyan")
    table.add_column("Patron ID", style="magenta", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Address", style="white")
    table.add_column("Overdue Fine", style="yellow", justify="right")
    for p in patrons:
        table.add_row(str(p.patron_id), escape(p.name), escape(p.address), f"${p.overdue_fine:.2f}")
    return table


def print_list_result(patrons: List[Patron]) -> None:
    """Print the patron roster in the current output mode.
    - plain: one 'Patron ID: ..., Name: ...' line per patron, or 'No patrons found.'
    - json: JSON array of patron objects
    - rich: Rich table
    """
    mode = get_output_mode()

    if not patrons:
        if mode == "json":
            print("[]")
        else:
            print("No patrons found.")
        return

    if mode == "json":
        print(json.dumps([p.to_dict() for p in patrons], ensure_ascii=False))
    elif mode == "rich":
        _console.print(patron_table(patrons))
    else:
        print("----- Patron List -----")
        for p in patrons:
            print(str(p))
        print("-----------------------")


def print_find_result(patron: Optional[Patron]) -> None:
    mode = get_output_mode()

    if patron is None:
        if mode == "json":
            print("null")
        else:
            print("No patron found with that ID.")
        return

    if mode == "json":
        print(json.dumps(patron.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]Patron ID:[/] {patron.patron_id}\n"
            f"[bold]Name:[/] {escape(patron.name)}\n"
            f"[bold]Address:[/] {escape(patron.address)}\n"
            f"[bold]Overdue Fine:[/] ${patron.overdue_fine:.2f}",
            title="🔍 Patron Found",
            border_style="green"
        ))
    else:
        print("Patron found:")
        print(str(patron))


def print_load_result(path: str, result: LoadResult, verbose: bool = False) -> None:
    """Report loaded/skipped counts, or the error that stopped the load."""
    mode = get_output_mode()

    if mode == "json":
        payload = {
            "file": path,
            "loaded": result.loaded_count,
            "skipped": result.skipped_count,
            "error": result.error,
        }
        if verbose:
            payload["skipped_lines"] = [
                {"line": s.line_number, "reason": s.reason} for s in result.skipped_lines
            ]
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not result.ok:
        print(f"Error loading file: {result.error}")
        return

    if mode == "rich":
        content = (f"[bold]Loaded patrons:[/] {result.loaded_count}\n"
                   f"[bold]Skipped rows:[/] {result.skipped_count}")
        border = "green" if result.skipped_count == 0 else "yellow"
        _console.print(Panel.fit(content, title=f"📂 {escape(path)}", border_style=border))
        if verbose:
            for s in result.skipped_lines:
                _console.print(f"[dim]line {s.line_number}: {escape(s.reason)}[/]")
    else:
        print(f"Loaded patrons: {result.loaded_count}")
        print(f"Skipped rows: {result.skipped_count}")
        if verbose:
            for s in result.skipped_lines:
                print(f"  line {s.line_number}: {s.reason}")
