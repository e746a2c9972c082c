"""
Interactive console menu over a CharacterStore.

Owns all prompting and retry-on-bad-input loops; every state change goes
through the store, the ranking functions and the import/export adapters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from character_dms import reporter
from character_dms.config import Settings
from character_dms.csv_io import export_file, import_file
from character_dms.domain.models import Character, Server, ThreatEntry, parse_bool, parse_server
from character_dms.ranking import top_n
from character_dms.results import DataFileError
from character_dms.store import CharacterStore

T = TypeVar("T")

MAX_ID = 2**31 - 1

MENU = """
=== Game Character DMS ===
(1) Load CSV
(2) Add
(3) Update
(4) Remove
(5) Archive
(6) List Active
(7) Search
(8) Top-N Most Wanted
(9) Export Top-N
(0) Exit"""


class ConsoleSession:
    """One interactive run of the menu against a single store."""

    def __init__(self, store: CharacterStore, settings: Settings, console: Optional[Console] = None):
        self.store = store
        self.settings = settings
        self.console = console or Console()
        self._actions: Dict[int, Callable[[], None]] = {
            1: self.load_csv,
            2: self.add_character,
            3: self.update_character,
            4: self.remove_character,
            5: self.archive_character,
            6: self.list_active,
            7: self.search,
            8: self.top_n,
            9: self.export_top_n,
        }

    def run(self) -> None:
        while True:
            self.console.print(MENU, highlight=False, markup=False)
            choice = self.read_int("Choose:", 0, 9)
            if choice == 0:
                self.console.print("Goodbye!")
                return
            self._actions[choice]()

    # --- menu actions ---

    def load_csv(self) -> None:
        path = self.read_non_empty("CSV path:")
        try:
            report = import_file(self.store, Path(path))
        except DataFileError as exc:
            self.console.print(f"[red]Error reading file: {escape(str(exc))}[/red]")
            if exc.report is not None:
                self.console.print(exc.report.summary())
            return
        reporter.print_import_report(report, console=self.console)

    def add_character(self) -> None:
        self.console.print("=== Add Character ===")

        character_id = self.read_int("id:", 1, MAX_ID)
        if character_id in self.store:
            self.console.print("Add failed (duplicate id).")
            return

        handle = self.read_non_empty("handle:")
        if self.store.find_by_handle(handle) is not None:
            self.console.print("Add failed (duplicate handle).")
            return

        character = self._read_fields(character_id, handle, prefix="")
        result = self.store.add(character)
        if result:
            self.console.print("Add successful.")
        else:
            self.console.print(f"Add failed ({result.message}).")

    def update_character(self) -> None:
        self.console.print("=== Update Character ===")

        character_id = self.read_int("Enter existing id to update:", 1, MAX_ID)
        existing = self.store.find_by_id(character_id)
        if existing is None:
            self.console.print("Update failed (id not found).")
            return
        self.console.print(f"Found: {existing.describe()}", highlight=False, markup=False)

        handle = self.read_non_empty("new handle:")
        holder = self.store.find_by_handle(handle)
        if holder is not None and holder.id != character_id:
            self.console.print("Update failed (handle belongs to another id).")
            return

        updated = self._read_fields(character_id, handle, prefix="new ")
        result = self.store.update(updated)
        if result:
            self.console.print("Update successful.")
        else:
            self.console.print(f"Update failed ({result.message}).")

    def remove_character(self) -> None:
        self.console.print("=== Remove Character ===")
        character_id = self.read_int("id to remove:", 1, MAX_ID)
        if self.store.remove(character_id):
            self.console.print("Removed.")
        else:
            self.console.print("Nothing removed (id not found).")

    def archive_character(self) -> None:
        self.console.print("=== Archive Character ===")
        character_id = self.read_int("id to archive:", 1, MAX_ID)
        if self.store.archive(character_id):
            self.console.print("Archived.")
        else:
            self.console.print("Nothing archived (id not found).")

    def list_active(self) -> None:
        reporter.print_characters(
            self.store.list_active(), title="Active Characters", console=self.console
        )

    def search(self) -> None:
        self.console.print("=== Search ===")
        self.console.print("(1) by id   (2) by handle   (3) by text")
        mode = self.read_int("choose:", 1, 3)
        if mode == 1:
            self._print_match(self.store.find_by_id(self.read_int("id:", 1, MAX_ID)))
        elif mode == 2:
            self._print_match(self.store.find_by_handle(self.read_non_empty("handle:")))
        else:
            query = typer.prompt("text (blank for all)", default="", show_default=False)
            reporter.print_characters(
                self.store.search(query), title=f"Matches for '{query}'", console=self.console
            )

    def top_n(self) -> None:
        n = self.read_int("N:", 1, MAX_ID)
        reporter.print_threats(self._ranked(n), console=self.console)

    def export_top_n(self) -> None:
        n = self.read_int("N:", 1, MAX_ID)
        default_path = self.settings.export_dir / f"top-{n}.csv"
        path = typer.prompt("export path", default=str(default_path))
        try:
            written = export_file(Path(path), self._ranked(n))
        except DataFileError as exc:
            self.console.print(f"[red]Export failed: {escape(str(exc))}[/red]")
            return
        self.console.print(f"Exported to {written}", highlight=False, markup=False)

    # --- helpers ---

    def _ranked(self, n: int) -> List[ThreatEntry]:
        source = self.store.all() if self.settings.report_include_archived else self.store.list_active()
        return top_n(n, source)

    def _print_match(self, found: Optional[Character]) -> None:
        if found is None:
            self.console.print("No match")
        else:
            self.console.print(found.describe(), highlight=False, markup=False)

    def _read_fields(self, character_id: int, handle: str, prefix: str) -> Character:
        return Character(
            id=character_id,
            handle=handle,
            server=self.read_server(f"{prefix}server (NA/EU/AS):"),
            occupation=self.read_non_empty(f"{prefix}occupation:"),
            wanted_level=self.read_int(f"{prefix}wantedLevel (0..6):", 0, 6),
            bounty_cents=self.read_int(f"{prefix}bountyCents (>=0):", 0, MAX_ID),
            reputation=self.read_int(f"{prefix}reputation (-100..100):", -100, 100),
            active=self.read_bool(f"{prefix}active (true/false):"),
        )

    # --- input loops ---

    def _read(self, prompt: str, convert: Callable[[str], T], retry_message: str) -> T:
        while True:
            raw = typer.prompt(prompt, default="", show_default=False, prompt_suffix=" ")
            try:
                return convert(raw)
            except ValueError:
                self.console.print(retry_message)

    def read_int(self, prompt: str, low: int, high: int) -> int:
        def convert(raw: str) -> int:
            value = int(raw.strip())
            if value < low or value > high:
                raise ValueError(value)
            return value

        return self._read(prompt, convert, f"Enter a whole number in range [{low}..{high}].")

    def read_non_empty(self, prompt: str) -> str:
        def convert(raw: str) -> str:
            if not raw.strip():
                raise ValueError("blank")
            return raw.strip()

        return self._read(prompt, convert, "Value required.")

    def read_bool(self, prompt: str) -> bool:
        return self._read(prompt, parse_bool, "Please enter true/false (or y/n).")

    def read_server(self, prompt: str) -> Server:
        return self._read(prompt, parse_server, "Please enter one of: NA, EU, AS")


__all__ = ["ConsoleSession"]
