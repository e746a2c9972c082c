"""
Synthetic character data generator for the Character DMS.

Implements deterministic pseudo-random character generation and CSV emission in
the import line format, so demos and tests can load a realistic roster.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from pathlib import Path

import typer

from character_dms.domain.models import Character, Server

app = typer.Typer(help="Generate a synthetic character roster as CSV.")

IMPORT_COLUMNS = [
    "id",
    "handle",
    "server",
    "occupation",
    "wantedLevel",
    "bountyCents",
    "reputation",
    "active",
]
IMPORT_HEADER = ",".join(IMPORT_COLUMNS)

_PREFIXES = ["Neon", "Ghost", "Rust", "Velvet", "Static", "Chrome", "Night", "Ash"]
_SUFFIXES = ["Fox", "Viper", "Byte", "Wolf", "Saint", "Drifter", "Jack", "Moth"]
_OCCUPATIONS = ["Courier", "Hacker", "Smuggler", "Medic", "Racer", "Fixer, retired", "Bouncer", "Troll"]


def _generate_characters(count: int, seed: int) -> list[Character]:
    rng = random.Random(seed)
    characters: list[Character] = []
    for i in range(1, count + 1):
        handle = f"{rng.choice(_PREFIXES)}{rng.choice(_SUFFIXES)}{i}"
        characters.append(
            Character(
                id=i,
                handle=handle,
                server=rng.choice(list(Server)),
                occupation=rng.choice(_OCCUPATIONS),
                wanted_level=rng.randint(0, 6),
                bounty_cents=rng.randint(0, 200_000),
                reputation=rng.randint(-100, 100),
                active=rng.random() >= 0.1,
            )
        )
    return characters


def _write_csv(csv_path: Path, characters: list[Character]) -> None:
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(IMPORT_COLUMNS)
        writer.writerows(character.to_fields() for character in characters)


@app.command()
def main(
    rows: int = typer.Option(
        50,
        "--rows",
        "-r",
        help="Number of characters to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("data/characters.csv"),
        "--output",
        "-o",
        help="CSV output path.",
    ),
) -> None:
    """
    Generate a synthetic roster and write it in import format.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)

    typer.echo(f"Generating {rows:,} characters -> {output} (seed={seed})")
    _write_csv(output, _generate_characters(rows, seed))
    duration = time.perf_counter() - start
    typer.echo(f"CSV generation completed in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
