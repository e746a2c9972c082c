"""
Line-oriented import and export adapters.

Two line layouts are understood on import:

- record lines: id,handle,server,occupation,wantedLevel,bountyCents,reputation,active
- report lines (as written by `export_file`): the same fields with the derived
  `score` column in place of `active`; the score is dropped and the record is
  imported as active.

Fields follow the csv dialect: a value holding a comma is quoted on export
and unquoted on import. A leading header line selects the layout and is not counted. Without a header,
record lines are assumed. Import is best-effort: a bad line is tallied and the
loop moves on. Only a broken stream aborts, as `DataFileError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from character_dms.domain.models import (
    LINE_FIELDS,
    Character,
    ThreatEntry,
    join_fields,
    split_fields,
)
from character_dms.ranking import EXPORT_COLUMNS, to_export_text
from character_dms.results import (
    DataFileError,
    FailureKind,
    ImportReport,
    LineFailure,
    OperationResult,
)
from character_dms.store import CharacterStore
from character_dms.utils.logging import get_logger

log = get_logger(__name__)

LineParser = Callable[[str], OperationResult]


def parse_report_line(text: str) -> OperationResult:
    """Parse an exported report line, ignoring its score column."""
    try:
        parts = split_fields(text)
    except ValueError as exc:
        return OperationResult.failure(FailureKind.PARSE, str(exc))
    if len(parts) != len(EXPORT_COLUMNS):
        return OperationResult.failure(
            FailureKind.PARSE, f"expected {len(EXPORT_COLUMNS)} fields, got {len(parts)}"
        )
    return Character.from_line(join_fields(parts[:-1] + ["true"]))


def _header_parser(line: str) -> Optional[LineParser]:
    """Return the parser a header line selects, or None if `line` is data."""
    parts = [p.strip().lower() for p in line.split(",")]
    if not parts or parts[0] != "id":
        return None
    if len(parts) == LINE_FIELDS and parts[-1] == "score":
        return parse_report_line
    return Character.from_line


def import_lines(store: CharacterStore, lines: Iterable[str]) -> ImportReport:
    """
    Parse each line and hand it to `store.add`, tallying added/skipped.

    Blank lines and a leading header are ignored. Exceptions raised while
    iterating `lines` propagate to the caller; the report built so far is
    lost unless the caller wraps the iterable (see `import_file`).
    """
    report = ImportReport()
    _import_into(store, lines, report)
    return report


def _import_into(store: CharacterStore, lines: Iterable[str], report: ImportReport) -> None:
    parser: LineParser = Character.from_line
    seen_data = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if not seen_data:
            seen_data = True
            selected = _header_parser(line)
            if selected is not None:
                parser = selected
                continue

        parsed = parser(line)
        outcome = store.add(parsed.value) if parsed else parsed
        if outcome:
            report.added += 1
            continue

        report.skipped += 1
        report.failures.append(
            LineFailure(
                line_number=line_number,
                text=line,
                kind=outcome.kind or FailureKind.PARSE,
                reasons=list(outcome.reasons),
            )
        )
        log.warning(
            f"Skipped line {line_number}: {outcome.message}",
            extra={"line": line_number, "kind": outcome.kind.value if outcome.kind else None},
        )


def import_file(store: CharacterStore, path: Path | str) -> ImportReport:
    """
    Stream a UTF-8 file into the store.

    Raises
    ------
    DataFileError
        If the file cannot be opened or reading fails mid-stream. The
        exception carries the partial report.
    """
    file_path = Path(path)
    report = ImportReport()
    log.info("Import started", extra={"path": str(file_path)})
    try:
        with file_path.open("r", encoding="utf-8", newline="") as f:
            _import_into(store, f, report)
    except (OSError, UnicodeDecodeError) as exc:
        log.error(
            "Import aborted",
            extra={"path": str(file_path), "added": report.added, "skipped": report.skipped},
        )
        raise DataFileError(file_path, str(exc), report=report) from exc

    log.info(
        report.summary(),
        extra={"path": str(file_path), "added": report.added, "skipped": report.skipped},
    )
    return report


def export_file(path: Path | str, entries: Sequence[ThreatEntry]) -> Path:
    """
    Write a ranked report to `path`, creating parent directories.

    Raises
    ------
    DataFileError
        If the file cannot be written.
    """
    file_path = Path(path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8", newline="") as f:
            f.write(to_export_text(entries))
    except OSError as exc:
        log.error("Export failed", extra={"path": str(file_path)})
        raise DataFileError(file_path, str(exc)) from exc

    log.info("Report exported", extra={"path": str(file_path), "entries": len(entries)})
    return file_path


__all__ = [
    "export_file",
    "import_file",
    "import_lines",
    "parse_report_line",
]
