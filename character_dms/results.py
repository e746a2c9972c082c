"""
Outcome contracts shared by the record, store and import layers.

Expected failures (invalid fields, duplicates, missing ids, malformed lines)
are returned as `OperationResult` values. Only stream-level I/O problems are
raised, as `DataFileError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional


class FailureKind(str, Enum):
    """Category of an expected, non-fatal failure."""

    VALIDATION = "validation"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    PARSE = "parse"


@dataclass
class OperationResult:
    """
    Success/failure of a single operation.

    Truthy when the operation succeeded, so callers can write `if store.add(c): ...`.
    """

    ok: bool
    kind: Optional[FailureKind] = None
    reasons: List[str] = field(default_factory=list)
    value: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: FailureKind, *reasons: str) -> "OperationResult":
        return cls(ok=False, kind=kind, reasons=list(reasons))

    @property
    def message(self) -> str:
        """Human-readable summary of the failure reasons."""
        return "; ".join(self.reasons)


@dataclass
class LineFailure:
    """A rejected import line."""

    line_number: int
    text: str
    kind: FailureKind
    reasons: List[str] = field(default_factory=list)


@dataclass
class ImportReport:
    """Tally of a best-effort batch import."""

    added: int = 0
    skipped: int = 0
    failures: List[LineFailure] = field(default_factory=list)

    def summary(self) -> str:
        return f"Loaded: {self.added} added, {self.skipped} skipped."


class DataFileError(Exception):
    """
    Underlying file or stream failure during import or export.

    Attributes
    ----------
    path : Path
        File that could not be read or written.
    report : ImportReport | None
        Lines processed before the stream broke (imports only).
    """

    def __init__(self, path: Path | str, message: str, report: Optional[ImportReport] = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
        self.report = report


__all__ = [
    "DataFileError",
    "FailureKind",
    "ImportReport",
    "LineFailure",
    "OperationResult",
]
