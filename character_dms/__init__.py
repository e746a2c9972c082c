"""
Character DMS - in-memory record manager for game-character data.

This package provides:

- A validated character record with a line-oriented import format
- An in-memory store enforcing unique ids and case-insensitive unique handles
- Search over active characters and logical archiving
- A deterministic "most wanted" threat ranking with CSV export
- Best-effort batch import that tallies added/skipped lines

Front ends (the typer CLI and the interactive shell) only call into these
entry points; the core never prompts or prints.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from character_dms.config import Settings, get_settings
from character_dms.csv_io import export_file, import_file, import_lines
from character_dms.domain.models import Character, Server, ThreatEntry
from character_dms.ranking import threat_score, to_export_text, top_n
from character_dms.results import (
    DataFileError,
    FailureKind,
    ImportReport,
    LineFailure,
    OperationResult,
)
from character_dms.store import CharacterStore
from character_dms.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Character",
    "Server",
    "ThreatEntry",
    # Store
    "CharacterStore",
    # Ranking
    "threat_score",
    "top_n",
    "to_export_text",
    # Import / export
    "import_lines",
    "import_file",
    "export_file",
    # Results
    "DataFileError",
    "FailureKind",
    "ImportReport",
    "LineFailure",
    "OperationResult",
    # Logging
    "configure_logging",
    "get_logger",
]
