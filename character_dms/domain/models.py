"""
Domain models for the Character DMS.

Defines the character record, the closed set of game servers and the
ephemeral threat entry produced by the ranking report. Construction only
coerces types; range checks are an explicit `validate()` step that the store
runs before accepting a record.
"""
from __future__ import annotations

import csv
import io
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from character_dms.results import FailureKind, OperationResult

LINE_FIELDS = 8

_TRUE_TOKENS = {"true", "t", "yes", "y"}
_FALSE_TOKENS = {"false", "f", "no", "n"}


class Server(str, Enum):
    """Game server a character plays on."""

    NA = "NA"
    EU = "EU"
    AS = "AS"


def parse_server(token: str) -> Server:
    """
    Resolve a server token case-insensitively.

    Raises
    ------
    ValueError
        If the token is not one of NA, EU or AS.
    """
    value = token.strip().upper()
    try:
        return Server(value)
    except ValueError:
        raise ValueError(f"unknown server '{token.strip()}' (expected NA/EU/AS)") from None


def parse_bool(token: str) -> bool:
    """Parse a boolean literal (true/false, t/f, yes/no, y/n), case-insensitive."""
    value = token.strip().lower()
    if value in _TRUE_TOKENS:
        return True
    if value in _FALSE_TOKENS:
        return False
    raise ValueError(f"invalid boolean '{token.strip()}' (expected true/false)")


def split_fields(text: str) -> List[str]:
    """
    Split one line into fields with the csv dialect (quoted fields may hold commas).

    Raises
    ------
    ValueError
        If the line is not well-formed csv.
    """
    try:
        rows = list(csv.reader([text.rstrip("\r\n")]))
    except csv.Error as exc:
        raise ValueError(f"malformed line: {exc}") from None
    return rows[0] if rows else []


def join_fields(values: Sequence[str]) -> str:
    """Render fields as one csv line without a line terminator."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()


def _parse_int(name: str, token: str) -> int:
    try:
        return int(token.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{token.strip()}'") from None


class Character(BaseModel):
    """
    A single game character record.

    Fields mirror the import line order:
    id, handle, server, occupation, wantedLevel, bountyCents, reputation, active.
    """

    id: int = Field(..., description="Primary key, unique within a store.")
    handle: str = Field(..., description="Display handle, unique case-insensitively.")
    server: Server = Field(..., description="Home server.")
    occupation: str = Field("", description="Free-text occupation.")
    wanted_level: int = Field(0, alias="wantedLevel", description="Wanted level 0..6.")
    bounty_cents: int = Field(0, alias="bountyCents", description="Bounty in cents, >= 0.")
    reputation: int = Field(0, description="Reputation -100..100.")
    active: bool = Field(True, description="False once the record is archived.")

    model_config = {
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def validate(self) -> List[str]:  # type: ignore[override]
        """
        Return the list of constraint violations; an empty list means valid.

        Never raises.
        """
        errors: List[str] = []
        if self.id <= 0:
            errors.append("id must be > 0")
        if self.handle is None or not self.handle.strip():
            errors.append("handle is required")
        if not isinstance(self.server, Server):
            errors.append("server must be NA/EU/AS")
        if self.wanted_level < 0 or self.wanted_level > 6:
            errors.append("wantedLevel must be 0..6")
        if self.bounty_cents < 0:
            errors.append("bountyCents must be >= 0")
        if self.reputation < -100 or self.reputation > 100:
            errors.append("reputation must be -100..100")
        return errors

    @property
    def handle_key(self) -> str:
        """Normalized handle used for uniqueness checks."""
        return normalize_handle(self.handle)

    @classmethod
    def from_line(cls, text: str) -> OperationResult:
        """
        Parse one `id,handle,server,occupation,wantedLevel,bountyCents,reputation,active` line.

        Only type conversion happens here. On success the result's `value` holds the
        new Character; otherwise the result is a PARSE failure and nothing is built.
        """
        try:
            parts = split_fields(text)
        except ValueError as exc:
            return OperationResult.failure(FailureKind.PARSE, str(exc))
        if len(parts) != LINE_FIELDS:
            return OperationResult.failure(
                FailureKind.PARSE, f"expected {LINE_FIELDS} fields, got {len(parts)}"
            )
        try:
            character = cls(
                id=_parse_int("id", parts[0]),
                handle=parts[1].strip(),
                server=parse_server(parts[2]),
                occupation=parts[3].strip(),
                wanted_level=_parse_int("wantedLevel", parts[4]),
                bounty_cents=_parse_int("bountyCents", parts[5]),
                reputation=_parse_int("reputation", parts[6]),
                active=parse_bool(parts[7]),
            )
        except ValueError as exc:
            return OperationResult.failure(FailureKind.PARSE, str(exc))
        return OperationResult.success(character)

    def to_fields(self) -> List[str]:
        """Field values in import line order."""
        return [
            str(self.id),
            self.handle,
            self.server.value,
            self.occupation,
            str(self.wanted_level),
            str(self.bounty_cents),
            str(self.reputation),
            "true" if self.active else "false",
        ]

    def to_line(self) -> str:
        """Render the record in import line format."""
        return join_fields(self.to_fields())

    def describe(self) -> str:
        return (
            f"{self.id:4d} {self.handle:<12} {self.server.value} {self.occupation:<8} "
            f"WL={self.wanted_level} bounty={self.bounty_cents} rep={self.reputation} "
            f"{'active' if self.active else 'inactive'}"
        )


class ThreatEntry(BaseModel):
    """
    A character paired with its computed threat score.

    Built fresh for every report; never stored.
    """

    character: Character
    score: int

    model_config = {
        "frozen": True,
    }

    def describe(self) -> str:
        c = self.character
        return (
            f"{c.id} {c.handle} WL={c.wanted_level} Bounty={c.bounty_cents} "
            f"Rep={c.reputation} Score={self.score}"
        )


def normalize_handle(handle: Optional[str]) -> str:
    """Case-insensitive, whitespace-trimmed form of a handle."""
    return (handle or "").strip().casefold()


__all__ = [
    "Character",
    "LINE_FIELDS",
    "Server",
    "ThreatEntry",
    "join_fields",
    "normalize_handle",
    "parse_bool",
    "parse_server",
    "split_fields",
]
