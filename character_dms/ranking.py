"""
Threat ranking report.

Pure functions over a caller-chosen collection of characters: score each one,
order by descending score and serialize the result for export. Nothing here
filters by activity or touches a store.

Score (integer arithmetic):
    wantedLevel * 100 + bountyCents // 100 + max(0, -reputation)

Ties keep their input order (the sort is stable on the negated score).
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from character_dms.domain.models import Character, ThreatEntry, join_fields

EXPORT_COLUMNS = [
    "id",
    "handle",
    "server",
    "occupation",
    "wantedLevel",
    "bountyCents",
    "reputation",
    "score",
]
EXPORT_HEADER = ",".join(EXPORT_COLUMNS)


def threat_score(character: Character) -> int:
    wanted = character.wanted_level * 100
    bounty = character.bounty_cents // 100
    bad_reputation = max(0, -character.reputation)
    return wanted + bounty + bad_reputation


def top_n(n: int, characters: Iterable[Character]) -> List[ThreatEntry]:
    """
    Return the `n` highest-scoring characters as ThreatEntry values.

    A negative `n` yields an empty list; an `n` beyond the input size yields
    every entry. The input records are not modified.
    """
    entries = [ThreatEntry(character=c, score=threat_score(c)) for c in characters]
    ranked = sorted(entries, key=lambda entry: -entry.score)
    return ranked[: max(n, 0)]


def _export_row(entry: ThreatEntry) -> str:
    # record fields minus `active`, then the score
    return join_fields(entry.character.to_fields()[:-1] + [str(entry.score)])


def to_export_text(entries: Sequence[ThreatEntry]) -> str:
    """Header line followed by one comma-joined line per entry, newline-joined."""
    return "\n".join([EXPORT_HEADER, *(_export_row(entry) for entry in entries)])


__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_HEADER",
    "threat_score",
    "to_export_text",
    "top_n",
]
