"""
In-memory character store.

Owns the authoritative collection of records and enforces the invariants on
every mutation: valid fields, unique id, unique handle (case-insensitive).
Mutations are all-or-nothing and report expected failures through
`OperationResult` instead of raising.

Usage:
    from character_dms.store import CharacterStore

    store = CharacterStore()
    if not store.add(character):
        ...
    store.archive(character.id)
    hits = store.search("eu")
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from character_dms.domain.models import Character, normalize_handle
from character_dms.results import FailureKind, OperationResult
from character_dms.utils.logging import get_logger

log = get_logger(__name__)


class CharacterStore:
    """
    Authoritative collection of characters keyed by id.

    Records are copied on the way in and on the way out so the store is the
    only holder of its mutable state.
    """

    def __init__(self) -> None:
        self._records: Dict[int, Character] = {}

    # --- mutations ---

    def add(self, character: Character) -> OperationResult:
        """Insert a new record if it is valid and neither its id nor handle is taken."""
        errors = character.validate()
        if errors:
            return self._reject(FailureKind.VALIDATION, character, *errors)
        if character.id in self._records:
            return self._reject(
                FailureKind.DUPLICATE, character, f"id {character.id} already exists"
            )
        if self._holder_of(character.handle) is not None:
            return self._reject(
                FailureKind.DUPLICATE, character, f"handle '{character.handle}' already exists"
            )

        self._records[character.id] = character.model_copy()
        log.info(
            "Character added",
            extra={"character_id": character.id, "handle": character.handle},
        )
        return OperationResult.success(character.model_copy())

    def update(self, character: Character) -> OperationResult:
        """
        Overwrite every mutable field of the record sharing `character.id`.

        Fails if the id is unknown, the incoming values are invalid, or another
        id already holds the handle.
        """
        existing = self._records.get(character.id)
        if existing is None:
            return self._reject(
                FailureKind.NOT_FOUND, character, f"id {character.id} not found"
            )
        errors = character.validate()
        if errors:
            return self._reject(FailureKind.VALIDATION, character, *errors)
        holder = self._holder_of(character.handle)
        if holder is not None and holder.id != character.id:
            return self._reject(
                FailureKind.DUPLICATE,
                character,
                f"handle '{character.handle}' belongs to id {holder.id}",
            )

        existing.handle = character.handle
        existing.server = character.server
        existing.occupation = character.occupation
        existing.wanted_level = character.wanted_level
        existing.bounty_cents = character.bounty_cents
        existing.reputation = character.reputation
        existing.active = character.active
        log.info(
            "Character updated",
            extra={"character_id": character.id, "handle": character.handle},
        )
        return OperationResult.success(existing.model_copy())

    def remove(self, character_id: int) -> OperationResult:
        """Physically delete a record."""
        removed = self._records.pop(character_id, None)
        if removed is None:
            return self._missing(character_id)
        log.info(
            "Character removed",
            extra={"character_id": character_id, "handle": removed.handle},
        )
        return OperationResult.success(removed)

    def archive(self, character_id: int) -> OperationResult:
        """Logically delete a record by marking it inactive; it stays findable."""
        existing = self._records.get(character_id)
        if existing is None:
            return self._missing(character_id)
        existing.active = False
        log.info(
            "Character archived",
            extra={"character_id": character_id, "handle": existing.handle},
        )
        return OperationResult.success(existing.model_copy())

    # --- lookups ---

    def find_by_id(self, character_id: int) -> Optional[Character]:
        found = self._records.get(character_id)
        return found.model_copy() if found is not None else None

    def find_by_handle(self, handle: Optional[str]) -> Optional[Character]:
        """Exact, case-insensitive handle match."""
        found = self._holder_of(handle)
        return found.model_copy() if found is not None else None

    def list_active(self) -> List[Character]:
        return [c for c in self.all() if c.active]

    def search(self, query: Optional[str]) -> List[Character]:
        """
        Active records whose handle, server or occupation contains `query`.

        Matching is case-insensitive; an empty or None query matches every
        active record. Results are ordered by id.
        """
        needle = (query or "").strip().casefold()
        return [
            c
            for c in self.list_active()
            if needle in c.handle.casefold()
            or needle in c.server.value.casefold()
            or needle in c.occupation.casefold()
        ]

    def all(self) -> List[Character]:
        """Every record, archived included, ordered by id."""
        return [self._records[key].model_copy() for key in sorted(self._records)]

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._records

    def __iter__(self) -> Iterator[Character]:
        return iter(self.all())

    # --- internals ---

    def _holder_of(self, handle: Optional[str]) -> Optional[Character]:
        key = normalize_handle(handle)
        for record in self._records.values():
            if record.handle_key == key:
                return record
        return None

    def _reject(self, kind: FailureKind, character: Character, *reasons: str) -> OperationResult:
        log.debug(
            "Character rejected",
            extra={
                "character_id": character.id,
                "handle": character.handle,
                "kind": kind.value,
                "reasons": list(reasons),
            },
        )
        return OperationResult.failure(kind, *reasons)

    def _missing(self, character_id: int) -> OperationResult:
        log.debug(
            "Character not found",
            extra={"character_id": character_id, "kind": FailureKind.NOT_FOUND.value},
        )
        return OperationResult.failure(FailureKind.NOT_FOUND, f"id {character_id} not found")


__all__ = ["CharacterStore"]
