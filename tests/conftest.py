"""
Pytest configuration for the Character DMS.

Provides fixtures for:
- Character construction with sensible defaults
- Pre-populated stores
- Isolated settings and logging state
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest

from character_dms.config import get_settings
from character_dms.domain.models import Character, Server
from character_dms.store import CharacterStore

SETTINGS_ENV_VARS = [
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "DMS_DATA_FILE",
    "DMS_EXPORT_DIR",
    "DMS_TOP_N",
    "DMS_REPORT_INCLUDE_ARCHIVED",
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """
    Clear settings env vars and the settings cache around every test.

    Runs from an empty temp directory so a developer's `.env` is never read.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """
    CLI commands reconfigure the root logger; drop the stream handlers they add.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def make_character() -> Callable[..., Character]:
    """
    Factory for valid characters; override any field by keyword.
    """

    def _make(character_id: int = 1, handle: str | None = None, **overrides) -> Character:
        fields = {
            "id": character_id,
            "handle": handle if handle is not None else f"Player{character_id}",
            "server": Server.NA,
            "occupation": "Courier",
            "wanted_level": 1,
            "bounty_cents": 500,
            "reputation": 10,
            "active": True,
        }
        fields.update(overrides)
        return Character(**fields)

    return _make


@pytest.fixture
def roster(make_character: Callable[..., Character]) -> list[Character]:
    """
    Four characters, inserted out of id order; one archived.
    """
    return [
        make_character(3, "LouLou", server=Server.NA, occupation="Gangster", wanted_level=2, bounty_cents=200, reputation=40),
        make_character(1, "Doofnita", server=Server.EU, occupation="Troll", wanted_level=3, bounty_cents=500, reputation=80),
        make_character(2, "AnitaBath", server=Server.AS, occupation="Catfish", wanted_level=5, bounty_cents=1000, reputation=95),
        make_character(4, "Madoogin", server=Server.EU, occupation="Streamer", wanted_level=1, bounty_cents=300, reputation=-60, active=False),
    ]


@pytest.fixture
def store(roster: list[Character]) -> CharacterStore:
    """
    Store pre-populated with the roster fixture.
    """
    populated = CharacterStore()
    for character in roster:
        assert populated.add(character)
    return populated
