"""
Domain package for the Character DMS.

Exports the record types shared by the store, the ranking report and the
import/export adapters. Keep this package focused on data definitions and
validation concerns.
"""

from character_dms.domain.models import Character, Server, ThreatEntry

__all__ = [
    "Character",
    "Server",
    "ThreatEntry",
]
