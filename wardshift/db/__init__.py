"""
Database package for WardShift.
"""

from .connection import Base, init_db, get_db, get_session_factory, build_session_factory
from .repository import PersistenceProvider, EntityKind

__all__ = [
    "Base",
    "init_db",
    "get_db",
    "get_session_factory",
    "build_session_factory",
    "PersistenceProvider",
    "EntityKind"
]
