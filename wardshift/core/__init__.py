"""
Core package for WardShift backend.
"""

from .config import Config, SchedulingRules
from .event_bus import EventBus
from .state_manager import StateManager
from .identifiers import create_id

__all__ = [
    "Config",
    "SchedulingRules",
    "EventBus",
    "StateManager",
    "create_id"
]
