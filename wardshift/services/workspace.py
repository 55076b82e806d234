"""
Workspaces and the session registry.

A workspace is everything one signed-in user owns: the state container,
its event bus and the domain services wired to them. Logging out closes
the workspace and discards all of it.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from wardshift.core.event_bus import EventBus
from wardshift.core.identifiers import create_session_token
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider
from wardshift.models.user import User
from wardshift.services.base_service import Clock
from wardshift.services.bed_ledger import BedLedger
from wardshift.services.patient_registry import PatientRegistry
from wardshift.services.shift_tracker import ShiftTracker
from wardshift.services.task_engine import TaskEngine

logger = logging.getLogger(__name__)


class Workspace:
    """State and services for one logged-in user."""

    def __init__(
        self,
        user: User,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None,
        capacities: Optional[Dict[str, int]] = None
    ):
        self.user = user
        self.opened_at = datetime.now()
        self.event_bus = EventBus()
        self.state = StateManager(user)

        self.bed_ledger = BedLedger(self.event_bus, self.state, store, clock, capacities=capacities)
        self.task_engine = TaskEngine(self.event_bus, self.state, store, clock)
        self.patients = PatientRegistry(self.event_bus, self.state, self.task_engine, store, clock)
        self.shifts = ShiftTracker(self.event_bus, self.state, self.bed_ledger, store, clock)

    async def close(self) -> None:
        await self.state.clear_all()
        self.event_bus.stop()


class SessionRegistry:
    """Maps session tokens to open workspaces."""

    def __init__(self, store: Optional[PersistenceProvider] = None, clock: Optional[Clock] = None):
        self._workspaces: Dict[str, Workspace] = {}
        self._store = store
        self._clock = clock

    def configure(self, store: Optional[PersistenceProvider], clock: Optional[Clock] = None) -> None:
        """Set the store (and clock) used by workspaces opened from now on."""
        self._store = store
        self._clock = clock

    def open(self, user: User) -> str:
        token = create_session_token()
        self._workspaces[token] = Workspace(user, self._store, self._clock)
        logger.info(f"Opened workspace for {user.username}")
        return token

    def get(self, token: Optional[str]) -> Optional[Workspace]:
        if not token:
            return None
        return self._workspaces.get(token)

    async def close(self, token: str) -> bool:
        workspace = self._workspaces.pop(token, None)
        if workspace is None:
            return False
        await workspace.close()
        logger.info(f"Closed workspace for {workspace.user.username}")
        return True

    async def close_all(self) -> None:
        for token in list(self._workspaces):
            await self.close(token)

    @property
    def open_count(self) -> int:
        return len(self._workspaces)

