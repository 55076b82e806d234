"""
Base service class for WardShift domain services.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, Field

from wardshift.core.event_bus import EventBus
from wardshift.core.exceptions import PersistenceError
from wardshift.core.identifiers import create_id
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider, EntityKind
from wardshift.models.events import ActivityLog, ActivityType, EventType, ServiceType
from wardshift.models.task import Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class MutationOutcome(BaseModel):
    """
    Result of a state-changing operation.

    ``activity`` is None when the operation turned out to be a no-op.
    ``sync_errors`` lists store writes that failed after the in-memory
    state had already changed.
    """
    value: Any = None
    activity: Optional[ActivityLog] = None
    generated_tasks: List[Task] = Field(default_factory=list)
    sync_errors: List[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.activity is not None

    @property
    def synced(self) -> bool:
        return not self.sync_errors


class BaseService:
    """
    Shared plumbing for the workspace services.

    Provides:
    - State manager and event bus access
    - Activity logging (in memory, store, realtime feed)
    - Optimistic persistence with error collection
    """

    def __init__(
        self,
        service_type: ServiceType,
        event_bus: EventBus,
        state_manager: StateManager,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None,
        name: Optional[str] = None
    ):
        """
        Initialize the base service.

        Args:
            service_type: Type of this service
            event_bus: Workspace event bus for realtime subscribers
            state_manager: Workspace state container
            store: Backing store; None keeps everything in memory
            clock: Source of "now", injectable for tests
            name: Optional custom name
        """
        self.service_type = service_type
        self.event_bus = event_bus
        self.state_manager = state_manager
        self.store = store
        self.clock: Clock = clock or datetime.now
        self.name = name or service_type.value

        logger.debug(f"Service initialized: {self.name}")

    @property
    def actor(self) -> str:
        """Display name recorded on logs and records."""
        return self.state_manager.user.full_name

    async def _persist(
        self,
        outcome: MutationOutcome,
        operation: str,
        kind: EntityKind,
        payload: Any
    ) -> None:
        """
        Write to the store after the in-memory change.

        The store call runs in a worker thread. Failures are logged and
        recorded on the outcome; in-memory state is left as it is.
        """
        if self.store is None:
            return
        try:
            await asyncio.to_thread(getattr(self.store, operation), kind, payload)
        except PersistenceError as e:
            logger.error(f"[{self.name}] {e.message}")
            outcome.sync_errors.append(e.message)

    async def _log_activity(
        self,
        outcome: MutationOutcome,
        activity_type: ActivityType,
        description: str,
        related_id: Optional[str] = None
    ) -> ActivityLog:
        """Prepend an activity entry, persist it and publish it."""
        log = ActivityLog(
            id=create_id("log"),
            type=activity_type,
            description=description,
            user=self.actor,
            timestamp=self.clock(),
            related_id=related_id
        )
        await self.state_manager.prepend_activity(log)
        outcome.activity = log
        await self._persist(outcome, "create", EntityKind.ACTIVITY_LOGS, log)

        await self.event_bus.emit(
            EventType.ACTIVITY_LOGGED,
            self.service_type,
            payload=log.model_dump(mode="json"),
            correlation_id=related_id
        )
        logger.info(f"[{self.name}] {log.type}: {description}")
        return log

    async def _notify(self, event_type: EventType, payload: dict, correlation_id: Optional[str] = None) -> None:
        await self.event_bus.emit(event_type, self.service_type, payload, correlation_id)
