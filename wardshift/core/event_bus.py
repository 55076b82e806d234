"""
Event bus for a WardShift workspace.
Services publish state changes; realtime subscribers (the websocket feed)
listen without ever writing back into state.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Any, Optional

from wardshift.core.identifiers import create_id
from wardshift.models.events import EventType, WorkspaceEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    Async pub/sub bus scoped to one workspace.

    Supports:
    - Publishing events to all subscribers
    - Subscribing to specific event types or to everything
    """

    def __init__(self):
        """Initialize the event bus."""
        self._subscribers: Dict[EventType, List[Callable]] = {
            event_type: [] for event_type in EventType
        }
        self._global_subscribers: List[Callable] = []
        self._is_running = True

        logger.debug("EventBus initialized")

    async def publish(self, event: WorkspaceEvent) -> None:
        """
        Publish an event to all subscribers.

        Subscriber failures are logged and never reach the publisher.

        Args:
            event: The event to publish
        """
        if not self._is_running:
            logger.debug("EventBus is stopped, ignoring event")
            return

        logger.debug(f"Publishing event: {event.event_type.value} from {event.source.value}")

        callbacks = self._subscribers.get(event.event_type, []) + self._global_subscribers
        tasks = []
        for callback in callbacks:
            if asyncio.iscoroutinefunction(callback):
                tasks.append(self._safe_call(callback, event))
            else:
                tasks.append(self._safe_call_sync(callback, event))

        if tasks:
            await asyncio.gather(*tasks)

    async def emit(
        self,
        event_type: EventType,
        source,
        payload: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None
    ) -> WorkspaceEvent:
        """Build and publish an event in one step."""
        event = WorkspaceEvent(
            id=create_id("evt"),
            event_type=event_type,
            source=source,
            payload=payload or {},
            correlation_id=correlation_id
        )
        await self.publish(event)
        return event

    async def _safe_call(self, callback: Callable, event: WorkspaceEvent) -> None:
        """Safely call an async callback, catching exceptions."""
        try:
            await callback(event)
        except Exception as e:
            logger.error(f"Error in event callback: {e}", exc_info=True)

    async def _safe_call_sync(self, callback: Callable, event: WorkspaceEvent) -> None:
        """Safely call a sync callback."""
        try:
            callback(event)
        except Exception as e:
            logger.error(f"Error in sync event callback: {e}", exc_info=True)

    def subscribe(self, event_type: EventType, callback: Callable[[WorkspaceEvent], Any]) -> None:
        """
        Subscribe to a specific event type.

        Args:
            event_type: Type of event to subscribe to
            callback: Function to call when event occurs
        """
        if callback not in self._subscribers[event_type]:
            self._subscribers[event_type].append(callback)
            logger.debug(f"Subscribed to {event_type.value}")

    def subscribe_all(self, callback: Callable[[WorkspaceEvent], Any]) -> None:
        """Subscribe to all events."""
        if callback not in self._global_subscribers:
            self._global_subscribers.append(callback)

    def unsubscribe_all(self, callback: Callable) -> None:
        """Remove a callback from all subscriptions."""
        if callback in self._global_subscribers:
            self._global_subscribers.remove(callback)

        for subscribers in self._subscribers.values():
            if callback in subscribers:
                subscribers.remove(callback)

    def stop(self) -> None:
        """Stop the event bus from processing events."""
        self._is_running = False
        self._global_subscribers.clear()
        for subscribers in self._subscribers.values():
            subscribers.clear()
        logger.debug("EventBus stopped")
