"""
Shift Tracker for WardShift.

Lifecycle of the single active shift held by a workspace: start, join,
leave, end. Every operation is a silent no-op when its precondition fails
(a shift already running, or a shift id that is not the active one).
"""

import logging
from typing import Optional

from wardshift.core.event_bus import EventBus
from wardshift.core.identifiers import create_id
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider, EntityKind
from wardshift.models.events import ActivityType, EventType, ServiceType
from wardshift.models.shift import ShiftSession
from wardshift.services.base_service import BaseService, MutationOutcome, Clock
from wardshift.services.bed_ledger import BedLedger

logger = logging.getLogger(__name__)


class ShiftTracker(BaseService):
    """Owns the active shift and its team membership."""

    def __init__(
        self,
        event_bus: EventBus,
        state_manager: StateManager,
        bed_ledger: Optional[BedLedger] = None,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(ServiceType.SHIFT_TRACKER, event_bus, state_manager, store, clock)
        self.bed_ledger = bed_ledger

    def current_shift(self) -> Optional[ShiftSession]:
        return self.state_manager.get_current_shift()

    def _matching_shift(self, shift_id: str) -> Optional[ShiftSession]:
        shift = self.current_shift()
        if shift is None or shift.id != shift_id:
            logger.debug(f"Shift {shift_id} is not the active shift; ignoring")
            return None
        return shift

    async def _publish_shift(self, shift: ShiftSession, action: str) -> None:
        await self._notify(
            EventType.SHIFT_CHANGED,
            {"shift": shift.model_dump(mode="json"), "action": action},
            shift.id
        )

    async def start_shift(self, notes: str = "") -> MutationOutcome:
        """Start a shift led by the signed-in user, unless one is already active."""
        existing = self.current_shift()
        if existing is not None and existing.is_active:
            logger.info(f"Shift {existing.id} already active; start ignored")
            return MutationOutcome(value=existing)

        snapshot = self.bed_ledger.all_statuses() if self.bed_ledger else []
        shift = ShiftSession(
            id=create_id("shift"),
            user_name=self.actor,
            start_time=self.clock(),
            is_active=True,
            team_members=[self.actor],
            notes=(notes or "").strip(),
            bed_statuses=snapshot,
            end_approvals=[]
        )
        outcome = MutationOutcome(value=shift)

        await self.state_manager.set_current_shift(shift)
        await self._persist(outcome, "create", EntityKind.SHIFTS, shift)
        await self._log_activity(outcome, ActivityType.SHIFT_STARTED, "Started shift", shift.id)
        await self._publish_shift(shift, "started")
        return outcome

    async def join_shift(self, shift_id: str, user_name: str) -> MutationOutcome:
        """Add a team member. Joining twice leaves membership unchanged."""
        shift = self._matching_shift(shift_id)
        if shift is None or shift.has_member(user_name):
            return MutationOutcome(value=shift)

        shift = shift.model_copy(update={"team_members": shift.team_members + [user_name]})
        outcome = MutationOutcome(value=shift)

        await self.state_manager.set_current_shift(shift)
        await self._persist(outcome, "update", EntityKind.SHIFTS, shift)
        await self._log_activity(outcome, ActivityType.SHIFT_JOINED, f"{user_name} joined the shift", shift.id)
        await self._publish_shift(shift, "joined")
        return outcome

    async def leave_shift(self, shift_id: str, user_name: str) -> MutationOutcome:
        """Remove a team member."""
        shift = self._matching_shift(shift_id)
        if shift is None or not shift.has_member(user_name):
            return MutationOutcome(value=shift)

        members = [m for m in shift.team_members if m != user_name]
        shift = shift.model_copy(update={"team_members": members})
        outcome = MutationOutcome(value=shift)

        await self.state_manager.set_current_shift(shift)
        await self._persist(outcome, "update", EntityKind.SHIFTS, shift)
        await self._log_activity(outcome, ActivityType.SHIFT_LEFT, f"{user_name} left the shift", shift.id)
        await self._publish_shift(shift, "left")
        return outcome

    async def end_shift(self, shift_id: str) -> MutationOutcome:
        """Forget the active shift. A mismatched id changes nothing."""
        shift = self._matching_shift(shift_id)
        if shift is None:
            return MutationOutcome()

        ended = shift.model_copy(update={"is_active": False})
        outcome = MutationOutcome(value=ended)

        await self.state_manager.set_current_shift(None)
        await self._persist(outcome, "update", EntityKind.SHIFTS, ended)
        await self._log_activity(outcome, ActivityType.SHIFT_ENDED, "Ended shift", shift.id)
        await self._publish_shift(ended, "ended")
        return outcome
