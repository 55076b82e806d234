"""
Bed Ledger for WardShift.

Per-department bed occupancy. Capacities come from a static table; one
department (the coronary unit) is counted as a single aggregate with no
gender split. Departments never updated are assumed fully occupied.
"""

import logging
from typing import Dict, List, Optional

from wardshift.core.event_bus import EventBus
from wardshift.core.exceptions import FormValidationError
from wardshift.core.reference_data import DEPARTMENT_BED_COUNTS, CORONARY_UNIT
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider, EntityKind
from wardshift.models.events import ActivityType, EventType, ServiceType
from wardshift.models.hospital import BedStatus, FreeBeds, BedUpdateForm
from wardshift.services.base_service import BaseService, MutationOutcome, Clock

logger = logging.getLogger(__name__)


class BedLedger(BaseService):
    """Tracks total/occupied/free beds for each department."""

    def __init__(
        self,
        event_bus: EventBus,
        state_manager: StateManager,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None,
        capacities: Optional[Dict[str, int]] = None,
        aggregate_department: str = CORONARY_UNIT
    ):
        super().__init__(ServiceType.BED_LEDGER, event_bus, state_manager, store, clock)
        self.capacities = dict(capacities if capacities is not None else DEPARTMENT_BED_COUNTS)
        self.aggregate_department = aggregate_department

    def is_aggregate(self, department: str) -> bool:
        return department == self.aggregate_department

    def total_beds(self, department: str) -> int:
        if department not in self.capacities:
            raise FormValidationError(f"Unknown department: {department}")
        return self.capacities[department]

    def get_status(self, department: str) -> BedStatus:
        """Stored status, or the all-beds-occupied default."""
        existing = self.state_manager.get_bed_status(department)
        if existing is not None:
            return existing

        total = self.total_beds(department)
        return BedStatus(
            department=department,
            total_beds=total,
            occupied_beds=total,
            free_beds=FreeBeds()
        )

    def all_statuses(self) -> List[BedStatus]:
        """One status per configured department, in table order."""
        return [self.get_status(department) for department in self.capacities]

    async def update_bed_status(self, department: str, form: BedUpdateForm) -> MutationOutcome:
        """
        Replace a department's bed status from the submitted free-bed counts.

        Occupied beds are derived as ``max(0, total - free)``; free counts
        above capacity are accepted as entered.
        """
        total_beds = self.total_beds(department)

        if self.is_aggregate(department):
            total_free = max(0, form.total if form.total is not None else form.male)
            free_beds = FreeBeds(male=total_free, female=0)
            description = (
                f"Updated bed status for {department}: {total_free} free beds (no gender tracking)"
            )
        else:
            free_beds = FreeBeds(male=max(0, form.male), female=max(0, form.female))
            total_free = free_beds.total
            description = (
                f"Updated bed status for {department}: "
                f"{free_beds.male} male, {free_beds.female} female free beds"
            )

        status = BedStatus(
            department=department,
            total_beds=total_beds,
            occupied_beds=max(0, total_beds - total_free),
            free_beds=free_beds
        )
        outcome = MutationOutcome(value=status)

        await self.state_manager.set_bed_status(status)
        await self._persist(outcome, "update", EntityKind.BED_STATUSES, status)
        await self._log_activity(outcome, ActivityType.BED_UPDATED, description, department)
        await self._notify(EventType.BEDS_CHANGED, status.to_summary(), department)
        return outcome
