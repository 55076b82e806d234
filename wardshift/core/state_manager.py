"""
State manager for a WardShift workspace.
Single owner of all in-memory state for one logged-in user.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any

from wardshift.models.user import User
from wardshift.models.shift import ShiftSession
from wardshift.models.patient import Patient, DischargedPatient, DeceasedPatient
from wardshift.models.task import Task
from wardshift.models.hospital import BedStatus
from wardshift.models.events import ActivityLog

logger = logging.getLogger(__name__)


class StateManager:
    """
    Central state container for one workspace.

    Maintains:
    - The signed-in user and the active shift
    - Active patient roster and terminal (discharged/deceased) records
    - Task list
    - Bed statuses per department
    - Activity log, most recent first

    Business rules live in the services; this class only stores.
    """

    def __init__(self, user: User):
        """Initialize the state manager for a signed-in user."""
        self.user = user
        self._current_shift: Optional[ShiftSession] = None
        self._patients: Dict[str, Patient] = {}
        self._discharged: List[DischargedPatient] = []
        self._deceased: List[DeceasedPatient] = []
        self._tasks: Dict[str, Task] = {}
        self._bed_statuses: Dict[str, BedStatus] = {}
        self._activity_logs: List[ActivityLog] = []
        self._lock = asyncio.Lock()
        self._last_updated: Dict[str, datetime] = {}

        logger.info(f"StateManager initialized for {user.username}")

    # ========================
    # Shift
    # ========================

    def get_current_shift(self) -> Optional[ShiftSession]:
        return self._current_shift

    async def set_current_shift(self, shift: Optional[ShiftSession]) -> None:
        async with self._lock:
            self._current_shift = shift
            self._last_updated["shift"] = datetime.now()

    # ========================
    # Patient Management
    # ========================

    async def add_patient(self, patient: Patient) -> None:
        """Add a new patient to the roster."""
        async with self._lock:
            self._patients[patient.id] = patient
            self._last_updated["patients"] = datetime.now()
            logger.debug(f"Stored patient: {patient.id}")

    async def replace_patient(self, patient: Patient) -> None:
        """Replace an existing patient, keeping its roster position."""
        async with self._lock:
            self._patients[patient.id] = patient
            self._last_updated["patients"] = datetime.now()

    async def remove_patient(self, patient_id: str) -> Optional[Patient]:
        """Remove a patient from the roster."""
        async with self._lock:
            patient = self._patients.pop(patient_id, None)
            if patient:
                self._last_updated["patients"] = datetime.now()
                logger.debug(f"Removed patient: {patient_id}")
            return patient

    def get_patient(self, patient_id: str) -> Optional[Patient]:
        return self._patients.get(patient_id)

    def get_all_patients(self) -> List[Patient]:
        """All active patients in insertion order."""
        return list(self._patients.values())

    async def add_discharged(self, record: DischargedPatient) -> None:
        async with self._lock:
            self._discharged.append(record)

    async def add_deceased(self, record: DeceasedPatient) -> None:
        async with self._lock:
            self._deceased.append(record)

    def get_discharged(self) -> List[DischargedPatient]:
        return list(self._discharged)

    def get_deceased(self) -> List[DeceasedPatient]:
        return list(self._deceased)

    # ========================
    # Task Management
    # ========================

    async def add_task(self, task: Task) -> None:
        async with self._lock:
            self._tasks[task.id] = task
            self._last_updated["tasks"] = datetime.now()

    async def replace_task(self, task: Task) -> None:
        async with self._lock:
            self._tasks[task.id] = task
            self._last_updated["tasks"] = datetime.now()

    async def remove_task(self, task_id: str) -> Optional[Task]:
        async with self._lock:
            task = self._tasks.pop(task_id, None)
            if task:
                self._last_updated["tasks"] = datetime.now()
            return task

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def get_all_tasks(self) -> List[Task]:
        return list(self._tasks.values())

    # ========================
    # Bed Management
    # ========================

    async def set_bed_status(self, status: BedStatus) -> None:
        async with self._lock:
            self._bed_statuses[status.department] = status
            self._last_updated["beds"] = datetime.now()

    def get_bed_status(self, department: str) -> Optional[BedStatus]:
        return self._bed_statuses.get(department)

    # ========================
    # Activity Log
    # ========================

    async def prepend_activity(self, log: ActivityLog) -> None:
        """Record an activity; the newest entry is always first."""
        async with self._lock:
            self._activity_logs.insert(0, log)

    def get_activity_logs(self, limit: Optional[int] = None) -> List[ActivityLog]:
        logs = list(self._activity_logs)
        return logs[:limit] if limit else logs

    # ========================
    # State Summary
    # ========================

    def get_state_summary(self) -> Dict[str, Any]:
        """Counts behind the home dashboard."""
        patients = self.get_all_patients()
        tasks = self.get_all_tasks()
        return {
            "user": self.user.full_name,
            "shift_active": self._current_shift is not None,
            "patients": {
                "total": len(patients),
                "new": sum(1 for p in patients if p.is_new_patient),
                "last_updated": self._last_updated.get("patients")
            },
            "tasks": {
                "total": len(tasks),
                "pending": sum(1 for t in tasks if not t.completed),
                "completed": sum(1 for t in tasks if t.completed),
                "last_updated": self._last_updated.get("tasks")
            },
            "discharges": len(self._discharged),
            "deaths": len(self._deceased),
            "activity_entries": len(self._activity_logs)
        }

    async def clear_all(self) -> None:
        """Discard all state (logout)."""
        async with self._lock:
            self._current_shift = None
            self._patients.clear()
            self._discharged.clear()
            self._deceased.clear()
            self._tasks.clear()
            self._bed_statuses.clear()
            self._activity_logs.clear()
            self._last_updated.clear()
            logger.info(f"State cleared for {self.user.username}")
