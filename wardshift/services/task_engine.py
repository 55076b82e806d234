"""
Task Engine for WardShift.

Owns the ward task list: manual CRUD plus the policy rules that generate
tasks from patient events.

Auto-generation rules:
- Sheath removal after PCI, one task per access site. With periprocedural
  heparin the sheath comes out after 2h (radial) or 6h (femoral) at High
  priority; without heparin it is due immediately at Critical priority.
- Follow-up paperwork: an unfinished discharge report is due in 24h (Low),
  an unfinished death report in 4h (High).
"""

import logging
from datetime import timedelta
from typing import List, Optional

from wardshift.core.config import SchedulingRules
from wardshift.core.event_bus import EventBus
from wardshift.core.exceptions import FormValidationError, NotFoundError
from wardshift.core.identifiers import create_id
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider, EntityKind
from wardshift.models.events import ActivityType, EventType, ServiceType
from wardshift.models.patient import Patient, Priority, DischargedPatient, DeceasedPatient
from wardshift.models.task import Task, TaskForm
from wardshift.services.base_service import BaseService, MutationOutcome, Clock
from wardshift.services.validation import require_fields, clean, to_local_time

logger = logging.getLogger(__name__)

RADIAL = "radial"
FEMORAL = "femoral"


class TaskEngine(BaseService):
    """Manual task CRUD and policy-driven task generation."""

    def __init__(
        self,
        event_bus: EventBus,
        state_manager: StateManager,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(ServiceType.TASK_ENGINE, event_bus, state_manager, store, clock)

    # ========================
    # Queries
    # ========================

    def list_tasks(self) -> List[Task]:
        return self.state_manager.get_all_tasks()

    def pending_tasks(self) -> List[Task]:
        return [t for t in self.list_tasks() if not t.completed]

    def completed_tasks(self) -> List[Task]:
        return [t for t in self.list_tasks() if t.completed]

    def get_task(self, task_id: str) -> Task:
        task = self.state_manager.get_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    # ========================
    # Manual CRUD
    # ========================

    def _build_task(self, form: TaskForm, task_id: str, added_by: str, added_at, existing: Optional[Task] = None) -> Task:
        require_fields({"Title": form.title}, "Please enter a task title")
        if form.due_time is None:
            raise FormValidationError("Please choose a due time")

        # Patients leave the roster on discharge/death; their tasks keep the name
        patient_name = None
        if form.patient_id:
            patient = self.state_manager.get_patient(form.patient_id)
            if patient is not None:
                patient_name = patient.name
            elif existing is not None and existing.patient_id == form.patient_id:
                patient_name = existing.patient_name

        return Task(
            id=task_id,
            title=clean(form.title),
            description=clean(form.description),
            patient_id=form.patient_id,
            patient_name=patient_name,
            due_time=to_local_time(form.due_time),
            priority=form.priority,
            completed=form.completed,
            added_by=added_by,
            added_at=added_at,
            auto_generated=False
        )

    async def add_task(self, form: TaskForm) -> MutationOutcome:
        """Add a manually entered task."""
        task = self._build_task(form, create_id("task"), self.actor, self.clock())
        outcome = MutationOutcome(value=task)

        await self.state_manager.add_task(task)
        await self._persist(outcome, "create", EntityKind.TASKS, task)
        await self._log_activity(outcome, ActivityType.TASK_ADDED, f"Added task: {task.title}", task.id)
        await self._notify(EventType.TASKS_CHANGED, {"task_id": task.id, "action": "added"}, task.id)
        return outcome

    async def update_task(self, task_id: str, form: TaskForm) -> MutationOutcome:
        """Replace a task by id, keeping its origin metadata."""
        existing = self.get_task(task_id)
        task = self._build_task(form, existing.id, existing.added_by, existing.added_at, existing)
        task = task.model_copy(update={"auto_generated": existing.auto_generated})
        outcome = MutationOutcome(value=task)

        await self.state_manager.replace_task(task)
        await self._persist(outcome, "update", EntityKind.TASKS, task)
        await self._log_activity(outcome, ActivityType.TASK_UPDATED, f"Updated task: {task.title}", task.id)
        await self._notify(EventType.TASKS_CHANGED, {"task_id": task.id, "action": "updated"}, task.id)
        return outcome

    async def toggle_task(self, task_id: str) -> MutationOutcome:
        """Flip a task's completion flag."""
        existing = self.get_task(task_id)
        task = existing.model_copy(update={"completed": not existing.completed})
        outcome = MutationOutcome(value=task)

        await self.state_manager.replace_task(task)
        await self._persist(outcome, "update", EntityKind.TASKS, task)
        if task.completed:
            await self._log_activity(outcome, ActivityType.TASK_COMPLETED, f"Completed task: {task.title}", task.id)
        else:
            await self._log_activity(outcome, ActivityType.TASK_UPDATED, f"Reopened task: {task.title}", task.id)
        await self._notify(EventType.TASKS_CHANGED, {"task_id": task.id, "action": "toggled"}, task.id)
        return outcome

    async def delete_task(self, task_id: str) -> MutationOutcome:
        task = await self.state_manager.remove_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        outcome = MutationOutcome(value=task)

        await self._persist(outcome, "delete", EntityKind.TASKS, task.id)
        await self._log_activity(outcome, ActivityType.TASK_DELETED, f"Deleted task: {task.title}", task.id)
        await self._notify(EventType.TASKS_CHANGED, {"task_id": task.id, "action": "deleted"}, task.id)
        return outcome

    # ========================
    # Auto-generation
    # ========================

    async def _enqueue(self, task: Task, outcome: MutationOutcome) -> Task:
        """Store a generated task. Generated tasks do not get their own log entry."""
        await self.state_manager.add_task(task)
        await self._persist(outcome, "create", EntityKind.TASKS, task)
        outcome.generated_tasks.append(task)
        await self._notify(EventType.TASKS_CHANGED, {"task_id": task.id, "action": "generated"}, task.id)
        logger.info(f"Generated task '{task.title}' due {task.due_time.isoformat()}")
        return task

    def build_sheath_removal_task(self, patient: Patient, access_type: str, with_heparin: bool) -> Task:
        """Build the sheath removal task for one access site."""
        now = self.clock()
        if with_heparin:
            hours = (
                SchedulingRules.RADIAL_SHEATH_HEPARIN_HOURS
                if access_type == RADIAL
                else SchedulingRules.FEMORAL_SHEATH_HEPARIN_HOURS
            )
            due_time = now + timedelta(hours=hours)
            timing = f"({hours} hours post-heparin)"
        else:
            due_time = now
            timing = "(immediate - no heparin)"

        return Task(
            id=create_id("task"),
            title=f"{access_type.capitalize()} Sheath Removal",
            description=f"Remove {access_type} sheath for patient {patient.name} in room {patient.room_number} {timing}",
            patient_id=patient.id,
            patient_name=patient.name,
            due_time=due_time,
            priority=Priority.HIGH if with_heparin else Priority.CRITICAL,
            completed=False,
            added_by=SchedulingRules.AUTO_TASK_AUTHOR,
            added_at=now,
            auto_generated=True
        )

    async def generate_sheath_removal_tasks(self, patient: Patient, outcome: MutationOutcome) -> List[Task]:
        """One task per access flag set on a newly added patient."""
        access = patient.pci_access
        generated = []
        for access_type, used in ((RADIAL, access.radial), (FEMORAL, access.femoral)):
            if used:
                task = self.build_sheath_removal_task(patient, access_type, access.periprocedural_heparin)
                generated.append(await self._enqueue(task, outcome))
        return generated

    async def generate_discharge_report_task(self, record: DischargedPatient, outcome: MutationOutcome) -> Task:
        now = self.clock()
        task = Task(
            id=create_id("task"),
            title="Generate Discharge Report",
            description=f"Generate discharge report for {record.name} from room {record.room_number}",
            due_time=now + timedelta(hours=SchedulingRules.DISCHARGE_REPORT_HOURS),
            priority=Priority.LOW,
            added_by=SchedulingRules.AUTO_TASK_AUTHOR,
            added_at=now,
            auto_generated=True
        )
        return await self._enqueue(task, outcome)

    async def generate_death_report_task(self, record: DeceasedPatient, outcome: MutationOutcome) -> Task:
        now = self.clock()
        task = Task(
            id=create_id("task"),
            title="Generate Death Report",
            description=f"Generate death report for {record.name} from room {record.room_number}",
            due_time=now + timedelta(hours=SchedulingRules.DEATH_REPORT_HOURS),
            priority=Priority.HIGH,
            added_by=SchedulingRules.AUTO_TASK_AUTHOR,
            added_at=now,
            auto_generated=True
        )
        return await self._enqueue(task, outcome)
