"""
Patient Registry for WardShift.

Owns the active roster. Discharge and death move a patient off the roster
into a terminal record; delete removes it without a trace.
"""

import logging
from typing import Dict, List, Optional

from wardshift.core.event_bus import EventBus
from wardshift.core.exceptions import NotFoundError
from wardshift.core.identifiers import create_id
from wardshift.core.reference_data import OTHER_DEPARTMENT
from wardshift.core.state_manager import StateManager
from wardshift.db.repository import PersistenceProvider, EntityKind
from wardshift.models.events import ActivityType, EventType, ServiceType
from wardshift.models.patient import (
    Patient,
    PatientForm,
    DischargeForm,
    DeathForm,
    DischargedPatient,
    DeceasedPatient
)
from wardshift.services.base_service import BaseService, MutationOutcome, Clock
from wardshift.services.task_engine import TaskEngine
from wardshift.services.validation import require_fields, parse_birth_year, clean

logger = logging.getLogger(__name__)


def group_by_department(patients: List[Patient]) -> Dict[str, List[Patient]]:
    """Group patients by department, departments in order of first appearance."""
    groups: Dict[str, List[Patient]] = {}
    for patient in patients:
        groups.setdefault(patient.department or OTHER_DEPARTMENT, []).append(patient)
    return groups


class PatientRegistry(BaseService):
    """Active patient roster plus discharged and deceased records."""

    def __init__(
        self,
        event_bus: EventBus,
        state_manager: StateManager,
        task_engine: TaskEngine,
        store: Optional[PersistenceProvider] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(ServiceType.PATIENT_REGISTRY, event_bus, state_manager, store, clock)
        self.task_engine = task_engine

    # ========================
    # Queries
    # ========================

    def list_patients(self) -> List[Patient]:
        return self.state_manager.get_all_patients()

    def get_patient(self, patient_id: str) -> Patient:
        patient = self.state_manager.get_patient(patient_id)
        if patient is None:
            raise NotFoundError("Patient not found")
        return patient

    def patients_by_department(self) -> Dict[str, List[Patient]]:
        return group_by_department(self.list_patients())

    def patients_in_department(self, department: str) -> List[Patient]:
        return [p for p in self.list_patients() if (p.department or OTHER_DEPARTMENT) == department]

    def list_discharged(self) -> List[DischargedPatient]:
        return self.state_manager.get_discharged()

    def list_deceased(self) -> List[DeceasedPatient]:
        return self.state_manager.get_deceased()

    # ========================
    # Roster changes
    # ========================

    def _build_patient(self, form: PatientForm, existing: Optional[Patient] = None) -> Patient:
        """Validate a patient form and build the record. Nothing is stored here."""
        require_fields(
            {
                "Name": form.name,
                "Birth Year": form.birth_year,
                "Country": form.country,
                "Diagnosis": form.diagnosis,
                "Department": form.department,
                "Room Number": form.room_number,
            }
        )
        now = self.clock()
        current_year = now.year
        birth_year = parse_birth_year(form.birth_year, current_year)

        return Patient(
            id=existing.id if existing else create_id("patient"),
            name=clean(form.name),
            age=current_year - birth_year,
            birth_year=birth_year,
            gender=form.gender,
            country=clean(form.country),
            condition=clean(form.diagnosis),
            symptoms=clean(form.chief_complaints),
            ecg=clean(form.ecg),
            lab_results=clean(form.lab_results),
            pci_data=clean(form.pci_data),
            pci_access=form.pci_access,
            risk_factors=form.risk_factors,
            allergies=clean(form.allergies),
            medications=clean(form.medications),
            notes=clean(form.notes),
            department=form.department,
            room_number=clean(form.room_number),
            priority=form.priority,
            added_by=existing.added_by if existing else self.actor,
            added_at=existing.added_at if existing else now,
            is_new_patient=form.is_new_patient
        )

    @staticmethod
    def _describe(verb: str, patient: Patient) -> str:
        kind = "new" if patient.is_new_patient else "existing"
        return f"{verb} {kind} patient: {patient.name} ({patient.condition}) in {patient.department}"

    async def add_patient(self, form: PatientForm) -> MutationOutcome:
        """Register a patient and schedule sheath removal for any PCI access."""
        patient = self._build_patient(form)
        outcome = MutationOutcome(value=patient)

        await self.state_manager.add_patient(patient)
        await self._persist(outcome, "create", EntityKind.PATIENTS, patient)
        await self._log_activity(outcome, ActivityType.PATIENT_ADDED, self._describe("Added", patient), patient.id)

        if patient.pci_access.has_access:
            await self.task_engine.generate_sheath_removal_tasks(patient, outcome)

        await self._notify(EventType.PATIENTS_CHANGED, {"patient_id": patient.id, "action": "added"}, patient.id)
        return outcome

    async def update_patient(self, patient_id: str, form: PatientForm) -> MutationOutcome:
        """Replace a patient's details, keeping id and admission metadata."""
        existing = self.get_patient(patient_id)
        patient = self._build_patient(form, existing)
        outcome = MutationOutcome(value=patient)

        await self.state_manager.replace_patient(patient)
        await self._persist(outcome, "update", EntityKind.PATIENTS, patient)
        await self._log_activity(outcome, ActivityType.PATIENT_UPDATED, self._describe("Updated", patient), patient.id)
        await self._notify(EventType.PATIENTS_CHANGED, {"patient_id": patient.id, "action": "updated"}, patient.id)
        return outcome

    async def delete_patient(self, patient_id: str) -> MutationOutcome:
        """Hard delete; no terminal record is kept."""
        patient = await self.state_manager.remove_patient(patient_id)
        if patient is None:
            raise NotFoundError("Patient not found")
        outcome = MutationOutcome(value=patient)

        await self._persist(outcome, "delete", EntityKind.PATIENTS, patient.id)
        await self._log_activity(
            outcome,
            ActivityType.PATIENT_DELETED,
            f"Deleted patient: {patient.name} from {patient.department}",
            patient.id
        )
        await self._notify(EventType.PATIENTS_CHANGED, {"patient_id": patient.id, "action": "deleted"}, patient.id)
        return outcome

    async def _retire(self, patient_id: Optional[str], outcome: MutationOutcome) -> Optional[Patient]:
        """Take the source patient off the roster, if the form named one."""
        if not patient_id:
            return None
        patient = await self.state_manager.remove_patient(patient_id)
        if patient is None:
            logger.warning(f"Source patient {patient_id} not on roster; terminal record kept unlinked")
            return None
        await self._persist(outcome, "delete", EntityKind.PATIENTS, patient.id)
        return patient

    async def discharge_patient(self, form: DischargeForm) -> MutationOutcome:
        """Record a discharge; queues the discharge report when it is not done yet."""
        require_fields(
            {
                "Name": form.name,
                "Birth Year": form.birth_year,
                "Diagnosis": form.diagnosis,
                "Room Number": form.room_number,
            },
            "Please fill in all required fields"
        )
        now = self.clock()
        birth_year = parse_birth_year(form.birth_year, now.year)

        outcome = MutationOutcome()
        source = await self._retire(form.patient_id, outcome)

        record = DischargedPatient(
            id=create_id("discharge"),
            name=clean(form.name),
            birth_year=birth_year,
            diagnosis=clean(form.diagnosis),
            room_number=clean(form.room_number),
            notes=clean(form.notes),
            department=source.department if source else "",
            discharge_report_done=form.discharge_report_done,
            discharged_by=self.actor,
            discharged_at=now,
            source_patient_id=source.id if source else None
        )
        outcome.value = record

        await self.state_manager.add_discharged(record)
        await self._persist(outcome, "create", EntityKind.DISCHARGED, record)

        if not record.discharge_report_done:
            await self.task_engine.generate_discharge_report_task(record, outcome)

        await self._log_activity(outcome, ActivityType.PATIENT_DISCHARGED, f"Discharged patient: {record.name}", record.id)
        await self._notify(EventType.PATIENTS_CHANGED, {"record_id": record.id, "action": "discharged"}, record.id)
        return outcome

    async def record_death(self, form: DeathForm) -> MutationOutcome:
        """Record a death; queues the death report when it is not done yet."""
        require_fields(
            {
                "Name": form.name,
                "Birth Year": form.birth_year,
                "Country": form.country,
                "Department": form.department,
                "Room Number": form.room_number,
                "Diagnosis": form.diagnosis,
            },
            "Please fill in all required fields"
        )
        now = self.clock()
        birth_year = parse_birth_year(form.birth_year, now.year)

        outcome = MutationOutcome()
        source = await self._retire(form.patient_id, outcome)

        record = DeceasedPatient(
            id=create_id("death"),
            name=clean(form.name),
            birth_year=birth_year,
            country=clean(form.country),
            department=form.department,
            room_number=clean(form.room_number),
            diagnosis=clean(form.diagnosis),
            death_report_done=form.death_report_done,
            recorded_by=self.actor,
            recorded_at=now,
            source_patient_id=source.id if source else None
        )
        outcome.value = record

        await self.state_manager.add_deceased(record)
        await self._persist(outcome, "create", EntityKind.DECEASED, record)

        if not record.death_report_done:
            await self.task_engine.generate_death_report_task(record, outcome)

        await self._log_activity(
            outcome,
            ActivityType.PATIENT_DECEASED,
            f"Recorded death: {record.name} from {record.department}",
            record.id
        )
        await self._notify(EventType.PATIENTS_CHANGED, {"record_id": record.id, "action": "deceased"}, record.id)
        return outcome
