"""
Report Compiler for WardShift.

Projects the workspace state into the plain-text shift report handed to
staff at shift change. Pure: the same input always yields the same text.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from wardshift.models.events import ActivityLog
from wardshift.models.patient import Patient, DischargedPatient, DeceasedPatient
from wardshift.models.shift import ShiftSession
from wardshift.models.task import Task
from wardshift.services.patient_registry import group_by_department

HEADER_RULE = "=" * 51
SECTION_RULE = "=" * 37
NOT_AVAILABLE = "N/A"


class ReportPreview(BaseModel):
    """Counts shown next to the download button."""
    total_patients: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    discharges: int = 0
    deaths: int = 0
    patients_by_department: Dict[str, int] = Field(default_factory=dict)


def _or_na(value: Optional[str]) -> str:
    return value if value else NOT_AVAILABLE


def _completion_line(done: bool) -> str:
    return "Report completed." if done else "Report not completed."


def _patient_lines(index: int, patient: Patient) -> List[str]:
    lines = [
        f"{index}. {patient.name} - {patient.birth_year} - {_or_na(patient.country)}   "
        f"Bed {_or_na(patient.room_number)}"
    ]
    optional_fields = [
        ("Chief complaints", patient.symptoms),
        ("ECG", patient.ecg),
        ("Labs", patient.lab_results),
        ("Dx", patient.condition),
        ("PCI", patient.pci_data),
    ]
    for label, value in optional_fields:
        if value and value.strip():
            lines.append(f"   {label}: {value}")
    lines.append("")
    return lines


def _discharge_lines(record: DischargedPatient) -> List[str]:
    lines = [f"{record.name} - {record.birth_year}"]
    if record.department:
        lines.append(f"{record.department} - Bed {_or_na(record.room_number)}")
    if record.diagnosis:
        lines.append(f"Dx: {record.diagnosis}")
    if record.notes:
        lines.append(f"Notes: {record.notes}")
    lines.append(_completion_line(record.discharge_report_done))
    lines.append("")
    return lines


def _death_lines(index: int, record: DeceasedPatient) -> List[str]:
    lines = [f"{index}. {record.name} - {record.birth_year} - {_or_na(record.country)}"]
    if record.department:
        lines.append(f"{record.department} - Bed {_or_na(record.room_number)}")
    if record.diagnosis:
        lines.append(f"Dx: {record.diagnosis}")
    lines.append(_completion_line(record.death_report_done))
    lines.append("")
    return lines


def compile_report(
    shift: ShiftSession,
    patients: Sequence[Patient],
    tasks: Sequence[Task],
    logs: Sequence[ActivityLog],
    discharged: Sequence[DischargedPatient],
    deceased: Sequence[DeceasedPatient]
) -> str:
    """
    Render the shift report.

    Active patients are grouped by department in order of first appearance;
    discharge and death sections appear only when they have entries. Tasks
    and logs are accepted for the preview counts and do not appear in the
    exported text.
    """
    lines = [
        f"SHIFT REPORT FOR {shift.start_time.strftime('%d.%m.%Y, %H:%M:%S')}",
        HEADER_RULE,
        "",
        "PATIENTS BY DEPARTMENT:",
        SECTION_RULE,
        "",
    ]

    for department, department_patients in group_by_department(list(patients)).items():
        lines.append(f"{department}:")
        for index, patient in enumerate(department_patients, start=1):
            lines.extend(_patient_lines(index, patient))
        lines.append("")

    if discharged:
        lines.extend(["DISCHARGES:", SECTION_RULE])
        for record in discharged:
            lines.extend(_discharge_lines(record))

    if deceased:
        lines.extend(["DEATHS:", SECTION_RULE])
        for index, record in enumerate(deceased, start=1):
            lines.extend(_death_lines(index, record))

    return "\n".join(lines) + "\n"


def build_preview(
    patients: Sequence[Patient],
    tasks: Sequence[Task],
    discharged: Sequence[DischargedPatient],
    deceased: Sequence[DeceasedPatient]
) -> ReportPreview:
    groups = group_by_department(list(patients))
    return ReportPreview(
        total_patients=len(patients),
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.completed),
        discharges=len(discharged),
        deaths=len(deceased),
        patients_by_department={dept: len(items) for dept, items in groups.items()}
    )


def report_filename(day: date) -> str:
    return f"shift-report-{day.isoformat()}.txt"
