"""
Tests for the patient roster, discharges and deaths.
"""

import asyncio
from datetime import timedelta

import pytest

from wardshift.core.exceptions import FormValidationError, NotFoundError
from wardshift.models.patient import DischargeForm, DeathForm
from wardshift.services.patient_registry import group_by_department
from wardshift.tests.conftest import make_patient_form


def add(workspace, **overrides):
    return asyncio.run(workspace.patients.add_patient(make_patient_form(**overrides))).value


# ========================
# Validation
# ========================

@pytest.mark.parametrize("field", ["name", "birth_year", "country", "diagnosis", "department", "room_number"])
def test_missing_required_field_rejected(workspace, field):
    form = make_patient_form(**{field: "   " if field != "birth_year" else None})

    with pytest.raises(FormValidationError) as exc:
        asyncio.run(workspace.patients.add_patient(form))

    assert exc.value.message.startswith("Please fill in required fields")
    assert workspace.state.get_all_patients() == []
    assert workspace.state.get_activity_logs() == []


@pytest.mark.parametrize("birth_year", [1899, 2026, "abc", "19x5"])
def test_birth_year_out_of_range_rejected(workspace, birth_year):
    with pytest.raises(FormValidationError):
        asyncio.run(workspace.patients.add_patient(make_patient_form(birth_year=birth_year)))
    assert workspace.state.get_all_patients() == []


@pytest.mark.parametrize("birth_year", [1900, 2025, "1975"])
def test_birth_year_bounds_accepted(workspace, birth_year):
    patient = add(workspace, birth_year=birth_year)
    assert patient.age == 2025 - int(birth_year)


# ========================
# Roster changes
# ========================

def test_add_patient(workspace, clock):
    outcome = asyncio.run(workspace.patients.add_patient(make_patient_form(name="  Ana Lopez ")))
    patient = outcome.value

    assert patient.name == "Ana Lopez"
    assert patient.age == 67
    assert patient.added_by == "Dr. Jane Carter"
    assert patient.added_at == clock.now
    assert patient.condition == "NSTEMI"
    assert workspace.patients.get_patient(patient.id) == patient
    assert outcome.activity.description == "Added new patient: Ana Lopez (NSTEMI) in Cardiology"
    assert outcome.activity.related_id == patient.id
    assert outcome.generated_tasks == []


def test_add_existing_patient_wording(workspace):
    outcome = asyncio.run(
        workspace.patients.add_patient(make_patient_form(is_new_patient=False))
    )
    assert outcome.activity.description.startswith("Added existing patient:")


def test_update_patient_keeps_identity(workspace, clock):
    patient = add(workspace)
    clock.now = clock.now + timedelta(hours=3)

    outcome = asyncio.run(
        workspace.patients.update_patient(patient.id, make_patient_form(room_number="14", diagnosis="STEMI"))
    )
    updated = outcome.value

    assert updated.id == patient.id
    assert updated.added_at == patient.added_at
    assert updated.room_number == "14"
    assert outcome.activity.description == "Updated new patient: Ana Lopez (STEMI) in Cardiology"
    assert len(workspace.patients.list_patients()) == 1


def test_update_unknown_patient(workspace):
    with pytest.raises(NotFoundError):
        asyncio.run(workspace.patients.update_patient("patient_missing", make_patient_form()))


def test_delete_patient(workspace):
    patient = add(workspace)
    outcome = asyncio.run(workspace.patients.delete_patient(patient.id))

    assert workspace.patients.list_patients() == []
    assert outcome.activity.description == "Deleted patient: Ana Lopez from Cardiology"
    assert workspace.patients.list_discharged() == []
    assert workspace.patients.list_deceased() == []

    with pytest.raises(NotFoundError):
        asyncio.run(workspace.patients.delete_patient(patient.id))


def test_roster_keeps_insertion_order(workspace):
    names = ["A", "B", "C"]
    for name in names:
        add(workspace, name=name)
    assert [p.name for p in workspace.patients.list_patients()] == names


# ========================
# Discharge and death
# ========================

def test_discharge_moves_patient_off_roster(workspace, clock):
    patient = add(workspace)
    form = DischargeForm(
        patient_id=patient.id,
        name=patient.name,
        birth_year=patient.birth_year,
        diagnosis=patient.condition,
        room_number=patient.room_number,
        notes="Home with family"
    )
    outcome = asyncio.run(workspace.patients.discharge_patient(form))
    record = outcome.value

    assert workspace.patients.list_patients() == []
    assert workspace.patients.list_discharged() == [record]
    assert record.source_patient_id == patient.id
    assert record.department == "Cardiology"
    assert record.discharged_by == "Dr. Jane Carter"
    assert outcome.activity.description == "Discharged patient: Ana Lopez"

    [task] = outcome.generated_tasks
    assert task.title == "Generate Discharge Report"
    assert task.priority == "Low"
    assert task.due_time == clock.now + timedelta(hours=24)
    assert task.auto_generated


def test_discharge_with_report_done_queues_nothing(workspace):
    form = DischargeForm(
        name="Walk-in", birth_year=1980, diagnosis="Syncope", room_number="3", discharge_report_done=True
    )
    outcome = asyncio.run(workspace.patients.discharge_patient(form))
    assert outcome.generated_tasks == []
    assert workspace.task_engine.list_tasks() == []
    assert outcome.value.source_patient_id is None


def test_discharge_requires_fields(workspace):
    with pytest.raises(FormValidationError) as exc:
        asyncio.run(workspace.patients.discharge_patient(DischargeForm(name="X", birth_year=1970)))
    assert exc.value.message == "Please fill in all required fields"
    assert workspace.patients.list_discharged() == []


def test_record_death(workspace, clock):
    patient = add(workspace, department="Intensive Care")
    form = DeathForm(
        patient_id=patient.id,
        name=patient.name,
        birth_year=patient.birth_year,
        country=patient.country,
        department=patient.department,
        room_number=patient.room_number,
        diagnosis=patient.condition
    )
    outcome = asyncio.run(workspace.patients.record_death(form))

    assert workspace.patients.list_patients() == []
    assert workspace.patients.list_deceased() == [outcome.value]
    assert outcome.activity.description == "Recorded death: Ana Lopez from Intensive Care"

    [task] = outcome.generated_tasks
    assert task.title == "Generate Death Report"
    assert task.priority == "High"
    assert task.due_time == clock.now + timedelta(hours=4)


TERMINAL_FORMS = {
    "discharge": lambda year: DischargeForm(
        name="X", birth_year=year, diagnosis="Syncope", room_number="3"
    ),
    "death": lambda year: DeathForm(
        name="X", birth_year=year, country="Spain", department="Emergency", room_number="1", diagnosis="Arrest"
    ),
}


@pytest.mark.parametrize("kind", ["discharge", "death"])
@pytest.mark.parametrize("birth_year", [1899, 2026, "not a year"])
def test_terminal_forms_reject_birth_year_out_of_range(workspace, kind, birth_year):
    patient = add(workspace)
    form = TERMINAL_FORMS[kind](birth_year).model_copy(update={"patient_id": patient.id})
    record = (
        workspace.patients.discharge_patient if kind == "discharge" else workspace.patients.record_death
    )

    with pytest.raises(FormValidationError):
        asyncio.run(record(form))

    assert workspace.patients.list_patients() == [patient]
    assert workspace.patients.list_discharged() == []
    assert workspace.patients.list_deceased() == []
    assert workspace.task_engine.list_tasks() == []
    assert len(workspace.state.get_activity_logs()) == 1


def test_record_death_requires_country(workspace):
    form = DeathForm(
        name="X", birth_year=1950, department="Emergency", room_number="1", diagnosis="Arrest"
    )
    with pytest.raises(FormValidationError):
        asyncio.run(workspace.patients.record_death(form))
    assert workspace.patients.list_deceased() == []


# ========================
# Grouping
# ========================

def test_group_by_department_first_appearance_order(workspace):
    add(workspace, name="P1", department="Emergency")
    add(workspace, name="P2", department="Cardiology")
    add(workspace, name="P3", department="Emergency")

    groups = group_by_department(workspace.patients.list_patients())
    assert list(groups) == ["Emergency", "Cardiology"]
    assert [p.name for p in groups["Emergency"]] == ["P1", "P3"]


def test_group_by_department_blank_goes_to_other(workspace):
    patient = add(workspace).model_copy(update={"department": ""})
    assert list(group_by_department([patient])) == ["Other"]


def test_patients_in_department(workspace):
    add(workspace, name="P1", department="Emergency")
    add(workspace, name="P2", department="Cardiology")
    assert [p.name for p in workspace.patients.patients_in_department("Emergency")] == ["P1"]
    assert workspace.patients.patients_in_department("Intensive Care") == []
