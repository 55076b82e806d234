"""
Tests for manual task CRUD and policy-generated tasks.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from wardshift.core.exceptions import FormValidationError, NotFoundError
from wardshift.models.patient import DischargeForm
from wardshift.models.task import TaskForm
from wardshift.tests.conftest import make_pci_form


def add_patient(workspace, form):
    return asyncio.run(workspace.patients.add_patient(form))


# ========================
# Sheath removal
# ========================

def test_sheath_tasks_with_heparin(workspace, clock):
    outcome = add_patient(workspace, make_pci_form(radial=True, femoral=True, heparin=True, room_number="7"))
    patient = outcome.value

    radial, femoral = outcome.generated_tasks
    assert radial.title == "Radial Sheath Removal"
    assert radial.due_time == clock.now + timedelta(hours=2)
    assert femoral.title == "Femoral Sheath Removal"
    assert femoral.due_time == clock.now + timedelta(hours=6)

    for task in (radial, femoral):
        assert task.priority == "High"
        assert task.patient_id == patient.id
        assert task.patient_name == patient.name
        assert task.added_by == "System (Auto-generated)"
        assert task.auto_generated
        assert not task.completed

    assert radial.description == (
        "Remove radial sheath for patient Ana Lopez in room 7 (2 hours post-heparin)"
    )
    assert len(workspace.task_engine.list_tasks()) == 2


def test_sheath_task_without_heparin_is_immediate(workspace, clock):
    outcome = add_patient(workspace, make_pci_form(femoral=True))

    [task] = outcome.generated_tasks
    assert task.title == "Femoral Sheath Removal"
    assert task.priority == "Critical"
    assert task.due_time == clock.now
    assert task.description.endswith("(immediate - no heparin)")


def test_no_access_no_tasks(workspace):
    outcome = add_patient(workspace, make_pci_form(heparin=True))
    assert outcome.generated_tasks == []
    assert workspace.task_engine.list_tasks() == []


def test_generated_tasks_have_no_own_log_entry(workspace):
    add_patient(workspace, make_pci_form(radial=True, femoral=True))
    logs = workspace.state.get_activity_logs()
    assert len(logs) == 1
    assert logs[0].type == "patient_added"


def test_invalid_patient_generates_nothing(workspace):
    with pytest.raises(FormValidationError):
        add_patient(workspace, make_pci_form(radial=True, name=""))
    assert workspace.task_engine.list_tasks() == []


def test_update_does_not_regenerate_sheath_tasks(workspace):
    patient = add_patient(workspace, make_pci_form(radial=True)).value
    outcome = asyncio.run(
        workspace.patients.update_patient(patient.id, make_pci_form(radial=True, femoral=True))
    )
    assert outcome.generated_tasks == []
    assert len(workspace.task_engine.list_tasks()) == 1


# ========================
# Manual CRUD
# ========================

def make_task_form(clock, **overrides):
    fields = {"title": "Check potassium", "due_time": clock.now + timedelta(hours=1), "priority": "Medium"}
    fields.update(overrides)
    return TaskForm(**fields)


def test_add_manual_task(workspace, clock):
    outcome = asyncio.run(workspace.task_engine.add_task(make_task_form(clock)))
    task = outcome.value

    assert task.added_by == "Dr. Jane Carter"
    assert not task.auto_generated
    assert outcome.activity.description == "Added task: Check potassium"
    assert workspace.task_engine.get_task(task.id) == task


def test_add_task_links_patient_name(workspace, clock):
    patient = add_patient(workspace, make_pci_form()).value
    task = asyncio.run(workspace.task_engine.add_task(make_task_form(clock, patient_id=patient.id))).value
    assert task.patient_name == "Ana Lopez"


@pytest.mark.parametrize("overrides", [{"title": "  "}, {"due_time": None}])
def test_add_task_rejects_bad_form(workspace, clock, overrides):
    with pytest.raises(FormValidationError):
        asyncio.run(workspace.task_engine.add_task(make_task_form(clock, **overrides)))
    assert workspace.task_engine.list_tasks() == []


def test_toggle_task(workspace, clock):
    task = asyncio.run(workspace.task_engine.add_task(make_task_form(clock))).value

    done = asyncio.run(workspace.task_engine.toggle_task(task.id))
    assert done.value.completed
    assert done.activity.type == "task_completed"
    assert workspace.task_engine.completed_tasks() == [done.value]

    reopened = asyncio.run(workspace.task_engine.toggle_task(task.id))
    assert not reopened.value.completed
    assert reopened.activity.description == "Reopened task: Check potassium"
    assert workspace.task_engine.pending_tasks() == [reopened.value]


def test_update_keeps_auto_generated_flag(workspace, clock):
    [generated] = add_patient(workspace, make_pci_form(radial=True)).generated_tasks
    outcome = asyncio.run(
        workspace.task_engine.update_task(generated.id, make_task_form(clock, title="Remove radial sheath"))
    )
    assert outcome.value.auto_generated
    assert outcome.value.added_by == "System (Auto-generated)"
    assert outcome.value.title == "Remove radial sheath"


def test_delete_task(workspace, clock):
    task = asyncio.run(workspace.task_engine.add_task(make_task_form(clock))).value
    outcome = asyncio.run(workspace.task_engine.delete_task(task.id))

    assert outcome.activity.description == "Deleted task: Check potassium"
    assert workspace.task_engine.list_tasks() == []
    with pytest.raises(NotFoundError):
        asyncio.run(workspace.task_engine.toggle_task(task.id))


def test_is_overdue(workspace, clock):
    task = asyncio.run(workspace.task_engine.add_task(make_task_form(clock))).value
    assert not task.is_overdue(clock.now)
    assert task.is_overdue(clock.now + timedelta(hours=2))


def test_aware_due_time_stored_as_local_naive(workspace, clock):
    add_patient(workspace, make_pci_form(radial=True, heparin=True))
    due = datetime(2025, 3, 14, 10, 0, tzinfo=timezone.utc)

    task = asyncio.run(workspace.task_engine.add_task(make_task_form(clock, due_time=due))).value

    assert task.due_time.tzinfo is None
    assert task.due_time == due.astimezone().replace(tzinfo=None)
    ordered = sorted(workspace.task_engine.list_tasks(), key=lambda t: t.due_time)
    assert len(ordered) == 2
    assert not task.is_overdue(clock.now - timedelta(days=1))


def test_task_for_discharged_patient_can_still_be_updated(workspace, clock):
    outcome = add_patient(workspace, make_pci_form(radial=True, heparin=True))
    patient = outcome.value
    [sheath_task] = outcome.generated_tasks
    asyncio.run(workspace.patients.discharge_patient(DischargeForm(
        patient_id=patient.id, name=patient.name, birth_year=patient.birth_year,
        diagnosis=patient.condition, room_number=patient.room_number, discharge_report_done=True
    )))

    form = make_task_form(clock, title=sheath_task.title, patient_id=patient.id, completed=True)
    updated = asyncio.run(workspace.task_engine.update_task(sheath_task.id, form)).value

    assert updated.completed
    assert updated.patient_id == patient.id
    assert updated.patient_name == "Ana Lopez"
    assert updated.auto_generated


def test_task_for_unknown_patient_keeps_id_without_name(workspace, clock):
    task = asyncio.run(
        workspace.task_engine.add_task(make_task_form(clock, patient_id="patient_gone"))
    ).value
    assert task.patient_id == "patient_gone"
    assert task.patient_name is None
