"""
Tests for the document store, optimistic sync and the identity provider.
"""

import asyncio
import threading

import pytest
from pydantic import ValidationError

from wardshift.core.exceptions import PersistenceError
from wardshift.db.repository import EntityKind
from wardshift.models.hospital import BedUpdateForm
from wardshift.models.user import SignupForm
from wardshift.services.auth import AuthService
from wardshift.services.workspace import Workspace
from wardshift.tests.conftest import make_patient_form, make_pci_form


class FailingStore:
    """Store whose every write fails."""

    def __init__(self):
        self.calls = []

    def _fail(self, operation, kind):
        self.calls.append((operation, kind))
        raise PersistenceError(f"Failed to {operation} {kind.value} record: connection refused")

    def create(self, kind, entity):
        self._fail("create", kind)

    def update(self, kind, entity):
        self._fail("update", kind)

    def delete(self, kind, record_id):
        self._fail("delete", kind)


# ========================
# Document store
# ========================

def test_store_round_trip_through_workspace(user, clock, store):
    workspace = Workspace(user, store=store, clock=clock)
    outcome = asyncio.run(workspace.patients.add_patient(make_pci_form(radial=True, heparin=True)))

    assert outcome.synced
    [patient_doc] = store.list(EntityKind.PATIENTS)
    assert patient_doc["id"] == outcome.value.id
    assert patient_doc["name"] == "Ana Lopez"
    assert len(store.list(EntityKind.TASKS)) == 1
    assert store.list(EntityKind.ACTIVITY_LOGS)[0]["type"] == "patient_added"


def test_store_update_and_delete(user, clock, store):
    workspace = Workspace(user, store=store, clock=clock)
    patient = asyncio.run(workspace.patients.add_patient(make_patient_form())).value

    asyncio.run(workspace.patients.update_patient(patient.id, make_patient_form(room_number="20")))
    assert store.list(EntityKind.PATIENTS)[0]["room_number"] == "20"

    asyncio.run(workspace.patients.delete_patient(patient.id))
    assert store.list(EntityKind.PATIENTS) == []
    assert store.delete(EntityKind.PATIENTS, patient.id) is False


def test_bed_status_keyed_by_department(user, clock, store):
    workspace = Workspace(user, store=store, clock=clock)
    asyncio.run(workspace.bed_ledger.update_bed_status("Cardiology", _beds(2, 2)))
    asyncio.run(workspace.bed_ledger.update_bed_status("Cardiology", _beds(1, 0)))

    [doc] = store.list(EntityKind.BED_STATUSES)
    assert doc["department"] == "Cardiology"
    assert doc["occupied_beds"] == 23


def test_duplicate_create_raises_persistence_error(user, clock, store):
    workspace = Workspace(user, store=store, clock=clock)
    patient = asyncio.run(workspace.patients.add_patient(make_patient_form())).value
    with pytest.raises(PersistenceError):
        store.create(EntityKind.PATIENTS, patient)


def _beds(male, female):
    return BedUpdateForm(male=male, female=female)


# ========================
# Optimistic sync
# ========================

def test_failed_write_keeps_in_memory_change(user, clock):
    failing = FailingStore()
    workspace = Workspace(user, store=failing, clock=clock)

    outcome = asyncio.run(workspace.patients.add_patient(make_pci_form(femoral=True)))

    assert not outcome.synced
    assert len(outcome.sync_errors) == 3
    assert workspace.patients.list_patients() == [outcome.value]
    assert len(workspace.task_engine.list_tasks()) == 1
    assert len(workspace.state.get_activity_logs()) == 1
    assert ("create", EntityKind.PATIENTS) in failing.calls


def test_failed_delete_still_removes_from_roster(user, clock):
    workspace = Workspace(user, store=FailingStore(), clock=clock)
    patient = asyncio.run(workspace.patients.add_patient(make_patient_form())).value

    outcome = asyncio.run(workspace.patients.delete_patient(patient.id))
    assert workspace.patients.list_patients() == []
    assert outcome.sync_errors


# ========================
# Identity provider
# ========================

@pytest.fixture
def auth(session_factory):
    return AuthService(session_factory)


def test_seeded_accounts_can_log_in(auth):
    assert auth.seed_demo_accounts() == 4
    assert auth.seed_demo_accounts() == 0

    result = auth.authenticate("john", "password")
    assert result.success
    assert result.user.full_name == "Dr. John Smith"
    assert result.user.role == "doctor"


def test_wrong_password_and_unknown_user(auth):
    auth.seed_demo_accounts()
    assert auth.authenticate("john", "nope").error == "Invalid password"
    assert auth.authenticate("nobody", "password").error == "Invalid credentials"


def test_create_account_rejects_duplicate_username(auth):
    form = SignupForm(full_name="Nurse Lee", username="lee", password="s3cret", role="nurse")
    assert auth.create_account(form).success

    duplicate = auth.create_account(form)
    assert not duplicate.success
    assert duplicate.error == "Username already exists"


class RecordingStore:
    """Store that remembers which thread each write ran on."""

    def __init__(self):
        self.threads = []

    def create(self, kind, entity):
        self.threads.append(threading.get_ident())

    update = create

    def delete(self, kind, record_id):
        self.threads.append(threading.get_ident())


def test_store_writes_run_off_the_event_loop_thread(user, clock):
    store = RecordingStore()
    workspace = Workspace(user, store=store, clock=clock)

    asyncio.run(workspace.patients.add_patient(make_pci_form(radial=True)))

    assert len(store.threads) == 3
    assert threading.get_ident() not in store.threads


def test_signup_form_rejects_blank_username():
    with pytest.raises(ValidationError):
        SignupForm(full_name="Nurse Blank", username="   ", password="pw")
    with pytest.raises(ValidationError):
        SignupForm(full_name="  ", username="blank", password="pw")
