"""
Shared fixtures for the WardShift test suite.
"""

from datetime import datetime

import pytest

from wardshift.db.connection import build_session_factory
from wardshift.db.repository import PersistenceProvider
from wardshift.models.patient import PatientForm, PciAccess
from wardshift.models.user import User, UserRole
from wardshift.services.workspace import Workspace

FIXED_NOW = datetime(2025, 3, 14, 8, 30, 0)


class FixedClock:
    """Settable stand-in for datetime.now."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def user():
    return User(
        id="user_test",
        full_name="Dr. Jane Carter",
        username="jane",
        department="Cardiology",
        role=UserRole.DOCTOR
    )


@pytest.fixture
def workspace(user, clock):
    """In-memory workspace with the default department table."""
    return Workspace(user, store=None, clock=clock)


@pytest.fixture
def session_factory():
    return build_session_factory("sqlite://")


@pytest.fixture
def store(session_factory):
    return PersistenceProvider(session_factory)


def make_patient_form(**overrides) -> PatientForm:
    fields = {
        "name": "Ana Lopez",
        "birth_year": 1958,
        "country": "Spain",
        "diagnosis": "NSTEMI",
        "department": "Cardiology",
        "room_number": "12",
    }
    fields.update(overrides)
    return PatientForm(**fields)


def make_pci_form(radial=False, femoral=False, heparin=False, **overrides) -> PatientForm:
    access = PciAccess(radial=radial, femoral=femoral, periprocedural_heparin=heparin)
    return make_patient_form(pci_access=access, **overrides)
