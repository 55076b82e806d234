"""
Models package for WardShift.
"""

from .user import (
    User,
    UserRole,
    LoginForm,
    SignupForm,
    AuthResult
)

from .hospital import (
    BedStatus,
    FreeBeds,
    BedUpdateForm
)

from .shift import (
    ShiftSession,
    StartShiftRequest
)

from .patient import (
    Patient,
    Priority,
    Gender,
    PatientStatus,
    PciAccess,
    RiskFactors,
    DischargedPatient,
    DeceasedPatient,
    PatientForm,
    DischargeForm,
    DeathForm
)

from .task import (
    Task,
    TaskForm
)

from .events import (
    ActivityType,
    ActivityLog,
    EventType,
    ServiceType,
    WorkspaceEvent
)

__all__ = [
    # User
    "User",
    "UserRole",
    "LoginForm",
    "SignupForm",
    "AuthResult",

    # Beds
    "BedStatus",
    "FreeBeds",
    "BedUpdateForm",

    # Shift
    "ShiftSession",
    "StartShiftRequest",

    # Patient
    "Patient",
    "Priority",
    "Gender",
    "PatientStatus",
    "PciAccess",
    "RiskFactors",
    "DischargedPatient",
    "DeceasedPatient",
    "PatientForm",
    "DischargeForm",
    "DeathForm",

    # Task
    "Task",
    "TaskForm",

    # Events
    "ActivityType",
    "ActivityLog",
    "EventType",
    "ServiceType",
    "WorkspaceEvent"
]
