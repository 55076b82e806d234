"""
Patient models for WardShift.

Active patients live in the registry; discharged and deceased patients are
re-materialized as narrower terminal records.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union, Dict, Any
from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Clinical priority shared by patients and tasks."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class PatientStatus(str, Enum):
    ACTIVE = "active"


class PciAccess(BaseModel):
    """Vascular access used during a PCI procedure."""
    radial: bool = False
    femoral: bool = False
    periprocedural_heparin: bool = False

    @property
    def has_access(self) -> bool:
        return self.radial or self.femoral


class RiskFactors(BaseModel):
    """Cardiovascular risk factors."""
    smoking: bool = False
    hypertension: bool = False
    diabetes: bool = False
    obesity: bool = False
    dyslipidemia: bool = False

    def labels(self) -> list:
        """Short badge labels for the factors that are present."""
        names = [
            ("smoking", "Smoking"),
            ("hypertension", "HTN"),
            ("diabetes", "DM"),
            ("obesity", "Obesity"),
            ("dyslipidemia", "Dyslip"),
        ]
        return [label for field, label in names if getattr(self, field)]


class Patient(BaseModel):
    """A patient on the active roster."""
    id: str
    name: str
    age: int = Field(..., ge=0)
    birth_year: int
    gender: Gender = Gender.MALE
    country: str

    # Clinical details
    condition: str = Field(..., description="Working diagnosis")
    symptoms: str = Field("", description="Chief complaints")
    ecg: str = ""
    lab_results: str = ""
    pci_data: str = ""
    pci_access: PciAccess = Field(default_factory=PciAccess)
    risk_factors: RiskFactors = Field(default_factory=RiskFactors)
    allergies: str = ""
    medications: str = ""
    notes: str = ""

    # Placement
    department: str
    room_number: str
    priority: Priority = Priority.MEDIUM

    # Metadata
    added_by: str
    added_at: datetime = Field(default_factory=datetime.now)
    is_new_patient: bool = True
    status: PatientStatus = PatientStatus.ACTIVE

    class Config:
        use_enum_values = True

    def to_summary(self) -> Dict[str, Any]:
        """Return a summary dict for frontend display."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "birth_year": self.birth_year,
            "department": self.department,
            "room_number": self.room_number,
            "priority": self.priority,
            "condition": self.condition,
            "is_new_patient": self.is_new_patient,
            "risk_factors": self.risk_factors.labels(),
        }


class DischargedPatient(BaseModel):
    """Terminal record of a discharged patient."""
    id: str
    name: str
    birth_year: int
    diagnosis: str
    room_number: str
    notes: str = ""
    department: str = ""
    discharge_report_done: bool = False
    discharged_by: str
    discharged_at: datetime = Field(default_factory=datetime.now)
    source_patient_id: Optional[str] = None

    class Config:
        frozen = True


class DeceasedPatient(BaseModel):
    """Terminal record of a patient death."""
    id: str
    name: str
    birth_year: int
    country: str
    department: str
    room_number: str
    diagnosis: str
    death_report_done: bool = False
    recorded_by: str
    recorded_at: datetime = Field(default_factory=datetime.now)
    source_patient_id: Optional[str] = None

    class Config:
        frozen = True


# ========================
# Form inputs
# ========================

BirthYearInput = Optional[Union[int, str]]


class PatientForm(BaseModel):
    """Raw new/edit patient form as submitted by the dashboard."""
    name: str = ""
    birth_year: BirthYearInput = None
    gender: Gender = Gender.MALE
    country: str = ""
    diagnosis: str = ""
    chief_complaints: str = ""
    ecg: str = ""
    lab_results: str = ""
    pci_data: str = ""
    pci_access: PciAccess = Field(default_factory=PciAccess)
    risk_factors: RiskFactors = Field(default_factory=RiskFactors)
    allergies: str = ""
    medications: str = ""
    notes: str = ""
    department: str = ""
    room_number: str = ""
    priority: Priority = Priority.MEDIUM
    is_new_patient: bool = True


class DischargeForm(BaseModel):
    """Discharge form. ``patient_id`` links the record to the active patient it replaces."""
    patient_id: Optional[str] = None
    name: str = ""
    birth_year: BirthYearInput = None
    diagnosis: str = ""
    room_number: str = ""
    notes: str = ""
    discharge_report_done: bool = False


class DeathForm(BaseModel):
    """Death record form. ``patient_id`` links the record to the active patient it replaces."""
    patient_id: Optional[str] = None
    name: str = ""
    birth_year: BirthYearInput = None
    country: str = ""
    department: str = ""
    room_number: str = ""
    diagnosis: str = ""
    death_report_done: bool = False
