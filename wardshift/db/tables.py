"""
ORM tables for WardShift.

Domain records are stored as JSON documents keyed by their identifier;
users get a proper relational table because authentication queries them.
"""
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, JSON

from wardshift.db.connection import Base


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    full_name = Column(String(200), nullable=False)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    department = Column(String(100), nullable=False, default="")
    role = Column(String(20), nullable=False, default="staff")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class _DocumentColumns:
    """Shared columns for JSON document tables."""
    id = Column(String(100), primary_key=True)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class PatientRecord(_DocumentColumns, Base):
    __tablename__ = "patients"


class TaskRecord(_DocumentColumns, Base):
    __tablename__ = "tasks"


class ActivityLogRecord(_DocumentColumns, Base):
    __tablename__ = "activity_logs"


class ShiftRecord(_DocumentColumns, Base):
    __tablename__ = "shifts"


class DischargedPatientRecord(_DocumentColumns, Base):
    __tablename__ = "discharged_patients"


class DeceasedPatientRecord(_DocumentColumns, Base):
    __tablename__ = "deceased_patients"


class BedStatusRecord(_DocumentColumns, Base):
    """Keyed by department name."""
    __tablename__ = "bed_statuses"
