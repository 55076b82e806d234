"""
Activity log and workspace event models for WardShift.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class ActivityType(str, Enum):
    """Kinds of state-changing actions recorded in the activity log."""
    # Shift
    SHIFT_STARTED = "shift_started"
    SHIFT_ENDED = "shift_ended"
    SHIFT_JOINED = "shift_joined"
    SHIFT_LEFT = "shift_left"

    # Patients
    PATIENT_ADDED = "patient_added"
    PATIENT_UPDATED = "patient_updated"
    PATIENT_DELETED = "patient_deleted"
    PATIENT_DISCHARGED = "patient_discharged"
    PATIENT_DECEASED = "patient_deceased"

    # Tasks
    TASK_ADDED = "task_added"
    TASK_UPDATED = "task_updated"
    TASK_COMPLETED = "task_completed"
    TASK_DELETED = "task_deleted"

    # Beds
    BED_UPDATED = "bed_updated"


class ActivityLog(BaseModel):
    """One append-only audit entry."""
    id: str
    type: ActivityType
    description: str
    user: str
    timestamp: datetime = Field(default_factory=datetime.now)
    related_id: Optional[str] = None

    class Config:
        use_enum_values = True


class EventType(str, Enum):
    """Types of events published on a workspace event bus."""
    ACTIVITY_LOGGED = "activity_logged"
    SHIFT_CHANGED = "shift_changed"
    PATIENTS_CHANGED = "patients_changed"
    TASKS_CHANGED = "tasks_changed"
    BEDS_CHANGED = "beds_changed"


class ServiceType(str, Enum):
    """Services that publish events."""
    SHIFT_TRACKER = "shift_tracker"
    PATIENT_REGISTRY = "patient_registry"
    TASK_ENGINE = "task_engine"
    BED_LEDGER = "bed_ledger"
    SYSTEM = "system"


class WorkspaceEvent(BaseModel):
    """Event broadcast to realtime subscribers of a workspace."""
    id: str = Field(..., description="Unique event ID")
    event_type: EventType
    timestamp: datetime = Field(default_factory=datetime.now)
    source: ServiceType = ServiceType.SYSTEM
    payload: Dict[str, Any] = Field(default_factory=dict)
    correlation_id: Optional[str] = Field(None, description="ID of the record the event is about")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source.value,
            "payload": self.payload,
            "correlation_id": self.correlation_id
        }
