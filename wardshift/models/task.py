"""
Task models for WardShift.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from wardshift.models.patient import Priority


class Task(BaseModel):
    """A ward task, entered by staff or generated by policy."""
    id: str
    title: str
    description: str = ""
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    due_time: datetime
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    added_by: str
    added_at: datetime = Field(default_factory=datetime.now)
    auto_generated: bool = False

    class Config:
        use_enum_values = True

    def is_overdue(self, now: datetime) -> bool:
        return not self.completed and self.due_time < now


class TaskForm(BaseModel):
    """Manual task form."""
    title: str = ""
    description: str = ""
    patient_id: Optional[str] = None
    due_time: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    completed: bool = False
