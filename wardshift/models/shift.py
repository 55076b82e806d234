"""
Shift session model for WardShift.
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

from wardshift.models.hospital import BedStatus


class ShiftSession(BaseModel):
    """A bounded work session shared by the staff on duty."""
    id: str
    user_name: str = Field(..., description="Staff member who started the shift")
    start_time: datetime = Field(default_factory=datetime.now)
    is_active: bool = True
    team_members: List[str] = Field(default_factory=list)
    notes: str = ""
    bed_statuses: List[BedStatus] = Field(default_factory=list, description="Ledger snapshot at start")
    end_approvals: List[str] = Field(default_factory=list)

    def has_member(self, user_name: str) -> bool:
        return user_name in self.team_members


class StartShiftRequest(BaseModel):
    notes: str = ""
