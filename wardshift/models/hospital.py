"""
Bed occupancy models for WardShift.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class FreeBeds(BaseModel):
    """Free bed counts split by patient gender."""
    male: int = Field(0, ge=0)
    female: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.male + self.female


class BedStatus(BaseModel):
    """Occupancy of one department. Replaced wholesale on every update."""
    department: str
    total_beds: int = Field(..., ge=0)
    occupied_beds: int = Field(..., ge=0)
    free_beds: FreeBeds = Field(default_factory=FreeBeds)

    @property
    def total_free(self) -> int:
        return self.free_beds.total

    @property
    def occupancy_rate(self) -> float:
        """Occupancy as a percentage of total beds."""
        if self.total_beds == 0:
            return 0.0
        return (self.occupied_beds / self.total_beds) * 100

    def to_summary(self) -> Dict[str, Any]:
        """Return summary for frontend."""
        return {
            "department": self.department,
            "total_beds": self.total_beds,
            "occupied_beds": self.occupied_beds,
            "free_beds": self.free_beds.model_dump(),
            "total_free": self.total_free,
            "occupancy_rate": round(self.occupancy_rate, 1),
        }


class BedUpdateForm(BaseModel):
    """
    Free-bed input for one department.

    ``total`` is used by departments tracked as a single aggregate;
    the others fill in ``male`` and ``female``.
    """
    male: int = 0
    female: int = 0
    total: Optional[int] = None
