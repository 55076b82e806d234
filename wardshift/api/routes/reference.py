"""
Reference data and dashboard routes for WardShift API.
"""
from fastapi import APIRouter, Depends, Query

from wardshift.api.deps import get_workspace
from wardshift.core.reference_data import (
    DEPARTMENTS,
    DEPARTMENT_SHORT_NAMES,
    DEPARTMENT_BED_COUNTS,
    CORONARY_UNIT,
    search_countries
)
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("/reference/departments")
async def list_departments():
    return [
        {
            "name": department,
            "short_name": DEPARTMENT_SHORT_NAMES.get(department, department),
            "total_beds": DEPARTMENT_BED_COUNTS.get(department, 0),
            "gender_tracking": department != CORONARY_UNIT
        }
        for department in DEPARTMENTS
    ]


@router.get("/reference/countries")
async def list_countries(q: str = Query("", max_length=100)):
    return search_countries(q)


@router.get("/activity")
async def activity_log(
    limit: int = Query(50, ge=1, le=500),
    workspace: Workspace = Depends(get_workspace)
):
    """Activity log, most recent first."""
    return [log.model_dump(mode="json") for log in workspace.state.get_activity_logs(limit)]


@router.get("/dashboard")
async def dashboard(workspace: Workspace = Depends(get_workspace)):
    """Home view summary."""
    shift = workspace.shifts.current_shift()
    summary = workspace.state.get_state_summary()
    summary["shift"] = shift.model_dump(mode="json") if shift else None
    summary["recent_activity"] = [
        log.model_dump(mode="json") for log in workspace.state.get_activity_logs(5)
    ]
    return summary
