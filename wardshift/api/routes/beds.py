"""
Bed routes for WardShift API.
"""
from fastapi import APIRouter, Depends

from wardshift.api.deps import get_workspace, mutation_response
from wardshift.models.hospital import BedUpdateForm
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("")
async def list_bed_statuses(workspace: Workspace = Depends(get_workspace)):
    """Bed status for every department."""
    ledger = workspace.bed_ledger
    return [
        {**status.to_summary(), "gender_tracking": not ledger.is_aggregate(status.department)}
        for status in ledger.all_statuses()
    ]


@router.get("/{department}")
async def get_bed_status(department: str, workspace: Workspace = Depends(get_workspace)):
    return workspace.bed_ledger.get_status(department).to_summary()


@router.put("/{department}")
async def update_bed_status(department: str, form: BedUpdateForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.bed_ledger.update_bed_status(department, form)
    return mutation_response(outcome, "bed_status")
