"""
Shift routes for WardShift API.

Join/leave/end against an id that is not the active shift answer 200 with
``changed: false``.
"""
from fastapi import APIRouter, Depends

from wardshift.api.deps import get_workspace, mutation_response
from wardshift.models.shift import StartShiftRequest
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("/current")
async def current_shift(workspace: Workspace = Depends(get_workspace)):
    shift = workspace.shifts.current_shift()
    return {"shift": shift.model_dump(mode="json") if shift else None}


@router.post("/start")
async def start_shift(request: StartShiftRequest, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.shifts.start_shift(request.notes)
    return mutation_response(outcome, "shift")


@router.post("/{shift_id}/join")
async def join_shift(shift_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.shifts.join_shift(shift_id, workspace.user.full_name)
    return mutation_response(outcome, "shift")


@router.post("/{shift_id}/leave")
async def leave_shift(shift_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.shifts.leave_shift(shift_id, workspace.user.full_name)
    return mutation_response(outcome, "shift")


@router.post("/{shift_id}/end")
async def end_shift(shift_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.shifts.end_shift(shift_id)
    return mutation_response(outcome, "shift")
