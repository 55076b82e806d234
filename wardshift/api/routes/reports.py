"""
Report routes for WardShift API.

The download endpoint is the export sink: a plain-text attachment.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from wardshift.api.deps import get_workspace
from wardshift.core.exceptions import ConflictError
from wardshift.services.report_compiler import compile_report, build_preview, report_filename
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("/preview")
async def report_preview(workspace: Workspace = Depends(get_workspace)):
    state = workspace.state
    preview = build_preview(
        state.get_all_patients(),
        state.get_all_tasks(),
        state.get_discharged(),
        state.get_deceased()
    )
    return {
        "can_download": state.get_current_shift() is not None,
        **preview.model_dump()
    }


@router.get("/download", response_class=PlainTextResponse)
async def download_report(workspace: Workspace = Depends(get_workspace)):
    """Compile the shift report; only available while a shift is active."""
    state = workspace.state
    shift = state.get_current_shift()
    if shift is None:
        raise ConflictError("Start a shift before generating the report")

    text = compile_report(
        shift,
        state.get_all_patients(),
        state.get_all_tasks(),
        state.get_activity_logs(),
        state.get_discharged(),
        state.get_deceased()
    )
    filename = report_filename(workspace.shifts.clock().date())
    return PlainTextResponse(
        text,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
