"""
Task routes for WardShift API.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from wardshift.api.deps import get_workspace, mutation_response
from wardshift.models.task import TaskForm
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("")
async def list_tasks(
    status: Optional[str] = Query(None, pattern="^(pending|completed)$"),
    workspace: Workspace = Depends(get_workspace)
):
    """Get tasks, optionally only pending or completed ones, soonest due first."""
    engine = workspace.task_engine
    if status == "pending":
        tasks = engine.pending_tasks()
    elif status == "completed":
        tasks = engine.completed_tasks()
    else:
        tasks = engine.list_tasks()
    tasks.sort(key=lambda t: t.due_time)
    return [t.model_dump(mode="json") for t in tasks]


@router.post("", status_code=201)
async def add_task(form: TaskForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.task_engine.add_task(form)
    return mutation_response(outcome, "task")


@router.put("/{task_id}")
async def update_task(task_id: str, form: TaskForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.task_engine.update_task(task_id, form)
    return mutation_response(outcome, "task")


@router.post("/{task_id}/toggle")
async def toggle_task(task_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.task_engine.toggle_task(task_id)
    return mutation_response(outcome, "task")


@router.delete("/{task_id}")
async def delete_task(task_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.task_engine.delete_task(task_id)
    return mutation_response(outcome, "task")
