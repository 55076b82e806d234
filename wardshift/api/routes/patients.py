"""
Patient routes for WardShift API.

Roster CRUD plus discharge and death recording.
"""
from fastapi import APIRouter, Depends

from wardshift.api.deps import get_workspace, mutation_response
from wardshift.models.patient import PatientForm, DischargeForm, DeathForm
from wardshift.services.workspace import Workspace

router = APIRouter()


@router.get("")
async def list_patients(workspace: Workspace = Depends(get_workspace)):
    """Get all active patients."""
    return [p.model_dump(mode="json") for p in workspace.patients.list_patients()]


@router.post("", status_code=201)
async def add_patient(form: PatientForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.patients.add_patient(form)
    return mutation_response(outcome, "patient")


@router.get("/by-department")
async def patients_by_department(workspace: Workspace = Depends(get_workspace)):
    groups = workspace.patients.patients_by_department()
    return {
        department: [p.to_summary() for p in patients]
        for department, patients in groups.items()
    }


@router.get("/by-department/{department}")
async def patients_in_department(department: str, workspace: Workspace = Depends(get_workspace)):
    return [p.to_summary() for p in workspace.patients.patients_in_department(department)]


@router.get("/discharged")
async def list_discharged(workspace: Workspace = Depends(get_workspace)):
    return [r.model_dump(mode="json") for r in workspace.patients.list_discharged()]


@router.get("/deceased")
async def list_deceased(workspace: Workspace = Depends(get_workspace)):
    return [r.model_dump(mode="json") for r in workspace.patients.list_deceased()]


@router.post("/discharge", status_code=201)
async def discharge_patient(form: DischargeForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.patients.discharge_patient(form)
    return mutation_response(outcome, "record")


@router.post("/death", status_code=201)
async def record_death(form: DeathForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.patients.record_death(form)
    return mutation_response(outcome, "record")


@router.get("/{patient_id}")
async def get_patient(patient_id: str, workspace: Workspace = Depends(get_workspace)):
    """Get detailed patient information."""
    return workspace.patients.get_patient(patient_id).model_dump(mode="json")


@router.put("/{patient_id}")
async def update_patient(patient_id: str, form: PatientForm, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.patients.update_patient(patient_id, form)
    return mutation_response(outcome, "patient")


@router.delete("/{patient_id}")
async def delete_patient(patient_id: str, workspace: Workspace = Depends(get_workspace)):
    outcome = await workspace.patients.delete_patient(patient_id)
    return mutation_response(outcome, "patient")
