"""
Authentication routes for WardShift API.

Login opens a workspace and returns its session token; logout closes it.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from wardshift.core.exceptions import AuthenticationError, ConflictError
from wardshift.api.deps import get_auth_service, get_sessions, get_session_token, get_workspace
from wardshift.models.user import LoginForm, SignupForm
from wardshift.services.auth import AuthService
from wardshift.services.workspace import SessionRegistry, Workspace

router = APIRouter()


@router.post("/signup", status_code=201)
def signup(form: SignupForm, auth: AuthService = Depends(get_auth_service)):
    """Create a staff account. Sync so password hashing runs in the threadpool."""
    result = auth.create_account(form)
    if not result.success:
        if result.error == "Username already exists":
            raise ConflictError(result.error)
        raise HTTPException(status_code=400, detail=result.error)
    return {"user": result.user.model_dump(mode="json")}


@router.post("/login")
async def login(
    form: LoginForm,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionRegistry = Depends(get_sessions)
):
    """Authenticate and open a workspace."""
    result = await run_in_threadpool(auth.authenticate, form.username, form.password)
    if not result.success:
        raise AuthenticationError(result.error)

    token = sessions.open(result.user)
    return {
        "token": token,
        "user": result.user.model_dump(mode="json")
    }


@router.post("/logout")
async def logout(
    token: str = Depends(get_session_token),
    sessions: SessionRegistry = Depends(get_sessions)
):
    """Close the workspace and discard its state."""
    closed = await sessions.close(token)
    if not closed:
        raise AuthenticationError("Not signed in")
    return {"status": "logged_out"}


@router.get("/me")
async def me(workspace: Workspace = Depends(get_workspace)):
    return workspace.user.model_dump(mode="json")
