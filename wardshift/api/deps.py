"""
FastAPI dependencies and response helpers shared by the routers.
"""

from typing import Any, Dict, Optional

from fastapi import Header, Request

from wardshift.core.config import Config
from wardshift.core.exceptions import AuthenticationError
from wardshift.services.auth import AuthService
from wardshift.services.base_service import MutationOutcome
from wardshift.services.workspace import SessionRegistry, Workspace

SYNC_WARNING = "Saved locally, but syncing with the database failed."


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_session_token(x_session_token: Optional[str] = Header(None, alias=Config.SESSION_HEADER)) -> str:
    if not x_session_token:
        raise AuthenticationError("Not signed in")
    return x_session_token


def get_workspace(request: Request, x_session_token: Optional[str] = Header(None, alias=Config.SESSION_HEADER)) -> Workspace:
    """Resolve the caller's workspace from the session header."""
    workspace = get_sessions(request).get(x_session_token)
    if workspace is None:
        raise AuthenticationError("Not signed in")
    return workspace


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


def mutation_response(outcome: MutationOutcome, key: str) -> Dict[str, Any]:
    """Serialize a mutation outcome for the dashboard."""
    body: Dict[str, Any] = {
        key: _dump(outcome.value),
        "changed": outcome.changed,
    }
    if outcome.activity is not None:
        body["activity"] = _dump(outcome.activity)
    if outcome.generated_tasks:
        body["generated_tasks"] = [_dump(t) for t in outcome.generated_tasks]
    if outcome.sync_errors:
        body["warning"] = SYNC_WARNING
    return body
