"""
Core dependencies for route protection and session resolution
"""

from dataclasses import dataclass, field
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass
class SessionContext:
    """Principal behind the request, resolved once and injected into every route."""
    user_id: str
    email: Optional[str]
    is_admin: bool
    user_metadata: Dict[str, Any] = field(default_factory=dict)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for the resolved session."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_session(
    request: Request,
    user_data: dict = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionContext:
    """Resolve the session context (user + admin role). Cached for the lifetime of the request."""
    cache = _get_request_cache(request)
    if "session" in cache:
        return cache["session"]
    session = SessionContext(
        user_id=user_data["id"],
        email=user_data.get("email"),
        is_admin=auth_service.is_admin(user_data["id"]),
        user_metadata=user_data.get("user_metadata", {}),
    )
    cache["session"] = session
    return session


def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Dependency that rejects non-admin principals"""
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have admin permissions"
        )
    return session


def require_member(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Dependency for member-only actions (admins manage, they do not invest)"""
    if session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admins cannot perform member actions"
        )
    return session
