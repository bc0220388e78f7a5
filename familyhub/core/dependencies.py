"""
Core dependencies for route protection and group-scoped access checks
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from familyhub.database.supabase_client import get_supabase
from familyhub.core.access import AccessGateway
from familyhub.core.errors import Unauthenticated
from familyhub.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error off: a missing header must surface as 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the caller's identity from the bearer token"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return auth_service.get_current_user(credentials.credentials)


def get_access_gateway(supabase: Client = Depends(get_supabase)) -> AccessGateway:
    return AccessGateway(supabase)
