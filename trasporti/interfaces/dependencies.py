from typing import Any, Dict, Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from trasporti.core.config import Settings
from trasporti.core.enums import UserRole
from trasporti.core.exceptions import ForbiddenError, UnauthorizedError
from trasporti.core.security import decode_access_token
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.services import AuthService, TrasportoService

# Missing header is reported by get_current_claims as a 401
security = HTTPBearer(auto_error=False)


def get_database(request: Request) -> DatabaseManager:
    """Store handle opened by the application lifespan."""
    return request.app.state.database


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(database: DatabaseManager = Depends(get_database)) -> Iterator[Session]:
    """Request-scoped database session."""
    with database.get_session() as session:
        yield session


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Decoded bearer token claims."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token")
    return decode_access_token(credentials.credentials, settings.security)


async def require_admin(claims: Dict[str, Any] = Depends(get_current_claims)) -> Dict[str, Any]:
    if claims.get("role") != UserRole.ADMIN.value:
        raise ForbiddenError("Admin role required", action="admin")
    return claims


def get_trasporto_service(session: Session = Depends(get_session)) -> TrasportoService:
    return TrasportoService(session)


def get_auth_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(session, settings)
