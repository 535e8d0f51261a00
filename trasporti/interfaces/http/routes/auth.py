from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from trasporti.interfaces.dependencies import get_auth_service, get_current_claims, require_admin
from trasporti.schemas.auth import LoginRequest, MeResponse, TokenResponse, UserCreate, UserRead
from trasporti.services import AuthService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Exchange credentials for a bearer token"""
    return await auth_service.login(credentials.username, credentials.password)


@router.get("/me", response_model=MeResponse)
async def me(claims: Dict[str, Any] = Depends(get_current_claims)) -> Dict[str, Any]:
    """Claims of the presented token"""
    return {"user": claims}


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    _: Dict[str, Any] = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserRead:
    user = await auth_service.create_user(user_data)
    return UserRead.model_validate(user)
