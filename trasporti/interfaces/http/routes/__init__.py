from fastapi import APIRouter

from .auth import router as auth_router
from .trasporti import router as trasporti_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router, tags=["Authentication"])
api_router.include_router(trasporti_router, prefix="/trasporti", tags=["Trasporti"])
