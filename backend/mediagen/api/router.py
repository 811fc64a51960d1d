"""Master API router — mounts all sub-routers."""

from fastapi import APIRouter

from mediagen.api.auth import router as auth_router
from mediagen.api.models import router as models_router
from mediagen.api.operations import router as operations_router

api_router = APIRouter(prefix="/api", redirect_slashes=False)

api_router.include_router(auth_router, prefix="/auth", tags=["Credentials"])
api_router.include_router(operations_router, prefix="/operations", tags=["Operations"])
api_router.include_router(models_router, prefix="/models", tags=["Models"])
