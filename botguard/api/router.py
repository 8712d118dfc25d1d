from fastapi import APIRouter

from botguard.api.v1 import auth, settings as settings_api
from botguard.core.config import get_settings

settings = get_settings()
api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(settings_api.router, prefix="/settings", tags=["Settings"])
