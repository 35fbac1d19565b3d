from fastapi import APIRouter

from codeassist.api.v1 import chat, generation_settings, health, models, sessions, upload
from codeassist.core.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(chat.router)
api_router.include_router(sessions.router)
api_router.include_router(generation_settings.router)
api_router.include_router(upload.router)
api_router.include_router(models.router)
